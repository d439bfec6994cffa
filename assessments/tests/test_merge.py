import copy

from django.test import SimpleTestCase

from assessments.exceptions import InvalidPatchError
from assessments.sections import get_section
from assessments.services.merge import merge_patch, merge_section, resolve_section, validate_patch

NOW = '2024-05-01T10:00:00+00:00'
LATER = '2024-05-02T10:00:00+00:00'


class MergePatchTest(SimpleTestCase):
    """Tests for folding partial submissions into stored category data"""

    def test_creates_only_targeted_section(self):
        result = merge_patch({}, 'environment', 'renewableEnergy', {'value': '50'}, NOW)
        self.assertEqual(list(result), ['renewableEnergy'])
        self.assertEqual(result['renewableEnergy']['value'], '50')
        self.assertEqual(result['renewableEnergy']['points'], 0)
        self.assertEqual(result['renewableEnergy']['lastUpdated'], NOW)

    def test_siblings_are_preserved(self):
        stored = {
            'renewableEnergy': {'value': '50', 'certificate': 'a.pdf', 'points': 20, 'lastUpdated': NOW},
        }
        result = merge_patch(stored, 'environment', 'waterConsumption', {'baseline': '100'}, LATER)
        self.assertEqual(result['renewableEnergy'], stored['renewableEnergy'])
        self.assertEqual(result['waterConsumption']['baseline'], '100')

    def test_input_is_not_mutated(self):
        stored = {'emissionControl': {'scopeEmissions': {'scope1': '1'}, 'points': 10}}
        snapshot = copy.deepcopy(stored)
        merge_patch(stored, 'environment', 'emissionControl', {'scopeEmissions': {'scope2': '2'}}, NOW)
        self.assertEqual(stored, snapshot)

    def test_nested_objects_merge_key_wise(self):
        stored = {'emissionControl': {'scopeEmissions': {'scope1': '10', 'scope2': '20'}}}
        result = merge_patch(stored, 'environment', 'emissionControl', {'scopeEmissions': {'scope1': '15'}}, NOW)
        self.assertEqual(result['emissionControl']['scopeEmissions'], {'scope1': '15', 'scope2': '20'})

    def test_arrays_replaced_when_present_kept_when_absent(self):
        stored = {'emissionControl': {'disposalMethods': ['landfill'], 'chemicalList': ['acid']}}
        result = merge_patch(stored, 'environment', 'emissionControl', {'disposalMethods': ['recycling']}, NOW)
        self.assertEqual(result['emissionControl']['disposalMethods'], ['recycling'])
        self.assertEqual(result['emissionControl']['chemicalList'], ['acid'])

    def test_top_level_scalars_overwrite(self):
        stored = {'waterConsumption': {'baseline': '100', 'targets': '90'}}
        result = merge_patch(stored, 'environment', 'waterConsumption', {'targets': '80'}, NOW)
        self.assertEqual(result['waterConsumption']['baseline'], '100')
        self.assertEqual(result['waterConsumption']['targets'], '80')

    def test_bookkeeping_keys_in_patch_are_ignored(self):
        stored = {'renewableEnergy': {'value': '50', 'points': 20, 'lastUpdated': NOW}}
        result = merge_patch(
            stored, 'environment', 'renewableEnergy',
            {'points': 999, 'lastUpdated': '1999-01-01T00:00:00Z', 'remarks': 'checked'},
            LATER,
        )
        self.assertEqual(result['renewableEnergy']['points'], 20)
        self.assertEqual(result['renewableEnergy']['lastUpdated'], LATER)
        self.assertEqual(result['renewableEnergy']['remarks'], 'checked')

    def test_unknown_fields_are_dropped(self):
        result = merge_patch({}, 'quality', 'processControl', {'value': 'yes', 'colour': 'blue'}, NOW)
        self.assertNotIn('colour', result['processControl'])

    def test_company_info_merges_flat(self):
        stored = {'companyName': 'Acme', 'points': 10}
        result = merge_patch(stored, 'companyInfo', None, {'businessType': 'Manufacturing'}, NOW)
        self.assertEqual(result['companyName'], 'Acme')
        self.assertEqual(result['businessType'], 'Manufacturing')
        self.assertEqual(result['lastUpdated'], NOW)

    def test_merge_section_on_missing_existing(self):
        schema = get_section('environment', 'waterConsumption')
        result = merge_section(None, schema, {'baseline': '5'}, NOW)
        self.assertEqual(result, {'baseline': '5', 'points': 0, 'lastUpdated': NOW})


class PatchValidationTest(SimpleTestCase):
    """Malformed patches are rejected before anything is merged"""

    def test_unknown_category(self):
        with self.assertRaises(InvalidPatchError):
            validate_patch('finance', 'budget', {'value': 1})

    def test_unknown_section(self):
        with self.assertRaises(InvalidPatchError) as ctx:
            validate_patch('environment', 'solarPanels', {'value': 1})
        self.assertIn('renewableEnergy', ctx.exception.context['allowed'])

    def test_missing_section(self):
        with self.assertRaises(InvalidPatchError):
            validate_patch('social', '', {'value': 1})

    def test_missing_data(self):
        with self.assertRaises(InvalidPatchError):
            validate_patch('environment', 'renewableEnergy', None)

    def test_non_object_data(self):
        with self.assertRaises(InvalidPatchError):
            validate_patch('environment', 'renewableEnergy', ['value'])

    def test_array_field_must_be_list(self):
        with self.assertRaises(InvalidPatchError) as ctx:
            validate_patch('environment', 'emissionControl', {'disposalMethods': 'landfill'})
        self.assertEqual(ctx.exception.context['field'], 'disposalMethods')

    def test_nested_field_must_be_object(self):
        with self.assertRaises(InvalidPatchError):
            validate_patch('environment', 'emissionControl', {'scopeEmissions': '12'})

    def test_nested_array_must_be_list(self):
        with self.assertRaises(InvalidPatchError) as ctx:
            validate_patch('social', 'occupationalSafety', {'safetyTraining': {'programs': 'fire drill'}})
        self.assertEqual(ctx.exception.context['field'], 'safetyTraining.programs')

    def test_invalid_patch_is_value_error(self):
        with self.assertRaises(ValueError):
            validate_patch('environment', 'nope', {})

    def test_company_info_section_aliases(self):
        for section in (None, '', 'general', 'companyInfo'):
            self.assertEqual(resolve_section('companyInfo', section), 'general')

    def test_merge_patch_rejects_before_merging(self):
        with self.assertRaises(InvalidPatchError):
            merge_patch({}, 'environment', 'emissionControl', {'chemicalList': 'acid'}, NOW)
