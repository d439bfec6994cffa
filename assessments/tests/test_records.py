from unittest import mock

from django.db import IntegrityError
from django.test import TestCase, override_settings

from accounts.models import CustomUser, RoleChoices
from assessments.exceptions import (
    ConcurrentUpdateError, InvalidPatchError, RecordLockedError, RecordNotFoundError,
)
from assessments.models import ESGRecord
from assessments.services import records as records_service
from assessments.services.records import (
    apply_patch, get_dashboard, get_record_for_user, override_section_points,
    review_record, submit_record,
)

RENEWABLE = {'value': '50', 'certificate': 'cert.pdf'}


class ApplyPatchTest(TestCase):
    """Tests for merging supplier submissions into stored records"""

    def setUp(self):
        self.supplier = CustomUser.objects.create_user(email='supplier@example.com', password='pass12345')

    def test_first_patch_creates_draft_record(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)

        self.assertEqual(ESGRecord.objects.count(), 1)
        self.assertEqual(record.status, ESGRecord.Status.DRAFT)
        self.assertEqual(record.user, self.supplier)
        self.assertEqual(record.company, self.supplier)
        self.assertEqual(record.environment['renewableEnergy']['points'], 20)
        self.assertEqual(record.overall_score['environment'], 4)
        self.assertEqual(record.overall_score['total'], 1)
        self.assertEqual(record.version, 1)

    def test_scores_are_persisted(self):
        apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        stored = ESGRecord.objects.get(user=self.supplier)
        self.assertEqual(stored.overall_score, {
            'environment': 4, 'social': 0, 'quality': 0, 'governance': 0, 'total': 1,
        })

    def test_water_consumption_points_follow_merged_content(self):
        record = apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '100'})
        self.assertEqual(record.environment['waterConsumption']['points'], 10)

        record = apply_patch(self.supplier, 'environment', 'waterConsumption', {'targets': '80', 'progress': '50%'})
        section = record.environment['waterConsumption']
        self.assertEqual(section['points'], 20)
        self.assertEqual(section['baseline'], '100')

    def test_sibling_sections_survive(self):
        apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '100'})
        apply_patch(self.supplier, 'social', 'hrManagement', {'humanRightsPolicy': 'yes'})

        stored = ESGRecord.objects.get(user=self.supplier)
        self.assertEqual(stored.environment['renewableEnergy']['value'], '50')
        self.assertEqual(stored.environment['waterConsumption']['baseline'], '100')
        self.assertEqual(stored.social['hrManagement']['humanRightsPolicy'], 'yes')
        self.assertEqual(stored.overall_score['environment'], 6)
        self.assertEqual(stored.overall_score['social'], 2.5)

    def test_nested_fields_are_not_dropped(self):
        apply_patch(self.supplier, 'social', 'occupationalSafety', {
            'ltifr': '0.3', 'safetyTraining': {'programs': ['fire'], 'coverage': '90%'},
        })
        record = apply_patch(self.supplier, 'social', 'occupationalSafety', {
            'safetyTraining': {'coverage': '95%'},
        })
        self.assertEqual(record.social['occupationalSafety']['safetyTraining'], {
            'programs': ['fire'], 'coverage': '95%',
        })
        self.assertEqual(record.social['occupationalSafety']['points'], 20)

    def test_resubmission_is_idempotent(self):
        first = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        first_scores = dict(first.overall_score)
        second = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)

        self.assertEqual(second.environment['renewableEnergy']['points'], 20)
        self.assertEqual(second.overall_score, first_scores)
        self.assertEqual(second.version, 2)

    def test_company_info_patch(self):
        record = apply_patch(self.supplier, 'companyInfo', None, {
            'companyName': 'Acme', 'registrationNumber': 'R-1', 'establishmentYear': 1999,
        })
        self.assertEqual(record.company_info['companyName'], 'Acme')
        self.assertEqual(record.company_info['points'], 10)
        self.assertEqual(get_dashboard(self.supplier)['completion']['companyInfo'], 50)
        # Company info does not feed the category scores.
        self.assertEqual(record.overall_score['total'], 0)

    def test_invalid_patch_creates_nothing(self):
        with self.assertRaises(InvalidPatchError):
            apply_patch(self.supplier, 'environment', 'solarPanels', {'value': '1'})
        with self.assertRaises(InvalidPatchError):
            apply_patch(self.supplier, 'environment', 'emissionControl', {'disposalMethods': 'landfill'})
        self.assertFalse(ESGRecord.objects.exists())

    def test_invalid_patch_leaves_record_untouched(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        with self.assertRaises(InvalidPatchError):
            apply_patch(self.supplier, 'environment', 'renewableEnergy', None)
        record.refresh_from_db()
        self.assertEqual(record.version, 1)

    def test_member_writes_to_company_record(self):
        company = CustomUser.objects.create_user(
            email='company@example.com', password='pass12345', role=RoleChoices.COMPANY,
        )
        member = CustomUser.objects.create_user(email='member@example.com', password='pass12345', company=company)

        record = apply_patch(member, 'quality', 'processControl', {'value': 'SPC'})
        self.assertEqual(record.user, member)
        self.assertEqual(record.company, company)
        self.assertEqual(get_record_for_user(member).pk, record.pk)

    def test_edits_after_submit_allowed_by_default(self):
        apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        submit_record(self.supplier)
        record = apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '1'})
        self.assertEqual(record.status, ESGRecord.Status.SUBMITTED)

    @override_settings(ESG_ALLOW_EDITS_AFTER_SUBMIT=False)
    def test_edits_after_submit_can_be_locked(self):
        apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        submit_record(self.supplier)
        with self.assertRaises(RecordLockedError):
            apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '1'})

    @override_settings(ESG_ALLOW_EDITS_AFTER_SUBMIT=False)
    def test_rejected_records_stay_editable(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        submit_record(self.supplier)
        review_record(record.pk, 'rejected', 'Missing certificates')
        record = apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '1'})
        self.assertIn('waterConsumption', record.environment)


class ConcurrentPatchTest(TestCase):
    """Compare-and-swap retries when the record changes mid-patch"""

    def setUp(self):
        self.supplier = CustomUser.objects.create_user(email='supplier@example.com', password='pass12345')
        apply_patch(self.supplier, 'quality', 'processControl', {'value': 'SPC'})

    def test_concurrent_patches_both_survive(self):
        real_merge = records_service.merge_patch
        raced = []

        def racing_merge(*args, **kwargs):
            # A competing patch commits between our read and our write.
            if not raced:
                raced.append(True)
                apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '100'})
            return real_merge(*args, **kwargs)

        with mock.patch('assessments.services.records.merge_patch', side_effect=racing_merge):
            with self.assertLogs('assessments.services.records', level='WARNING') as logs:
                record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)

        self.assertTrue(any('Version conflict' in line for line in logs.output))
        stored = ESGRecord.objects.get(pk=record.pk)
        self.assertEqual(stored.environment['waterConsumption']['baseline'], '100')
        self.assertEqual(stored.environment['renewableEnergy']['value'], '50')
        self.assertEqual(stored.quality['processControl']['value'], 'SPC')
        self.assertEqual(stored.overall_score['environment'], 6)
        self.assertEqual(stored.version, 3)

    @override_settings(ESG_PATCH_MAX_RETRIES=2)
    def test_gives_up_after_max_retries(self):
        with mock.patch.object(ESGRecord, 'compare_and_swap', return_value=False) as cas:
            with self.assertRaises(ConcurrentUpdateError):
                apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        self.assertEqual(cas.call_count, 2)

        stored = ESGRecord.objects.get(user=self.supplier)
        self.assertNotIn('renewableEnergy', stored.environment)

    def test_lazy_creation_race_retries_as_update(self):
        other = CustomUser.objects.create_user(email='other@example.com', password='pass12345')
        real_create = records_service._create_record

        def racing_create(owner, company, category, section, data):
            real_create(owner, company, 'environment', 'waterConsumption', {'baseline': '100'})
            raise IntegrityError('duplicate key value violates unique constraint')

        with mock.patch('assessments.services.records._create_record', side_effect=racing_create):
            record = apply_patch(other, 'environment', 'renewableEnergy', RENEWABLE)

        self.assertEqual(ESGRecord.objects.filter(user=other).count(), 1)
        self.assertEqual(set(record.environment), {'waterConsumption', 'renewableEnergy'})

    def racing_get_record(self):
        """get_record that lets a supplier patch commit after the first read."""
        real_get = records_service.get_record
        raced = []

        def racing_get(record_id):
            record = real_get(record_id)
            if not raced:
                raced.append(True)
                apply_patch(self.supplier, 'environment', 'waterConsumption', {'baseline': '100'})
            return record

        return racing_get

    def test_override_keeps_concurrent_patch(self):
        record = ESGRecord.objects.get(user=self.supplier)

        with mock.patch('assessments.services.records.get_record', side_effect=self.racing_get_record()):
            with self.assertLogs('assessments.services.records', level='WARNING') as logs:
                override_section_points(record.pk, 'quality', 'processControl', 3)

        self.assertTrue(any('Version conflict' in line for line in logs.output))
        stored = ESGRecord.objects.get(pk=record.pk)
        self.assertEqual(stored.environment['waterConsumption']['baseline'], '100')
        self.assertEqual(stored.quality['processControl']['points'], 3)
        self.assertEqual(stored.version, 3)

    def test_review_keeps_concurrent_patch(self):
        admin = CustomUser.objects.create_platform_admin(email='admin@example.com', password='pass12345')
        record = ESGRecord.objects.get(user=self.supplier)

        with mock.patch('assessments.services.records.get_record', side_effect=self.racing_get_record()):
            reviewed = review_record(record.pk, 'approved', 'ok', reviewer=admin)

        stored = ESGRecord.objects.get(pk=record.pk)
        self.assertIn('waterConsumption', stored.environment)
        self.assertIn('waterConsumption', reviewed.environment)
        self.assertEqual(stored.status, ESGRecord.Status.APPROVED)
        self.assertEqual(stored.review_comments, 'ok')
        self.assertEqual(stored.reviewed_by, admin)
        self.assertEqual(stored.overall_score, reviewed.overall_score)

    @override_settings(ESG_PATCH_MAX_RETRIES=2)
    def test_override_gives_up_after_max_retries(self):
        record = ESGRecord.objects.get(user=self.supplier)
        with mock.patch.object(ESGRecord, 'compare_and_swap', return_value=False):
            with self.assertRaises(ConcurrentUpdateError):
                override_section_points(record.pk, 'quality', 'processControl', 3)

        stored = ESGRecord.objects.get(pk=record.pk)
        self.assertNotEqual(stored.quality['processControl']['points'], 3)


class RecordLifecycleTest(TestCase):
    """Submission, review and manual point overrides"""

    def setUp(self):
        self.supplier = CustomUser.objects.create_user(email='supplier@example.com', password='pass12345')
        self.admin = CustomUser.objects.create_platform_admin(email='admin@example.com', password='pass12345')

    def test_read_paths_do_not_create_records(self):
        with self.assertRaises(RecordNotFoundError):
            get_record_for_user(self.supplier)
        with self.assertRaises(RecordNotFoundError):
            get_dashboard(self.supplier)
        self.assertFalse(ESGRecord.objects.exists())

    def test_submit_keeps_scores(self):
        apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        record = submit_record(self.supplier)

        self.assertEqual(record.status, ESGRecord.Status.SUBMITTED)
        self.assertIsNotNone(record.status_changed_at)
        self.assertEqual(record.overall_score['environment'], 4)

    def test_submit_without_record(self):
        with self.assertRaises(RecordNotFoundError):
            submit_record(self.supplier)

    def test_review(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        submit_record(self.supplier)

        reviewed = review_record(record.pk, 'approved', 'Looks good', reviewer=self.admin)
        self.assertEqual(reviewed.status, ESGRecord.Status.APPROVED)
        self.assertEqual(reviewed.review_comments, 'Looks good')
        self.assertEqual(reviewed.reviewed_by, self.admin)

    def test_review_rejects_other_statuses(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        for status in ('draft', 'submitted', 'archived'):
            with self.assertRaises(InvalidPatchError):
                review_record(record.pk, status)
        record.refresh_from_db()
        self.assertEqual(record.status, ESGRecord.Status.DRAFT)

    def test_review_missing_record(self):
        with self.assertRaises(RecordNotFoundError):
            review_record(4242, 'approved')

    def test_override_points_bypasses_calculator(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        before = record.environment['renewableEnergy']['lastUpdated']

        record = override_section_points(record.pk, 'environment', 'renewableEnergy', 45, remarks='Verified on site')
        section = record.environment['renewableEnergy']
        self.assertEqual(section['points'], 45)
        self.assertEqual(section['remarks'], 'Verified on site')
        self.assertEqual(section['value'], '50')
        self.assertGreaterEqual(section['lastUpdated'], before)
        self.assertEqual(record.overall_score['environment'], 9)

    def test_override_keeps_remarks_when_omitted(self):
        record = apply_patch(self.supplier, 'quality', 'processControl', {'value': 'SPC', 'remarks': 'draft note'})
        record = override_section_points(record.pk, 'quality', 'processControl', '12.5')
        self.assertEqual(record.quality['processControl']['remarks'], 'draft note')
        self.assertEqual(record.quality['processControl']['points'], 12.5)

    def test_override_absent_section(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        record = override_section_points(record.pk, 'governance', 'dataPrivacy', 10)
        self.assertEqual(record.governance['dataPrivacy']['points'], 10)
        self.assertEqual(record.overall_score['governance'], 2)

    def test_override_company_info(self):
        record = apply_patch(self.supplier, 'companyInfo', None, {'companyName': 'Acme'})
        record = override_section_points(record.pk, 'companyInfo', None, 18, remarks='Complete')
        self.assertEqual(record.company_info['points'], 18)
        self.assertEqual(record.company_info['remarks'], 'Complete')

    def test_override_validation(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        with self.assertRaises(InvalidPatchError):
            override_section_points(record.pk, 'environment', 'renewableEnergy', 'lots')
        with self.assertRaises(InvalidPatchError):
            override_section_points(record.pk, 'environment', 'solarPanels', 10)
        with self.assertRaises(RecordNotFoundError):
            override_section_points(4242, 'environment', 'renewableEnergy', 10)

    def test_save_recomputes_scores(self):
        record = apply_patch(self.supplier, 'environment', 'renewableEnergy', RENEWABLE)
        record.environment['renewableEnergy']['points'] = 5
        record.save()
        record.refresh_from_db()
        self.assertEqual(record.overall_score['environment'], 1)
        self.assertEqual(record.version, 2)
