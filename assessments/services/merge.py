"""
Partial-merge engine for ESG sub-sections.

Suppliers submit one sub-section at a time, often only a handful of its
fields. The functions here fold such a patch into the stored data without
losing fields the patch does not mention.
"""

import copy
import logging

import jsonschema

from ..exceptions import InvalidPatchError
from ..sections import (
    CATEGORIES, COMPANY_INFO_CATEGORY, GENERAL_SECTION,
    NESTED_OPTIONAL, REGISTRY, get_section,
)

logger = logging.getLogger(__name__)

# Keys a caller may not set through a patch; they are owned by the engine.
PROTECTED_KEYS = ("points", "lastUpdated")


def resolve_section(category, section):
    """
    Validate a category/section pair and return the section name to use.

    Company info is flat, so its section may be omitted.
    """
    if not category or category not in CATEGORIES:
        raise InvalidPatchError(
            f"Invalid category '{category}'",
            allowed=list(CATEGORIES),
        )
    if category == COMPANY_INFO_CATEGORY and section in (None, "", GENERAL_SECTION, COMPANY_INFO_CATEGORY):
        return GENERAL_SECTION
    if not section:
        raise InvalidPatchError("Missing required field: section")
    if section not in REGISTRY[category]:
        raise InvalidPatchError(
            f"Invalid section '{section}' for category '{category}'",
            allowed=list(REGISTRY[category].keys()),
        )
    return section


def validate_patch(category, section, data):
    """
    Check a patch before anything is mutated.

    Returns the resolved section name. Raises InvalidPatchError for unknown
    targets, missing data, or values of the wrong shape for array and nested
    fields.
    """
    section = resolve_section(category, section)
    if data is None:
        raise InvalidPatchError("Missing required field: data")
    if not isinstance(data, dict):
        raise InvalidPatchError("Field 'data' must be an object")

    schema = get_section(category, section)
    error = jsonschema.exceptions.best_match(
        jsonschema.Draft7Validator(schema.json_schema()).iter_errors(data)
    )
    if error is not None:
        field = ".".join(str(part) for part in error.absolute_path)
        logger.warning(f"Rejected patch for {category}.{section}: {field} {error.message}")
        raise InvalidPatchError(
            f"Field '{field}' has the wrong type: {error.message}",
            field=field,
        )
    return section


def _merge_nested(spec, previous, incoming):
    if incoming is None:
        return None
    merged = dict(previous) if isinstance(previous, dict) else {}
    known = {child.path for child in spec.children}
    for key, value in incoming.items():
        if key not in known:
            logger.debug(f"Ignoring unknown nested key '{spec.path}.{key}'")
            continue
        merged[key] = copy.deepcopy(value)
    return merged


def merge_section(existing, schema, data, now):
    """
    Merge ``data`` into a stored sub-section and return the new sub-section.

    Top-level keys overwrite, nested optional objects merge key by key, arrays
    are replaced wholesale when present and kept when absent. ``existing`` is
    left untouched. ``lastUpdated`` is stamped with ``now`` (ISO string).
    """
    merged = copy.deepcopy(existing) if isinstance(existing, dict) else {}
    merged.setdefault("points", 0)

    for key, value in data.items():
        if key in PROTECTED_KEYS:
            continue
        if key == "remarks":
            merged["remarks"] = value
            continue
        spec = schema.field(key)
        if spec is None:
            logger.debug(f"Ignoring unknown field '{key}' for section '{schema.name}'")
            continue
        if spec.kind == NESTED_OPTIONAL:
            merged[key] = _merge_nested(spec, merged.get(key), value)
        else:
            merged[key] = copy.deepcopy(value)

    merged["lastUpdated"] = now
    return merged


def merge_patch(category_data, category, section, data, now):
    """
    Apply a patch to one category's stored data and return the new mapping.

    For scored categories ``category_data`` maps section names to
    sub-sections and only the targeted sub-section changes. Company info is
    flat and is merged as a single section.
    """
    section = validate_patch(category, section, data)
    schema = get_section(category, section)

    if category == COMPANY_INFO_CATEGORY:
        return merge_section(category_data, schema, data, now)

    updated = copy.deepcopy(category_data) if isinstance(category_data, dict) else {}
    updated[section] = merge_section(updated.get(section), schema, data, now)
    return updated
