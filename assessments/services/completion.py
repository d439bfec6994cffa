"""
Form completion percentages.

Completion is measured against the registry checklist of every sub-section
in a category, including sub-sections that have never been submitted.
"""

import math

from ..sections import ARRAY_NON_EMPTY, COMPANY_INFO, REGISTRY, SCORED_CATEGORIES
from .points import get_path, is_non_empty_list, is_present


def round_half_up(value):
    return int(math.floor(value + 0.5))


def percentage(filled, total):
    if total <= 0:
        return 0
    return min(100, max(0, round_half_up(100 * filled / total)))


def is_filled(spec, section_data):
    value = get_path(section_data, spec.path)
    if spec.kind == ARRAY_NON_EMPTY:
        return is_non_empty_list(value)
    return is_present(value)


def section_counts(schema, section_data):
    """(filled, total) checklist counts for one sub-section."""
    entries = schema.checklist()
    if not isinstance(section_data, dict):
        return 0, len(entries)
    filled = sum(1 for spec in entries if is_filled(spec, section_data))
    return filled, len(entries)


def category_completion(category, category_data):
    """Completion percentage (0-100) of a scored category."""
    if category not in SCORED_CATEGORIES:
        raise KeyError(f"'{category}' is not a scored ESG category")
    category_data = category_data if isinstance(category_data, dict) else {}
    filled = total = 0
    for name, schema in REGISTRY[category].items():
        section_filled, section_total = section_counts(schema, category_data.get(name))
        filled += section_filled
        total += section_total
    return percentage(filled, total)


def company_info_completion(company_info):
    filled, total = section_counts(COMPANY_INFO, company_info)
    return percentage(filled, total)


def record_completion(record_data):
    """Completion of every category of a record-shaped mapping."""
    completion = {
        category: category_completion(category, record_data.get(category))
        for category in SCORED_CATEGORIES
    }
    completion["companyInfo"] = company_info_completion(record_data.get("companyInfo"))
    return completion
