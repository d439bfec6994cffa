"""
Section schema registry for ESG records.

Every category has a fixed, ordered set of sub-sections. The size of that set
is the denominator used when averaging category scores, so the registry is
built once at import time and never altered afterwards.
"""

from types import MappingProxyType

from django.core.exceptions import ImproperlyConfigured

from . import company_info, environment, governance, quality, social
from .base import (
    ARRAY_NON_EMPTY, BOOKKEEPING_FIELDS, FIELD_KINDS, NESTED_OPTIONAL, SCALAR,
    FieldSpec, SectionSchema,
)
from .company_info import COMPANY_INFO, GENERAL_SECTION


ENVIRONMENT = "environment"
SOCIAL = "social"
QUALITY = "quality"
GOVERNANCE = "governance"
COMPANY_INFO_CATEGORY = "companyInfo"

# Scored categories, in the order they appear in overallScore.
SCORED_CATEGORIES = (ENVIRONMENT, SOCIAL, QUALITY, GOVERNANCE)
CATEGORIES = SCORED_CATEGORIES + (COMPANY_INFO_CATEGORY,)

CATEGORY_TITLES = {
    ENVIRONMENT: "Environment",
    SOCIAL: "Social",
    QUALITY: "Quality",
    GOVERNANCE: "Governance",
    COMPANY_INFO_CATEGORY: "Company Info",
}


def _build_registry():
    modules = {
        ENVIRONMENT: environment,
        SOCIAL: social,
        QUALITY: quality,
        GOVERNANCE: governance,
        COMPANY_INFO_CATEGORY: company_info,
    }
    registry = {}
    for category, module in modules.items():
        sections = getattr(module, "SECTIONS", ())
        if not sections:
            raise ImproperlyConfigured(f"ESG category '{category}' defines no sections")
        by_name = {}
        for schema in sections:
            if schema.name in by_name:
                raise ImproperlyConfigured(
                    f"Duplicate section '{schema.name}' in ESG category '{category}'"
                )
            by_name[schema.name] = schema
        registry[category] = MappingProxyType(by_name)
    return MappingProxyType(registry)


REGISTRY = _build_registry()


def is_known(category, section=None):
    if category not in REGISTRY:
        return False
    return section is None or section in REGISTRY[category]


def section_names(category):
    """Fixed, ordered sub-section names of a category."""
    return tuple(REGISTRY[category].keys())


def get_section(category, section):
    """Return the SectionSchema for a category/section pair, or raise KeyError."""
    try:
        return REGISTRY[category][section]
    except KeyError:
        raise KeyError(f"Unknown ESG section '{category}.{section}'") from None


def fields_of(category, section):
    """Ordered field specs of a sub-section."""
    return get_section(category, section).fields


def checklist(category, section):
    """Completion checklist of a sub-section, nested fields expanded to leaves."""
    return get_section(category, section).checklist()


def section_title(category, section):
    schema = REGISTRY.get(category, {}).get(section)
    return schema.title if schema else section


__all__ = [
    "REGISTRY", "CATEGORIES", "SCORED_CATEGORIES", "CATEGORY_TITLES",
    "ENVIRONMENT", "SOCIAL", "QUALITY", "GOVERNANCE", "COMPANY_INFO_CATEGORY",
    "GENERAL_SECTION", "COMPANY_INFO",
    "SCALAR", "ARRAY_NON_EMPTY", "NESTED_OPTIONAL", "FIELD_KINDS", "BOOKKEEPING_FIELDS",
    "FieldSpec", "SectionSchema",
    "is_known", "section_names", "get_section", "fields_of", "checklist", "section_title",
]
