"""
Point rules for ESG sub-sections.

Each sub-section is scored as base points for having content, a certificate
bonus, and an optional section-specific bonus. Bonus rules live in a lookup
table keyed by (category, section); sections without an entry only get the
base and certificate points.
"""

import logging
import math

from ..sections import BOOKKEEPING_FIELDS, get_section

logger = logging.getLogger(__name__)

BASE_POINTS = 10
CERTIFICATE_BONUS = 5
SECTION_BONUS = 10
RENEWABLE_ENERGY_BONUS_CAP = 15


def is_present(value):
    """A value counts as provided unless it is missing, None or an empty string."""
    return value is not None and value != ""


def is_non_empty_list(value):
    return isinstance(value, list) and len(value) > 0


def get_path(data, path):
    """Resolve a dotted path inside nested dicts, returning None when absent."""
    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def parse_number(value):
    """Parse a submitted value as a float. Anything unparseable yields None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip().rstrip("%"))
        except (TypeError, ValueError):
            return None
    if not math.isfinite(number):
        return None
    return number


# --- Section bonus rules ---

def renewable_energy_bonus(data):
    number = parse_number(data.get("value"))
    if number is None:
        return 0
    return min(max(number, 0) / 10, RENEWABLE_ENERGY_BONUS_CAP)


def all_present(*paths):
    def rule(data):
        return SECTION_BONUS if all(is_present(get_path(data, p)) for p in paths) else 0
    return rule


def present_and_non_empty(present_path, list_path):
    def rule(data):
        if is_present(get_path(data, present_path)) and is_non_empty_list(get_path(data, list_path)):
            return SECTION_BONUS
        return 0
    return rule


def all_non_empty(*list_paths):
    def rule(data):
        return SECTION_BONUS if all(is_non_empty_list(get_path(data, p)) for p in list_paths) else 0
    return rule


BONUS_RULES = {
    ("environment", "renewableEnergy"): renewable_energy_bonus,
    ("environment", "waterConsumption"): all_present("targets", "progress"),
    ("environment", "rainwaterHarvesting"): all_present("volume", "infrastructure"),
    ("environment", "emissionControl"): present_and_non_empty("chemicalManagement", "disposalMethods"),
    ("environment", "resourceConservation"): present_and_non_empty("wasteDiversion", "certifications"),
    ("social", "occupationalSafety"): present_and_non_empty("ltifr", "safetyTraining.programs"),
    ("social", "hrManagement"): all_present("humanRightsPolicy", "diversity.leadershipPercentage"),
    ("social", "csrSocialResponsibilities"): all_non_empty("csrProjects", "communityInvestment.initiatives"),
}


def _has_content(value):
    if isinstance(value, dict):
        return any(_has_content(v) for v in value.values())
    if isinstance(value, list):
        return len(value) > 0
    return is_present(value)


def scoring_content(section_data):
    """Strip the bookkeeping keys so only submitted content is scored."""
    if not isinstance(section_data, dict):
        return {}
    return {k: v for k, v in section_data.items() if k not in BOOKKEEPING_FIELDS}


def calculate_points(category, section, section_data):
    """
    Compute the points for one sub-section from its current content.

    Points are recomputed from scratch on every call, so submitting the same
    data twice yields the same value.
    """
    content = scoring_content(section_data)
    if not _has_content(content):
        return 0

    schema = get_section(category, section)
    points = BASE_POINTS
    if is_present(content.get(schema.certificate_field)):
        points += CERTIFICATE_BONUS

    rule = BONUS_RULES.get((category, section))
    if rule is not None:
        points += rule(content)

    points = round(points, 2)
    if isinstance(points, float) and points.is_integer():
        points = int(points)

    logger.debug(f"Calculated {points} points for {category}.{section}")
    return points
