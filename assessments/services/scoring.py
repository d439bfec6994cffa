"""
Score aggregation for ESG records.

Category scores are the mean of sub-section points over the registry's fixed
sub-section set; the overall total is the mean of the four category scores.
"""

import logging

from ..sections import REGISTRY, SCORED_CATEGORIES
from .points import parse_number

logger = logging.getLogger(__name__)


def section_points(section_data):
    if not isinstance(section_data, dict):
        return 0
    number = parse_number(section_data.get("points"))
    return number if number is not None else 0


def category_score(category, category_data):
    """
    Mean points of a category. Missing sub-sections count as zero and keys
    outside the registry are ignored, so the denominator never moves.
    """
    sections = REGISTRY[category]
    category_data = category_data if isinstance(category_data, dict) else {}

    unexpected = set(category_data) - set(sections)
    if unexpected:
        logger.warning(
            f"Ignoring unregistered sections in '{category}' while scoring: {', '.join(sorted(unexpected))}"
        )

    total = sum(section_points(category_data.get(name)) for name in sections)
    return _tidy(total / len(sections))


def aggregate_scores(record_data):
    """
    Compute the overallScore mapping for a record-shaped mapping with the
    four scored category keys.
    """
    scores = {
        category: category_score(category, record_data.get(category))
        for category in SCORED_CATEGORIES
    }
    scores["total"] = _tidy(sum(scores[c] for c in SCORED_CATEGORIES) / len(SCORED_CATEGORIES))
    return scores


def _tidy(value):
    if float(value).is_integer():
        return int(value)
    return value
