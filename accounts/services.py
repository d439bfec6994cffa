import logging
import math

from django.utils import timezone

from .models import FORM_TYPES, SCORE_FIELDS, CustomUser, RoleChoices, SupplierProfile

logger = logging.getLogger(__name__)


def clamp_score(value):
    """Coerce a score into the 0-100 range. Raises ValueError for non-numbers."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid score value '{value}'") from None
    number = min(100, max(0, number))
    return int(number) if number.is_integer() else number


def get_supplier(supplier_id):
    """
    Fetch a supplier user by id.

    Raises:
        CustomUser.DoesNotExist: if there is no supplier with that id
    """
    return CustomUser.objects.get(pk=supplier_id, role=RoleChoices.SUPPLIER)


def get_or_create_supplier_profile(supplier):
    """Return the supplier's profile, creating a placeholder one if needed."""
    profile, created = SupplierProfile.objects.get_or_create(
        user=supplier,
        defaults={
            'company_name': 'Company Name',
            'contact_person': supplier.name or 'Contact Person',
        }
    )
    if created:
        logger.info(f"Created placeholder supplier profile for {supplier.email}")
    return profile


def update_esg_scores(supplier, **scores):
    """
    Update the admin-maintained ESG score summary of a supplier.

    Only the provided categories change; each is clamped to 0-100 and the
    overall score is the mean of the four categories, rounded half up.
    """
    profile = get_or_create_supplier_profile(supplier)
    current = dict(profile.esg_scores or {})
    for field in SCORE_FIELDS:
        value = scores.get(field)
        if value is not None:
            current[field] = clamp_score(value)
    mean = sum(current.get(field, 0) for field in SCORE_FIELDS) / len(SCORE_FIELDS)
    current['overall'] = int(math.floor(mean + 0.5))
    profile.esg_scores = current
    profile.save()
    return profile


def update_form_submission(supplier, form_type, submitted):
    """
    Flag a category form of the supplier as submitted or not.

    Raises:
        ValueError: for unknown form types
    """
    if form_type not in FORM_TYPES:
        raise ValueError(f"Invalid form type '{form_type}'")
    profile = get_or_create_supplier_profile(supplier)
    submissions = dict(profile.form_submissions or {})
    entry = dict(submissions.get(form_type) or {'submitted': False, 'lastUpdated': None})
    entry['submitted'] = bool(submitted)
    if submitted:
        entry['lastUpdated'] = timezone.now().isoformat()
    submissions[form_type] = entry
    profile.form_submissions = submissions
    profile.save()
    return profile
