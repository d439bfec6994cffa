"""
Lifecycle operations on ESG records: patching, submission, review and manual
point overrides.

Patches follow a read-merge-write cycle. The row is locked for the duration
of the transaction where the database supports it, and the write itself is a
compare-and-swap on ``ESGRecord.version`` so that a concurrent commit is
detected and the patch re-applied on top of it instead of overwriting it.
Submission, review and point overrides commit the same way.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..conf import get_setting
from ..exceptions import (
    ConcurrentUpdateError, InvalidPatchError, RecordLockedError, RecordNotFoundError,
)
from ..models import ESGRecord
from ..sections import COMPANY_INFO_CATEGORY, GENERAL_SECTION
from .dashboard import build_dashboard
from .merge import merge_patch, resolve_section, validate_patch
from .points import calculate_points, parse_number

logger = logging.getLogger(__name__)

LOCKED_STATUSES = (
    ESGRecord.Status.SUBMITTED,
    ESGRecord.Status.REVIEWED,
    ESGRecord.Status.APPROVED,
)


def resolve_owner(user):
    """(user, company) pair owning the record of ``user``."""
    company = getattr(user, 'company', None)
    return user, company or user


def get_record_for_user(user):
    owner, company = resolve_owner(user)
    try:
        return ESGRecord.objects.get(user=owner, company=company)
    except ESGRecord.DoesNotExist:
        raise RecordNotFoundError("ESG data not found") from None


def get_record(record_id):
    """Fetch a record for writing; the row stays locked until the transaction ends."""
    try:
        return ESGRecord.objects.select_for_update().get(pk=record_id)
    except (ESGRecord.DoesNotExist, ValueError, TypeError):
        raise RecordNotFoundError("ESG data not found", record_id=record_id) from None


def _now_iso():
    return timezone.now().isoformat()


def _apply_to_record(record, category, section, data):
    """Merge the patch into ``record`` in memory and score the touched section."""
    merged = merge_patch(record.get_category(category), category, section, data, _now_iso())
    if category == COMPANY_INFO_CATEGORY:
        merged['points'] = calculate_points(category, GENERAL_SECTION, merged)
    else:
        merged[section]['points'] = calculate_points(category, section, merged[section])
    record.set_category(category, merged)
    return record


def _check_editable(record):
    if record.status in LOCKED_STATUSES and not get_setting('ESG_ALLOW_EDITS_AFTER_SUBMIT'):
        raise RecordLockedError(
            f"ESG data is {record.status} and can no longer be edited",
            status=record.status,
        )


def _create_record(owner, company, category, section, data):
    record = ESGRecord(user=owner, company=company)
    _apply_to_record(record, category, section, data)
    with transaction.atomic():
        record.save()
    logger.info(f"Created ESG record {record.pk} for user {owner.pk} with {category}.{section}")
    return record


def apply_patch(user, category, section, data):
    """
    Merge a partial sub-section submission into the user's ESG record.

    Creates the record on first use. Returns the saved ESGRecord. Raises
    InvalidPatchError before touching anything if the patch is malformed.
    """
    section = validate_patch(category, section, data)
    owner, company = resolve_owner(user)
    max_retries = get_setting('ESG_PATCH_MAX_RETRIES')

    for attempt in range(1, max_retries + 1):
        with transaction.atomic():
            record = (
                ESGRecord.objects.select_for_update()
                .filter(user=owner, company=company)
                .first()
            )
            if record is None:
                try:
                    return _create_record(owner, company, category, section, data)
                except IntegrityError:
                    logger.warning(
                        f"ESG record for user {owner.pk} was created concurrently, retrying as update"
                    )
                    continue

            _check_editable(record)
            expected_version = record.version
            _apply_to_record(record, category, section, data)
            if record.compare_and_swap(expected_version):
                logger.info(
                    f"Updated ESG record {record.pk} {category}.{section} "
                    f"(version {record.version}, points {_section_points(record, category, section)})"
                )
                return record

        logger.warning(
            f"Version conflict on ESG record {record.pk} for {category}.{section} "
            f"(attempt {attempt}/{max_retries})"
        )

    raise ConcurrentUpdateError(
        "ESG data was modified concurrently, please retry",
        category=category,
        section=section,
    )


def _section_points(record, category, section):
    data = record.get_category(category)
    if category != COMPANY_INFO_CATEGORY:
        data = data.get(section, {})
    return data.get('points', 0)


def _commit_locked(fetch, change, action):
    """
    Apply ``change`` to a freshly locked record and commit it with a version
    check. A write that slips in between is picked up by re-reading the row.
    """
    max_retries = get_setting('ESG_PATCH_MAX_RETRIES')
    for attempt in range(1, max_retries + 1):
        with transaction.atomic():
            record = fetch()
            expected_version = record.version
            change(record)
            if record.compare_and_swap(expected_version):
                return record

        logger.warning(
            f"Version conflict on ESG record {record.pk} during {action} "
            f"(attempt {attempt}/{max_retries})"
        )

    raise ConcurrentUpdateError(
        "ESG data was modified concurrently, please retry",
        record_id=record.pk,
    )


def submit_record(user):
    """Move the user's record to 'submitted'. Scores are left as they are."""
    owner, company = resolve_owner(user)

    def fetch():
        record = ESGRecord.objects.select_for_update().filter(user=owner, company=company).first()
        if record is None:
            raise RecordNotFoundError("ESG data not found")
        return record

    def change(record):
        record.status = ESGRecord.Status.SUBMITTED
        record.status_changed_at = timezone.now()

    record = _commit_locked(fetch, change, 'submit')
    logger.info(f"ESG record {record.pk} submitted for review")
    return record


def review_record(record_id, new_status, comments='', reviewer=None):
    """Set a review outcome and comments on a record."""
    if new_status not in ESGRecord.REVIEW_STATUSES:
        raise InvalidPatchError(
            f"Invalid review status '{new_status}'",
            allowed=[str(s) for s in ESGRecord.REVIEW_STATUSES],
        )

    def change(record):
        record.status = new_status
        record.review_comments = comments or ''
        record.reviewed_by = reviewer
        record.status_changed_at = timezone.now()

    record = _commit_locked(lambda: get_record(record_id), change, 'review')
    logger.info(f"ESG record {record.pk} reviewed as {new_status}")
    return record


def override_section_points(record_id, category, section, points, remarks=None):
    """
    Manually set the points (and optionally remarks) of a sub-section.

    The point calculator is bypassed; the category and overall scores are
    still recomputed when the record is written.
    """
    section = resolve_section(category, section)
    number = parse_number(points)
    if number is None:
        raise InvalidPatchError(f"Invalid points value '{points}'")
    if float(number).is_integer():
        number = int(number)

    def change(record):
        stored = record.get_category(category)
        if category == COMPANY_INFO_CATEGORY:
            target = dict(stored)
            updated = target
        else:
            updated = dict(stored)
            target = dict(updated.get(section) or {})
            updated[section] = target

        target['points'] = number
        if remarks is not None:
            target['remarks'] = remarks
        target['lastUpdated'] = _now_iso()
        record.set_category(category, updated)

    record = _commit_locked(lambda: get_record(record_id), change, 'points override')
    logger.info(f"Points of ESG record {record.pk} {category}.{section} overridden to {number}")
    return record


def get_dashboard(user):
    return build_dashboard(get_record_for_user(user))
