"""
Service functions for generating dashboard data from ESG records.

``build_dashboard`` projects a single record into the supplier dashboard
(scores, completion, recent activity). ``build_admin_summary`` aggregates
across all records for the platform admin dashboard.
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.db.models import Count
from django.utils import timezone

from ..conf import get_setting
from ..sections import (
    CATEGORY_TITLES, COMPANY_INFO_CATEGORY, REGISTRY, SCORED_CATEGORIES, section_title,
)
from .completion import record_completion

logger = logging.getLogger(__name__)

STATUS_ACTIONS = {
    'draft': 'updated ESG data',
    'submitted': 'submitted ESG data for review',
    'reviewed': 'had ESG data reviewed',
    'approved': 'had ESG data approved',
    'rejected': 'had ESG data rejected',
}

_TIME_UNITS = (
    ('month', 30 * 24 * 3600),
    ('week', 7 * 24 * 3600),
    ('day', 24 * 3600),
    ('hour', 3600),
    ('minute', 60),
)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored timestamp (datetime or ISO string) into an aware datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.isoparse(str(value))
        except (ValueError, OverflowError):
            logger.debug(f"Skipping unparseable timestamp {value!r}")
            return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def format_time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """Render the time elapsed since ``moment`` as e.g. '3 hours ago'."""
    now = now or timezone.now()
    elapsed = max(0, int((now - moment).total_seconds()))
    for unit, seconds in _TIME_UNITS:
        count = elapsed // seconds
        if count >= 1:
            return f"1 {unit} ago" if count == 1 else f"{count} {unit}s ago"
    return 'just now'


def collect_activity(record_data: Dict[str, Any], status_changed_at=None, status='draft') -> List[Dict[str, Any]]:
    """
    Gather one activity entry per timestamped part of a record.

    Sub-sections contribute their ``lastUpdated``, company info contributes
    its own, and the last status transition contributes ``status_changed_at``.
    """
    entries = []
    for category in SCORED_CATEGORIES:
        category_data = record_data.get(category) or {}
        for section in REGISTRY[category]:
            section_data = category_data.get(section)
            if not isinstance(section_data, dict):
                continue
            moment = parse_timestamp(section_data.get('lastUpdated'))
            if moment is None:
                continue
            title = section_title(category, section)
            entries.append({
                'category': category,
                'section': section,
                'title': title,
                'action': f"updated {title}",
                'timestamp': moment,
            })

    company_info = record_data.get(COMPANY_INFO_CATEGORY)
    if isinstance(company_info, dict):
        moment = parse_timestamp(company_info.get('lastUpdated'))
        if moment is not None:
            entries.append({
                'category': COMPANY_INFO_CATEGORY,
                'section': None,
                'title': CATEGORY_TITLES[COMPANY_INFO_CATEGORY],
                'action': 'updated company information',
                'timestamp': moment,
            })

    moment = parse_timestamp(status_changed_at)
    if moment is not None:
        entries.append({
            'category': None,
            'section': None,
            'title': 'Status',
            'action': STATUS_ACTIONS.get(status, f"changed status to {status}"),
            'timestamp': moment,
        })
    return entries


def recent_updates(entries, now=None, limit=None):
    """Most recent activity first, labelled with relative time, truncated."""
    now = now or timezone.now()
    limit = limit if limit is not None else get_setting('ESG_RECENT_UPDATES_LIMIT')
    ordered = sorted(entries, key=lambda entry: entry['timestamp'], reverse=True)[:limit]
    return [
        {
            **entry,
            'timestamp': entry['timestamp'].isoformat(),
            'time': format_time_ago(entry['timestamp'], now),
        }
        for entry in ordered
    ]


def build_dashboard(record, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Project an ESGRecord into the supplier dashboard view.

    Read-only: nothing computed here is stored.
    """
    now = now or timezone.now()
    record_data = record.as_document()
    overall = dict(record.overall_score or {})
    scores = {category: overall.get(category, 0) for category in SCORED_CATEGORIES}
    scores['total'] = overall.get('total', 0)

    entries = collect_activity(record_data, record.status_changed_at, record.status)
    return {
        'recordId': record.pk,
        'status': record.status,
        'scores': scores,
        'completion': record_completion(record_data),
        'recentUpdates': recent_updates(entries, now),
        'lastUpdated': record.last_updated.isoformat() if record.last_updated else None,
    }


def get_submission_trend(now: Optional[datetime] = None, months: int = 6) -> List[Dict[str, Any]]:
    """Records updated per calendar month, oldest month first."""
    from ..models import ESGRecord

    now = now or timezone.now()
    current_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    trend = []
    for offset in range(months - 1, -1, -1):
        start = current_month - relativedelta(months=offset)
        end = start + relativedelta(months=1)
        count = ESGRecord.objects.filter(last_updated__gte=start, last_updated__lt=end).count()
        trend.append({'name': start.strftime('%b'), 'submissions': count})
    return trend


def get_category_distribution(records) -> List[Dict[str, Any]]:
    """Number of records with at least one checklist field filled, per category."""
    counts = {category: 0 for category in SCORED_CATEGORIES + (COMPANY_INFO_CATEGORY,)}
    for record in records:
        completion = record_completion(record.as_document())
        for category, value in completion.items():
            if value > 0:
                counts[category] += 1
    return [{'name': CATEGORY_TITLES[category], 'value': count} for category, count in counts.items()]


def build_admin_summary(now: Optional[datetime] = None) -> Dict[str, Any]:
    """Platform-wide summary for the admin dashboard."""
    from ..models import ESGRecord

    now = now or timezone.now()
    logger.info("Generating admin dashboard summary")

    User = get_user_model()
    role_counts = dict(User.objects.values_list('role').annotate(count=Count('id')).order_by())
    user_counts = {
        'total': sum(role_counts.values()),
        'admin': role_counts.get('admin', 0),
        'supplier': role_counts.get('supplier', 0),
        'company': role_counts.get('company', 0),
    }

    records = ESGRecord.objects.select_related('user')
    pending_approvals = records.filter(status=ESGRecord.Status.SUBMITTED).count()
    recent_submissions = records.filter(
        status=ESGRecord.Status.SUBMITTED,
        last_updated__gte=now - timedelta(days=30),
    ).count()

    activities = []
    for record in records.order_by('-last_updated')[:get_setting('ESG_RECENT_UPDATES_LIMIT')]:
        activities.append({
            'id': record.pk,
            'user': record.user.email if record.user_id else 'Unknown User',
            'action': STATUS_ACTIONS.get(record.status, 'updated ESG data'),
            'time': format_time_ago(record.last_updated, now),
        })

    return {
        'userCounts': user_counts,
        'pendingApprovals': pending_approvals,
        'recentSubmissions': recent_submissions,
        'submissionTrend': get_submission_trend(now),
        'categoryDistribution': get_category_distribution(records.iterator()),
        'recentActivities': activities,
    }
