"""
Engine settings with their defaults. Override them in the Django settings
module.
"""

from django.conf import settings

DEFAULTS = {
    # Allow suppliers to keep editing a record after submitting it for review.
    'ESG_ALLOW_EDITS_AFTER_SUBMIT': True,
    # Compare-and-swap attempts for a single patch before giving up.
    'ESG_PATCH_MAX_RETRIES': 3,
    # Entries shown in the dashboard activity feed.
    'ESG_RECENT_UPDATES_LIMIT': 5,
}


def get_setting(name):
    if name not in DEFAULTS:
        raise KeyError(f"Unknown ESG setting '{name}'")
    return getattr(settings, name, DEFAULTS[name])
