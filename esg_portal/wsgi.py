"""
WSGI config for the supplier ESG portal.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'esg_portal.settings')

application = get_wsgi_application()
