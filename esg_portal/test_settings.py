"""
Test settings - uses SQLite database
"""

from .settings import *

# Override database settings to use SQLite
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test_db.sqlite3',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Keep test output quiet
LOGGING['loggers']['accounts']['level'] = 'WARNING'
LOGGING['loggers']['assessments']['level'] = 'WARNING'
