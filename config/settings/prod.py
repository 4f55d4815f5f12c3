"""Production settings.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via
environment variables and that security settings are appropriate for
production use.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# Fail fast on a missing secret rather than running with the placeholder
if SECRET_KEY == 'replace-me-in-production':  # noqa: F405
    from django.core.exceptions import ImproperlyConfigured

    raise ImproperlyConfigured('DJANGO_SECRET_KEY must be set in production.')
