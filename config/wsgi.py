"""WSGI entry point for the spot reservations project.

Defaults to the development settings; deployments set
``DJANGO_SETTINGS_MODULE=config.settings.prod``.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
