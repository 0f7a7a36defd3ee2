"""
WSGI config for rewards_server project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'rewards_server.settings.production')

application = get_wsgi_application()
