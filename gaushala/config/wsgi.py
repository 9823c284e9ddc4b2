"""
WSGI config for the GauShala backend.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'gaushala.config.settings')

application = get_wsgi_application()
