"""
WSGI config for the Student Records backend.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'studentrecords.settings')

application = get_wsgi_application()
