"""
ASGI config for the Student Records backend.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'studentrecords.settings')

application = get_asgi_application()
