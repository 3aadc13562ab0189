"""
Celery application for the storefront review workflow.

DJANGO_SETTINGS_MODULE is set before the app is created so Celery reads the
Django settings (``CELERY_`` prefix). Workers only run the notification
dispatch task; everything else in the workflow is synchronous per request.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("storefront")

# Reads the CELERY_* keys from the Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Finds tasks.py in every installed app
app.autodiscover_tasks()
