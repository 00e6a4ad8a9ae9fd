"""Celery app for the clinic eBarimt project."""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "clinic_project.settings")

app = Celery("clinic_project")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
