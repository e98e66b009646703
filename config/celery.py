import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("hackhub")

# All CELERY_* keys in settings.py configure the app
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
