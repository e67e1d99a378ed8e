import os
from dotenv import load_dotenv
load_dotenv()
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lifeboard.settings')

app = Celery('lifeboard')

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up tasks.tasks and habits.tasks from the installed apps.
app.autodiscover_tasks()
