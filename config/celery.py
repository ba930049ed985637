# config/celery.py

from celery import Celery
from celery.schedules import crontab
import os

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')

# Load task modules from all registered Django apps
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()

# Celery Beat Schedule - Periodic Tasks
app.conf.beat_schedule = {

    # Give newly catalogued tables a state row
    # Runs at the top of every hour
    'seed-missing-table-states': {
        'task': 'occupancy.tasks.seed_missing_table_states',
        'schedule': crontab(minute=0),
        'options': {
            'expires': 3600,
        }
    },

}
