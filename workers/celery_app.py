import os
from celery import Celery
from celery.schedules import crontab
from dotenv import load_dotenv

load_dotenv()

broker = os.getenv("REDIS_URL", "redis://localhost:6379/0")
backend = broker

celery = Celery("closet_workers", broker=broker, backend=backend, include=["workers.tasks"])
celery.conf.task_routes = {
    "tasks.record_event": {"queue": "events"},
    "tasks.snapshot_monthly_metrics": {"queue": "insights"},
}

# Beat schedule for periodic tasks
celery.conf.beat_schedule = {
    "snapshot-monthly-metrics": {
        "task": "tasks.snapshot_monthly_metrics",
        "schedule": crontab(hour=3, minute=0, day_of_month=1),  # 1st of month 3 AM
    },
}
