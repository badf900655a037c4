"""
Celery application configuration for roomrate background tasks.
Uses Redis as message broker.
"""
from celery import Celery
from celery.schedules import crontab

from roomrate.config import get_settings

# Redis URL for message broker
REDIS_URL = get_settings().redis_url

# Create Celery app
celery_app = Celery(
    "roomrate",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=[
        "roomrate.tasks.pricing_tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=None,  # server local time, same as the in-process scheduler
    enable_utc=False,

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completes
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,  # One task at a time

    # Result backend settings
    result_expires=86400,  # 24 hours

    # Task time limits
    task_soft_time_limit=1800,  # 30 minutes soft limit
    task_time_limit=3600,  # 1 hour hard limit
)

# Beat schedule. Only used when PRECOMPUTE_VIA_CELERY=true; otherwise the API
# process runs the daily precompute itself.
celery_app.conf.beat_schedule = {
    "precompute-price-suggestions": {
        "task": "roomrate.tasks.pricing_tasks.precompute_price_suggestions",
        "schedule": crontab(hour=get_settings().precompute_hour, minute=0),
        "kwargs": {"days": get_settings().precompute_days},
    },
}

celery_app.conf.task_routes = {
    "roomrate.tasks.pricing_tasks.*": {"queue": "pricing"},
}
