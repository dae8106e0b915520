"""
Celery Worker Configuration

Configures Celery for background audit processing:
- On-demand page audits
- The periodic scheduler pass
"""
import logging
from datetime import timedelta

from celery import Celery
from celery.signals import after_setup_logger

from accesswatch.config import settings


# Create Celery app
celery_app = Celery(
    "accesswatch",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "accesswatch.tasks.audit_tasks",
    ],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=3600,  # 1 hour max per task
    task_soft_time_limit=3300,  # 55 min soft limit

    # Worker settings; one slot keeps us inside the scoring API's rate limit
    worker_prefetch_multiplier=1,
    worker_concurrency=1,
    worker_max_tasks_per_child=100,

    # Result backend settings
    result_expires=86400,  # 24 hours

    # Queue routing
    task_routes={
        "accesswatch.tasks.audit_tasks.*": {"queue": "audit"},
    },

    # Default queue
    task_default_queue="default",
)

# Beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    "process-scheduled-audits": {
        "task": "accesswatch.tasks.audit_tasks.process_scheduled_audits",
        "schedule": timedelta(minutes=settings.SCHEDULER_INTERVAL_MINUTES),
    },
}


@after_setup_logger.connect
def setup_accesswatch_logging(logger, **kwargs):
    """Apply LOG_LEVEL to the accesswatch loggers once Celery set up logging."""
    logging.getLogger("accesswatch").setLevel(settings.LOG_LEVEL)
