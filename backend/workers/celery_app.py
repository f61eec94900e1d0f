"""Celery application configuration for Aegis background workers.

Beat drives the periodic rescan of every monitored asset; the worker runs
the per-asset checks it fans out.
"""

import logging
from datetime import timedelta

from celery import Celery

from ..config.settings import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "aegis",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["backend.workers.scan_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    # Acknowledge only after the task finishes so a crashed worker's scan is redelivered
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_max_retries=3,
    task_default_retry_delay=60,
)

celery_app.conf.beat_schedule = {
    "rescan-all-assets": {
        "task": "backend.workers.scan_tasks.rescan_all_assets",
        "schedule": timedelta(hours=settings.SCAN_INTERVAL_HOURS),
        "options": {"queue": "periodic"},
    },
}


def get_celery_app() -> Celery:
    """Return the configured Celery application instance."""
    return celery_app
