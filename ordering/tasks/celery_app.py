"""
Ordering Service — Celery application

Uses Redis as both broker and result backend. Beat drives the daily
inventory reset check; the worker runs it.
"""
from celery import Celery
from ordering.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "ordering",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["ordering.tasks.inventory_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=settings.RESET_TIMEZONE,
    enable_utc=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    beat_schedule={
        "daily-inventory-reset-check": {
            "task": "check_daily_reset",
            "schedule": float(settings.RESET_CHECK_INTERVAL_SECONDS),
            "options": {"expires": float(settings.RESET_CHECK_INTERVAL_SECONDS)},
        },
    },
)
