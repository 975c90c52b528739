"""Celery application setup"""
from celery import Celery

from salon_booking.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery app used for calendar sync"""
    app = Celery(
        "salon_booking",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["salon_booking.tasks.calendar_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        # Sync is attempted at most once per operation
        task_acks_late=False,
        task_default_retry_delay=0,
        worker_prefetch_multiplier=1,
    )

    return app


celery_app = create_celery_app()
