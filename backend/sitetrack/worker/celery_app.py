from celery import Celery

from sitetrack.core.config import settings
from sitetrack.core.logging import configure_logging

configure_logging(settings.ENV)

celery_app = Celery("sitetrack", broker=settings.REDIS_URL, backend=settings.REDIS_URL, include=["sitetrack.worker.tasks"])
celery_app.conf.update(
    timezone=settings.TZ,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    beat_schedule={
        "refresh-project-statuses": {
            "task": "projects.refresh_statuses",
            "schedule": settings.STATUS_REFRESH_MINUTES * 60.0,
        },
    },
)
