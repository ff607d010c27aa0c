from sitetrack.worker.celery_app import celery_app
from sitetrack.core.config import settings
from sitetrack.core.errors import FetchError
from sitetrack.core.logging import logger
from sitetrack.db.session import SessionLocal
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.reports.service import refresh_statuses


@celery_app.task(name="projects.refresh_statuses", bind=True)
def refresh_statuses_task(self):
    ctx = ReconciliationContext.from_settings(settings, SessionLocal)
    try:
        summary = refresh_statuses(ctx)
        return dict(summary)
    except FetchError as e:
        logger.exception("status_refresh_failed", code=e.code, error=e.message)
        raise
    finally:
        ctx.close()
