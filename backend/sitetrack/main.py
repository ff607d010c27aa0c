from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sitetrack.core.config import settings
from sitetrack.core.logging import configure_logging, logger
from sitetrack.api.errors import register_error_handlers
from sitetrack.api.router import api_router
from sitetrack.db.session import SessionLocal, engine
from sitetrack.db.base import Base
from sitetrack.db import models  # noqa: F401  registers tables on Base.metadata
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.seed import seed_demo

def create_app() -> FastAPI:
    configure_logging(settings.ENV)
    app = FastAPI(title="Sitetrack", version="0.1.0")

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.on_event("startup")
    def _startup():
        # Ensure tables exist for dev/test convenience; in prod rely on alembic
        if settings.ENV in ("dev", "test"):
            Base.metadata.create_all(bind=engine)
        if settings.SEED_DEMO and settings.ENV == "dev":
            seed_demo()
        app.state.reconciliation = ReconciliationContext.from_settings(settings, SessionLocal)

    @app.on_event("shutdown")
    def _shutdown():
        ctx = getattr(app.state, "reconciliation", None)
        if ctx is not None:
            ctx.close()
            app.state.reconciliation = None

    register_error_handlers(app)
    app.include_router(api_router)
    logger.info("app_started", env=settings.ENV)
    return app

app = create_app()
