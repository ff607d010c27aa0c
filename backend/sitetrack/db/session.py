from typing import Callable, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sitetrack.core.config import settings
from sitetrack.core.logging import logger

T = TypeVar("T")


def make_engine(url: str, statement_timeout_ms: int | None = None):
    if url.startswith("sqlite"):
        # in-memory sqlite must share one connection across sessions
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    connect_args = {}
    if statement_timeout_ms:
        connect_args["options"] = f"-c statement_timeout={int(statement_timeout_ms)}"
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args, future=True)


engine = make_engine(settings.DATABASE_URL, settings.STATEMENT_TIMEOUT_MS)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def run_with_reconnect(session_factory: Callable[[], Session], fn: Callable[[Session], T], label: str = "query") -> T:
    """Run ``fn`` in a fresh session; on a connection failure dispose the pool
    and resend once on a new session. The second failure propagates."""
    db = session_factory()
    try:
        return fn(db)
    except OperationalError as e:
        logger.warning("fetch_retry", query=label, error=str(e))
        db.rollback()
    finally:
        db.close()

    bind = getattr(session_factory, "kw", {}).get("bind")
    if bind is not None:
        bind.dispose()
    db2 = session_factory()
    try:
        return fn(db2)
    finally:
        db2.close()
