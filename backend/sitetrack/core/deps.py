from fastapi import HTTPException, Request

from sitetrack.db.session import SessionLocal
from sitetrack.services.context import ReconciliationContext

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_context(request: Request) -> ReconciliationContext:
    ctx = getattr(request.app.state, "reconciliation", None)
    if ctx is None:
        raise HTTPException(status_code=503, detail="Service is starting")
    return ctx
