from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sitetrack.core.deps import get_context, get_db
from sitetrack.crud.activities import create_activity
from sitetrack.db.models.activity import BOQActivity
from sitetrack.schemas.activities import ActivityCreate, ActivityOut
from sitetrack.services.context import ReconciliationContext

router = APIRouter()

@router.post("", response_model=ActivityOut, status_code=201)
def post_activity(data: ActivityCreate, db: Session = Depends(get_db), ctx: ReconciliationContext = Depends(get_context)):
    a = create_activity(db, data)
    ctx.bus.notify(BOQActivity.__tablename__)
    return a
