from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sitetrack.core.deps import get_context, get_db
from sitetrack.crud.kpis import create_kpi
from sitetrack.db.models.kpi import KPIEntry
from sitetrack.schemas.kpis import KPICreate, KPIOut
from sitetrack.services.context import ReconciliationContext

router = APIRouter()

@router.post("", response_model=KPIOut, status_code=201)
def post_kpi(data: KPICreate, db: Session = Depends(get_db), ctx: ReconciliationContext = Depends(get_context)):
    k = create_kpi(db, data)
    ctx.bus.notify(KPIEntry.__tablename__)
    return k
