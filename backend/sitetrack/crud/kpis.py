from sqlalchemy.orm import Session

from sitetrack.crud._scope import as_text, loose_project_filter
from sitetrack.db.models.kpi import KPIEntry
from sitetrack.schemas.kpis import KPICreate

def list_kpis(db: Session):
    return db.query(KPIEntry).order_by(KPIEntry.id).all()

def list_for_project(db: Session, code: str | None, full_code: str | None):
    cond = loose_project_filter(KPIEntry, code, full_code)
    if cond is None:
        return []
    return db.query(KPIEntry).filter(cond).order_by(KPIEntry.id).all()

def create_kpi(db: Session, data: KPICreate) -> KPIEntry:
    k = KPIEntry(
        project_code=as_text(data.project_code),
        project_sub_code=as_text(data.project_sub_code),
        project_full_code=as_text(data.project_full_code),
        activity_name=data.activity_name.strip(),
        input_type=data.input_type,
        quantity=as_text(data.quantity),
        value=as_text(data.value),
        zone=as_text(data.zone),
        activity_timing=as_text(data.activity_timing),
        kpi_date=as_text(data.kpi_date),
        target_date=as_text(data.target_date),
        activity_date=as_text(data.activity_date),
        actual_date=as_text(data.actual_date),
        raw=data.raw,
    )
    db.add(k)
    db.commit()
    db.refresh(k)
    return k
