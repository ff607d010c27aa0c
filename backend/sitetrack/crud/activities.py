from sqlalchemy.orm import Session

from sitetrack.crud._scope import as_text, loose_project_filter
from sitetrack.db.models.activity import BOQActivity
from sitetrack.schemas.activities import ActivityCreate

def get_activity(db: Session, activity_id: int) -> BOQActivity | None:
    return db.query(BOQActivity).filter(BOQActivity.id == activity_id).one_or_none()

def list_activities(db: Session):
    return db.query(BOQActivity).order_by(BOQActivity.id).all()

def list_for_project(db: Session, code: str | None, full_code: str | None):
    cond = loose_project_filter(BOQActivity, code, full_code)
    if cond is None:
        return []
    return db.query(BOQActivity).filter(cond).order_by(BOQActivity.id).all()

def create_activity(db: Session, data: ActivityCreate) -> BOQActivity:
    a = BOQActivity(
        project_code=as_text(data.project_code),
        project_sub_code=as_text(data.project_sub_code),
        project_full_code=as_text(data.project_full_code),
        activity_name=data.activity_name.strip(),
        unit=as_text(data.unit),
        zone_ref=as_text(data.zone_ref),
        zone_number=as_text(data.zone_number),
        activity_timing=as_text(data.activity_timing),
        total_units=as_text(data.total_units),
        planned_units=as_text(data.planned_units),
        actual_units=as_text(data.actual_units),
        rate=as_text(data.rate),
        total_value=as_text(data.total_value),
        raw=data.raw,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a
