from sqlalchemy import func
from sqlalchemy.orm import Session

from sitetrack.core.errors import DuplicateFullCodeError
from sitetrack.db.models.project import Project
from sitetrack.schemas.project import ProjectCreate, ProjectUpdate
from sitetrack.services.reports.codes import build_full_code
from sitetrack.services.reports.status import ProjectStatus, normalize_status, status_label

def list_projects(db: Session):
    return db.query(Project).order_by(Project.id).all()

def get_project(db: Session, project_id: int) -> Project | None:
    return db.query(Project).filter(Project.id == project_id).one_or_none()

def get_by_full_code(db: Session, full_code: str) -> Project | None:
    return (
        db.query(Project)
        .filter(func.upper(Project.project_full_code) == full_code.strip().upper())
        .order_by(Project.id)
        .first()
    )

def _ensure_unique(db: Session, full_code: str, exclude_id: int | None = None) -> None:
    other = get_by_full_code(db, full_code)
    if other is not None and other.id != exclude_id:
        raise DuplicateFullCodeError(f"Project {full_code} already exists", project_id=other.id)

def create_project(db: Session, data: ProjectCreate) -> Project:
    full = (data.project_full_code or "").strip() or build_full_code(data.project_code, data.project_sub_code)
    _ensure_unique(db, full)
    status = normalize_status(data.project_status) or ProjectStatus.UPCOMING
    p = Project(
        project_code=data.project_code.strip(),
        project_sub_code=(data.project_sub_code or "").strip() or None,
        project_full_code=full,
        project_name=data.project_name,
        project_status=status.value,
        project_status_label=status_label(status),
        project_start_date=data.project_start_date,
        project_completion_date=data.project_completion_date,
        raw=data.raw,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def update_project(db: Session, p: Project, data: ProjectUpdate) -> Project:
    codes_changed = False
    if data.project_code is not None:
        p.project_code = data.project_code.strip()
        codes_changed = True
    if data.project_sub_code is not None:
        p.project_sub_code = data.project_sub_code.strip() or None
        codes_changed = True
    if data.project_full_code is not None:
        p.project_full_code = data.project_full_code.strip() or None
    elif codes_changed:
        p.project_full_code = build_full_code(p.project_code, p.project_sub_code)
    if p.project_full_code:
        _ensure_unique(db, p.project_full_code, exclude_id=p.id)
    if data.project_name is not None:
        p.project_name = data.project_name
    if data.project_status is not None:
        status = normalize_status(data.project_status)
        if status is None:
            raise ValueError(f"Unknown project status: {data.project_status}")
        p.project_status = status.value
        p.project_status_label = status_label(status)
    if data.project_start_date is not None:
        p.project_start_date = data.project_start_date
    if data.project_completion_date is not None:
        p.project_completion_date = data.project_completion_date
    db.commit()
    db.refresh(p)
    return p
