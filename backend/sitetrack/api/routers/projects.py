from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from sitetrack.core.deps import get_context, get_db
from sitetrack.crud import activities as activities_crud
from sitetrack.crud import kpis as kpis_crud
from sitetrack.crud.projects import create_project, get_project, update_project
from sitetrack.db.models.project import Project
from sitetrack.schemas.activities import ActivityOut
from sitetrack.schemas.kpis import KPIOut
from sitetrack.schemas.project import ProjectCreate, ProjectOut, ProjectOverviewOut, ProjectUpdate
from sitetrack.schemas.reports import StatusOut
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.etl.normalizer import normalize_activity, normalize_kpi
from sitetrack.services.reports.codes import project_full_code
from sitetrack.services.reports.loader import fetch_project
from sitetrack.services.reports.matching import belongs_to_project
from sitetrack.services.reports.service import evaluate_project_status, portfolio_overview
from sitetrack.services.reports.status import status_label

router = APIRouter()

def _get_or_404(db: Session, project_id: int):
    p = get_project(db, project_id)
    if not p:
        raise HTTPException(status_code=404, detail="Project not found")
    return p

@router.get("", response_model=list[ProjectOverviewOut])
def get_projects(ctx: ReconciliationContext = Depends(get_context)):
    return [
        ProjectOverviewOut(
            id=int(o.project.id),
            project_code=o.project.code,
            project_sub_code=o.project.sub_code,
            project_full_code=project_full_code(o.project),
            project_name=o.project.name,
            stored_status=o.project.status,
            status=o.status.value,
            status_label=status_label(o.status),
            activities=o.activities,
            kpis=o.kpis,
            progress_pct=o.progress_pct,
        )
        for o in portfolio_overview(ctx)
    ]

@router.post("", response_model=ProjectOut, status_code=201)
def post_project(data: ProjectCreate, db: Session = Depends(get_db), ctx: ReconciliationContext = Depends(get_context)):
    p = create_project(db, data)
    ctx.bus.notify(Project.__tablename__)
    return p

@router.get("/{project_id}", response_model=ProjectOut)
def get_one(project_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, project_id)

@router.put("/{project_id}", response_model=ProjectOut)
def put_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    ctx: ReconciliationContext = Depends(get_context),
):
    p = _get_or_404(db, project_id)
    try:
        p = update_project(db, p, data)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    ctx.bus.notify(Project.__tablename__)
    return p

@router.get("/{project_id}/activities", response_model=list[ActivityOut])
def get_project_activities(project_id: int, db: Session = Depends(get_db), ctx: ReconciliationContext = Depends(get_context)):
    project = fetch_project(ctx, project_id)
    rows = activities_crud.list_for_project(db, project.code, project_full_code(project))
    return [a for a in rows if belongs_to_project(normalize_activity(a), project)]

@router.get("/{project_id}/kpis", response_model=list[KPIOut])
def get_project_kpis(project_id: int, db: Session = Depends(get_db), ctx: ReconciliationContext = Depends(get_context)):
    project = fetch_project(ctx, project_id)
    rows = kpis_crud.list_for_project(db, project.code, project_full_code(project))
    return [k for k in rows if belongs_to_project(normalize_kpi(k), project)]

@router.post("/{project_id}/status/refresh", response_model=StatusOut)
def refresh_status(project_id: int, ctx: ReconciliationContext = Depends(get_context)):
    ev = evaluate_project_status(ctx, project_id)
    wb = ev.writeback
    return StatusOut(
        project_id=project_id,
        previous=ev.project.status,
        status=ev.status.value,
        label=status_label(ev.status),
        changed=ev.changed,
        persisted=bool(wb and wb.success and wb.changed),
        error=wb.error_message if wb else None,
    )
