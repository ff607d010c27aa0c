from fastapi import APIRouter, Depends, Query

from sitetrack.core.deps import get_context
from sitetrack.schemas.reports import (
    ProjectQuantitiesOut,
    ProjectReportOut,
    QuantityStatusOut,
    QuantitySummaryOut,
    WorkValueOut,
    ZoneAnalyticsOut,
    ZoneProgressOut,
)
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.etl.records import ActivityRecord, ProjectRecord
from sitetrack.services.reports.codes import project_full_code
from sitetrack.services.reports.quantities import ProjectQuantities, QuantitySummary
from sitetrack.services.reports.service import (
    WorkValueReport,
    activity_quantities,
    project_quantities,
    project_report,
    project_work_value,
)
from sitetrack.services.reports.status import status_label
from sitetrack.services.reports.zones import ZoneAnalytics

router = APIRouter()

def _summary_out(activity: ActivityRecord, s: QuantitySummary) -> QuantitySummaryOut:
    return QuantitySummaryOut(
        activity_id=int(activity.id) if activity.id else None,
        activity_name=activity.name,
        unit=s.unit,
        zone=activity.zone,
        done=s.done,
        total=s.total,
        planned=s.planned,
        remaining=s.remaining,
        progress_pct=s.progress_pct,
    )

def _project_quantities_out(project_id: int, project: ProjectRecord, pq: ProjectQuantities) -> ProjectQuantitiesOut:
    return ProjectQuantitiesOut(
        project_id=project_id,
        project_full_code=project_full_code(project),
        items=[_summary_out(i.activity, i.summary) for i in pq.items],
        done=pq.done,
        total=pq.total,
        planned=pq.planned,
        progress_pct=pq.progress_pct,
        weighted_progress_pct=pq.weighted_progress_pct,
    )

def _work_value_out(project_id: int, w: WorkValueReport) -> WorkValueOut:
    return WorkValueOut(
        project_id=project_id,
        total=w.value.total,
        planned=w.value.planned,
        earned=w.value.earned,
        remaining=w.value.remaining,
        planned_pct=w.progress.planned,
        actual_pct=w.progress.actual,
        variance=w.progress.variance,
        quantities=QuantityStatusOut(
            total=w.quantities.total,
            planned=w.quantities.planned,
            earned=w.quantities.earned,
        ),
    )

def _zones_out(za: ZoneAnalytics) -> ZoneAnalyticsOut:
    return ZoneAnalyticsOut(
        total_zones=len(za.zones),
        active_zones=za.active,
        completed_zones=za.completed,
        average_progress=za.average_progress,
        zones=[
            ZoneProgressOut(
                zone=z.zone,
                activities=z.activities,
                total=z.total,
                done=z.done,
                progress_pct=z.progress_pct,
                state=z.state,
                rank=rank,
            )
            for rank, z in enumerate(za.ranked(), start=1)
        ],
    )

@router.get("/quantities", response_model=QuantitySummaryOut)
def quantities(
    project_id: int = Query(...),
    activity_id: int = Query(...),
    pending_qty: float | None = Query(None, description="Quantity typed but not saved yet"),
    ctx: ReconciliationContext = Depends(get_context),
):
    activity, summary = activity_quantities(ctx, project_id, activity_id, pending_qty=pending_qty)
    return _summary_out(activity, summary)

@router.get("/projects/{project_id}", response_model=ProjectReportOut)
def project_summary(project_id: int, ctx: ReconciliationContext = Depends(get_context)):
    r = project_report(ctx, project_id)
    return ProjectReportOut(
        project_id=project_id,
        status=r.status.value,
        status_label=status_label(r.status),
        quantities=_project_quantities_out(project_id, r.project, r.quantities),
        work_value=_work_value_out(project_id, r.work),
        zones=_zones_out(r.zones),
    )

@router.get("/projects/{project_id}/quantities", response_model=ProjectQuantitiesOut)
def project_quantities_report(project_id: int, ctx: ReconciliationContext = Depends(get_context)):
    project, pq = project_quantities(ctx, project_id)
    return _project_quantities_out(project_id, project, pq)

@router.get("/projects/{project_id}/work-value", response_model=WorkValueOut)
def work_value(project_id: int, ctx: ReconciliationContext = Depends(get_context)):
    return _work_value_out(project_id, project_work_value(ctx, project_id))
