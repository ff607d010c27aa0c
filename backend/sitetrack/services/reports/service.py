import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from sitetrack.core.errors import NotFoundError
from sitetrack.core.logging import logger
from sitetrack.crud.projects import get_project
from sitetrack.db.session import run_with_reconnect
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.etl.records import ActivityRecord, ProjectRecord
from sitetrack.services.reports.codes import project_full_code
from sitetrack.services.reports.loader import ProjectRows, load_portfolio, load_project_rows
from sitetrack.services.reports.matching import assign_to_projects, belongs_to_project, project_key
from sitetrack.services.reports.quantities import (
    PendingEdits,
    ProjectQuantities,
    QuantitySummary,
    summarize_activity,
    summarize_project,
)
from sitetrack.services.reports.status import (
    ProjectStatus,
    StatusInputs,
    StatusWriteback,
    classify_status,
    normalize_status,
    write_back_status,
)
from sitetrack.services.reports.work_value import (
    QuantityStatus,
    WorkProgress,
    WorkValue,
    calculate_quantity_status,
    calculate_work_value,
    progress_from_work_value,
)
from sitetrack.services.reports.zones import ZoneAnalytics, zone_analytics


@dataclass(frozen=True)
class WorkValueReport:
    value: WorkValue
    progress: WorkProgress
    quantities: QuantityStatus


@dataclass(frozen=True)
class StatusEvaluation:
    project: ProjectRecord
    status: ProjectStatus
    writeback: StatusWriteback | None = None

    @property
    def changed(self) -> bool:
        return normalize_status(self.project.status) != self.status


@dataclass(frozen=True)
class ProjectReport:
    project: ProjectRecord
    quantities: ProjectQuantities
    work: WorkValueReport
    status: ProjectStatus
    zones: ZoneAnalytics


@dataclass(frozen=True)
class ProjectOverview:
    project: ProjectRecord
    status: ProjectStatus
    activities: int
    kpis: int
    progress_pct: int
    writeback: StatusWriteback | None = None


def _work(rows: ProjectRows, today: dt.date) -> WorkValueReport:
    wv = calculate_work_value(rows.project, rows.activities, rows.kpis, today)
    return WorkValueReport(
        value=wv,
        progress=progress_from_work_value(wv),
        quantities=calculate_quantity_status(rows.project, rows.activities, rows.kpis, today),
    )


def _classify(rows: ProjectRows, today: dt.date) -> ProjectStatus:
    inputs = StatusInputs.from_records(rows.project, rows.activities, rows.kpis)
    return classify_status(rows.project.status, inputs, today)


def project_report(
    ctx: ReconciliationContext,
    project_id: int,
    today: dt.date | None = None,
    pending: PendingEdits | None = None,
) -> ProjectReport:
    today = today or ctx.today()
    rows = load_project_rows(ctx, project_id)
    quantities = summarize_project(rows.project, rows.activities, rows.kpis, today, pending)
    return ProjectReport(
        project=rows.project,
        quantities=quantities,
        work=_work(rows, today),
        status=_classify(rows, today),
        zones=zone_analytics(rows.project, quantities),
    )


def project_quantities(
    ctx: ReconciliationContext,
    project_id: int,
    today: dt.date | None = None,
    pending: PendingEdits | None = None,
) -> tuple[ProjectRecord, ProjectQuantities]:
    rows = load_project_rows(ctx, project_id)
    return rows.project, summarize_project(rows.project, rows.activities, rows.kpis, today or ctx.today(), pending)


def activity_quantities(
    ctx: ReconciliationContext,
    project_id: int,
    activity_id: int,
    pending_qty: float | None = None,
    today: dt.date | None = None,
) -> tuple[ActivityRecord, QuantitySummary]:
    rows = load_project_rows(ctx, project_id)
    activity = next(
        (a for a in rows.activities if a.id == str(activity_id) and belongs_to_project(a, rows.project)),
        None,
    )
    if activity is None:
        raise NotFoundError("Activity not found in project", project_id=project_id, activity_id=activity_id)
    pending = PendingEdits()
    if pending_qty:
        pending.set(activity.id, pending_qty)
    summary = summarize_activity(rows.project, activity, rows.kpis, today or ctx.today(), pending)
    return activity, summary


def project_work_value(ctx: ReconciliationContext, project_id: int, today: dt.date | None = None) -> WorkValueReport:
    rows = load_project_rows(ctx, project_id)
    return _work(rows, today or ctx.today())


def _persist_status(ctx: ReconciliationContext, project_id: int, status: ProjectStatus) -> StatusWriteback:
    def _write(db) -> StatusWriteback:
        row = get_project(db, project_id)
        if row is None:
            return StatusWriteback.fail(status, None, "project disappeared")
        return write_back_status(db, row, status, ctx.bus)

    try:
        return run_with_reconnect(ctx.session_factory, _write, "status_writeback")
    except SQLAlchemyError as e:
        logger.warning("status_writeback_failed", project_id=project_id, status=status.value, error=str(e))
        return StatusWriteback.fail(status, None, str(e))


def evaluate_project_status(
    ctx: ReconciliationContext,
    project_id: int,
    write_back: bool | None = None,
    today: dt.date | None = None,
) -> StatusEvaluation:
    rows = load_project_rows(ctx, project_id)
    status = _classify(rows, today or ctx.today())
    if write_back is None:
        write_back = ctx.status_writeback
    result = None
    if write_back and normalize_status(rows.project.status) != status:
        result = _persist_status(ctx, project_id, status)
    return StatusEvaluation(project=rows.project, status=status, writeback=result)


def portfolio_overview(
    ctx: ReconciliationContext, today: dt.date | None = None, write_back: bool = False
) -> list[ProjectOverview]:
    """Every project with its computed status. Each activity and KPI is
    counted for exactly one project."""
    today = today or ctx.today()
    rows = load_portfolio(ctx)
    acts_by = assign_to_projects(rows.activities, rows.projects)
    kpis_by = assign_to_projects(rows.kpis, rows.projects)

    out: list[ProjectOverview] = []
    for p in rows.projects:
        key = project_key(p)
        pr = ProjectRows(project=p, activities=acts_by[key], kpis=kpis_by[key])
        status = _classify(pr, today)
        quantities = summarize_project(p, pr.activities, pr.kpis, today)
        res = None
        if write_back and p.id is not None and normalize_status(p.status) != status:
            res = _persist_status(ctx, int(p.id), status)
            if not res.success:
                logger.warning("portfolio_status_not_saved", project=project_full_code(p), error=res.error_message)
        out.append(
            ProjectOverview(
                project=p,
                status=status,
                activities=len(pr.activities),
                kpis=len(pr.kpis),
                progress_pct=quantities.progress_pct,
                writeback=res,
            )
        )
    return out


def refresh_statuses(ctx: ReconciliationContext, today: dt.date | None = None) -> Mapping[str, int]:
    """Recompute and persist the status of every project. Only saved
    changes count as changed."""
    overview = portfolio_overview(ctx, today=today, write_back=True)
    results = [o.writeback for o in overview if o.writeback is not None]
    summary = {
        "projects": len(overview),
        "changed": sum(1 for wb in results if wb.success and wb.changed),
        "failed": sum(1 for wb in results if not wb.success),
    }
    logger.info("statuses_refreshed", **summary)
    return summary
