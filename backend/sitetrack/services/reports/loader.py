"""Parallel fetch of the rows a reconciliation needs.

Each fetch runs on its own session in the context's thread pool, with one
reconnect-and-retry, and rows are normalized before the session closes.
All fetches of one call share a single timeout; rows are not read in one
transaction, so activities and KPIs may come from slightly different
moments.
"""
import time
from concurrent.futures import Future, TimeoutError as FuturesTimeout
from dataclasses import dataclass
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitetrack.core.errors import FetchError, FetchTimeoutError, NotFoundError
from sitetrack.core.logging import logger
from sitetrack.crud import activities as activities_crud
from sitetrack.crud import kpis as kpis_crud
from sitetrack.crud import projects as projects_crud
from sitetrack.db.session import run_with_reconnect
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.etl.normalizer import normalize_activity, normalize_kpi, normalize_project
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.reports.codes import project_full_code

T = TypeVar("T")


@dataclass(frozen=True)
class ProjectRows:
    project: ProjectRecord
    activities: list[ActivityRecord]
    kpis: list[KPIRecord]


@dataclass(frozen=True)
class PortfolioRows:
    projects: list[ProjectRecord]
    activities: list[ActivityRecord]
    kpis: list[KPIRecord]


def _gather(ctx: ReconciliationContext, fetches: dict[str, Callable[[Session], T]]) -> dict[str, T]:
    futures: dict[str, Future] = {
        label: ctx.executor.submit(run_with_reconnect, ctx.session_factory, fn, label)
        for label, fn in fetches.items()
    }
    deadline = time.monotonic() + ctx.fetch_timeout
    out: dict[str, T] = {}
    for label, fut in futures.items():
        try:
            out[label] = fut.result(timeout=max(0.0, deadline - time.monotonic()))
        except FuturesTimeout:
            for f in futures.values():
                f.cancel()
            logger.warning("fetch_timeout", query=label, timeout=ctx.fetch_timeout)
            raise FetchTimeoutError(f"Fetching {label} timed out", query=label, timeout=ctx.fetch_timeout)
        except SQLAlchemyError as e:
            logger.error("fetch_failed", query=label, error=str(e))
            raise FetchError(f"Fetching {label} failed", query=label) from e
    return out


def fetch_project(ctx: ReconciliationContext, project_id: int) -> ProjectRecord:
    def _fetch(db: Session) -> ProjectRecord | None:
        p = projects_crud.get_project(db, project_id)
        return normalize_project(p) if p is not None else None

    project = _gather(ctx, {"project": _fetch})["project"]
    if project is None:
        raise NotFoundError("Project not found", project_id=project_id)
    return project


def load_project_rows(ctx: ReconciliationContext, project: ProjectRecord | int) -> ProjectRows:
    if not isinstance(project, ProjectRecord):
        project = fetch_project(ctx, project)
    full = project_full_code(project)

    def _activities(db: Session) -> list[ActivityRecord]:
        return [normalize_activity(a) for a in activities_crud.list_for_project(db, project.code, full)]

    def _kpis(db: Session) -> list[KPIRecord]:
        return [normalize_kpi(k) for k in kpis_crud.list_for_project(db, project.code, full)]

    rows = _gather(ctx, {"activities": _activities, "kpis": _kpis})
    logger.debug(
        "project_rows_loaded", project=full, activities=len(rows["activities"]), kpis=len(rows["kpis"])
    )
    return ProjectRows(project=project, activities=rows["activities"], kpis=rows["kpis"])


def load_portfolio(ctx: ReconciliationContext) -> PortfolioRows:
    rows = _gather(
        ctx,
        {
            "projects": lambda db: [normalize_project(p) for p in projects_crud.list_projects(db)],
            "activities": lambda db: [normalize_activity(a) for a in activities_crud.list_activities(db)],
            "kpis": lambda db: [normalize_kpi(k) for k in kpis_crud.list_kpis(db)],
        },
    )
    return PortfolioRows(projects=rows["projects"], activities=rows["activities"], kpis=rows["kpis"])
