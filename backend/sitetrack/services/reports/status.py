"""Project lifecycle status.

Rules, first match wins:

1. stored status is on-hold or cancelled: keep it (manual, sticky)
2. planned qty > 0 and actual >= planned: contract-completed
3. completion date is today and actual < planned: completed-duration
4. any post-commencement Actual KPI: on-going
5. any pre-commencement Actual KPI: site-preparation
6. otherwise: upcoming

Quantities are summed over every matched KPI with no date cutoff.
"""
import datetime as dt
import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sitetrack.core.logging import logger
from sitetrack.db.models.project import Project
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.etl.utils import norm_str, today_local
from sitetrack.services.events import EventBus
from sitetrack.services.reports.matching import belongs_to_project, find_activity_for_kpi


class ProjectStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    SITE_PREPARATION = "site-preparation"
    ON_GOING = "on-going"
    COMPLETED_DURATION = "completed-duration"
    CONTRACT_COMPLETED = "contract-completed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"


STATUS_LABELS = {
    ProjectStatus.UPCOMING: "Upcoming",
    ProjectStatus.SITE_PREPARATION: "Site Preparation",
    ProjectStatus.ON_GOING: "On Going",
    ProjectStatus.COMPLETED_DURATION: "Completed Duration",
    ProjectStatus.CONTRACT_COMPLETED: "Contract Completed",
    ProjectStatus.ON_HOLD: "On Hold",
    ProjectStatus.CANCELLED: "Cancelled",
}

MANUAL_STATUSES = frozenset({ProjectStatus.ON_HOLD, ProjectStatus.CANCELLED})

_ALIASES = {
    "ongoing": ProjectStatus.ON_GOING,
    "in-progress": ProjectStatus.ON_GOING,
    "completed": ProjectStatus.CONTRACT_COMPLETED,
    "onhold": ProjectStatus.ON_HOLD,
    "canceled": ProjectStatus.CANCELLED,
}


def normalize_status(v: Any) -> ProjectStatus | None:
    """"On Hold", "on_hold" and "on-hold" are the same status. Unknown text is None."""
    s = norm_str(v)
    if s is None:
        return None
    slug = "-".join(s.lower().replace("_", " ").split())
    try:
        return ProjectStatus(slug)
    except ValueError:
        return _ALIASES.get(slug)


def status_label(status: ProjectStatus) -> str:
    return STATUS_LABELS[status]


@dataclass(frozen=True)
class StatusInputs:
    total_planned_qty: float = 0.0
    total_actual_qty: float = 0.0
    has_pre_commencement_actual: bool = False
    has_post_commencement_actual: bool = False
    completion_date: dt.date | None = None

    @classmethod
    def from_records(
        cls,
        project: ProjectRecord,
        activities: Sequence[ActivityRecord],
        kpis: Iterable[KPIRecord],
    ) -> "StatusInputs":
        acts = [a for a in activities if belongs_to_project(a, project)]
        planned = actual = 0.0
        pre = post = False
        for k in kpis:
            if not belongs_to_project(k, project):
                continue
            if k.is_planned:
                planned += k.quantity
            elif k.is_actual:
                actual += k.quantity
                timing = k.timing
                if timing is None:
                    activity = find_activity_for_kpi(k, acts, project)
                    timing = activity.timing if activity is not None else None
                if timing == "pre-commencement":
                    pre = True
                else:
                    post = True
        completion = project.completion_date.date() if project.completion_date else None
        return cls(
            total_planned_qty=planned,
            total_actual_qty=actual,
            has_pre_commencement_actual=pre,
            has_post_commencement_actual=post,
            completion_date=completion,
        )


def classify_status(stored: Any, inputs: StatusInputs, today: dt.date | None = None) -> ProjectStatus:
    current = normalize_status(stored)
    if current in MANUAL_STATUSES:
        return current
    today = today or today_local()
    planned, actual = inputs.total_planned_qty, inputs.total_actual_qty
    if planned > 0 and actual >= planned:
        return ProjectStatus.CONTRACT_COMPLETED
    if inputs.completion_date is not None and inputs.completion_date == today and actual < planned:
        return ProjectStatus.COMPLETED_DURATION
    if inputs.has_post_commencement_actual:
        return ProjectStatus.ON_GOING
    if inputs.has_pre_commencement_actual:
        return ProjectStatus.SITE_PREPARATION
    return ProjectStatus.UPCOMING


@dataclass(frozen=True)
class StatusWriteback:
    """Outcome of persisting a computed status. The caller decides whether
    a failure is worth surfacing; nothing is retried here."""

    success: bool
    changed: bool = False
    status: ProjectStatus | None = None
    previous: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, status: ProjectStatus, previous: str | None) -> "StatusWriteback":
        return cls(success=True, changed=True, status=status, previous=previous)

    @classmethod
    def unchanged(cls, status: ProjectStatus) -> "StatusWriteback":
        return cls(success=True, changed=False, status=status, previous=status.value)

    @classmethod
    def fail(cls, status: ProjectStatus, previous: str | None, error_message: str) -> "StatusWriteback":
        return cls(success=False, status=status, previous=previous, error_message=error_message)


def write_back_status(
    db: Session, project_row, status: ProjectStatus, bus: EventBus | None = None
) -> StatusWriteback:
    """Persist ``status`` (slug + display label) on the project row when it
    differs from what is stored. Last write wins."""
    previous = project_row.project_status
    project_id = project_row.id
    label = status_label(status)
    if normalize_status(previous) == status and project_row.project_status_label == label:
        return StatusWriteback.unchanged(status)

    try:
        project_row.project_status = status.value
        project_row.project_status_label = label
        project_row.updated_at = dt.datetime.now(dt.timezone.utc)
        db.add(project_row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("status_writeback_failed", project_id=project_id, status=status.value, error=str(e))
        return StatusWriteback.fail(status, previous, str(e))

    logger.info("status_written_back", project_id=project_id, previous=previous, status=status.value)
    if bus is not None:
        bus.notify(Project.__tablename__)
    return StatusWriteback.ok(status, previous)
