"""Monetary progress of a project.

- total: every Planned KPI of the project, regardless of date; when there
  are none, the BOQ (``total_value``, else ``rate * total_units``)
- planned / earned: Planned / Actual KPIs due by end of yesterday

Quantity status is the same walk over units instead of money.
"""
import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sitetrack.services.etl.extractors import FieldChain
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.etl.utils import until_yesterday
from sitetrack.services.reports.matching import belongs_to_project, find_activity_for_kpi

WORK_DATE = FieldChain("activity_date", "target_date")

# values within this of the quantity are a copied quantity, not money
VALUE_EQUALS_QTY_EPS = 0.01


@dataclass(frozen=True)
class WorkValue:
    total: float
    planned: float
    earned: float

    @property
    def remaining(self) -> float:
        return max(0.0, self.total - self.earned)


@dataclass(frozen=True)
class WorkProgress:
    planned: float
    actual: float
    variance: float


@dataclass(frozen=True)
class QuantityStatus:
    total: float
    planned: float
    earned: float


def activity_rate(activity: ActivityRecord | None) -> float:
    if activity is None:
        return 0.0
    units = activity.total_units or activity.planned_units
    if units > 0 and activity.total_value > 0:
        return activity.total_value / units
    return activity.rate if activity.rate > 0 else 0.0


def related_activity(
    kpi: KPIRecord, activities: Sequence[ActivityRecord], project: ProjectRecord
) -> ActivityRecord | None:
    """Strict name + zone match, then the first same-name activity."""
    hit = find_activity_for_kpi(kpi, activities, project)
    if hit is not None:
        return hit
    name = (kpi.activity_name or "").strip().lower()
    if not name:
        return None
    for a in activities:
        if (a.name or "").strip().lower() == name:
            return a
    return None


def _due(kpi: KPIRecord, cutoff: dt.datetime) -> bool:
    d = WORK_DATE.get(kpi)
    return d is None or d <= cutoff


def _kpi_total_value(kpi: KPIRecord, rate: float) -> float:
    q = kpi.quantity
    if rate > 0 and q > 0:
        return q * rate
    value = kpi.value
    if value > 0 and q > 0 and abs(value - q) < VALUE_EQUALS_QTY_EPS:
        value = 0.0
    if value == 0 and q > 0 and kpi.rate > 0:
        return q * kpi.rate
    return value if value > 0 else 0.0


def _kpi_due_value(kpi: KPIRecord, rate: float) -> float:
    if kpi.value > 0:
        return kpi.value
    if rate > 0 and kpi.quantity > 0:
        return kpi.quantity * rate
    return 0.0


def _boq_total(activities: Iterable[ActivityRecord]) -> float:
    total = 0.0
    for a in activities:
        if a.total_value > 0:
            total += a.total_value
        elif a.rate > 0 and a.total_units > 0:
            total += a.rate * a.total_units
    return total


def calculate_work_value(
    project: ProjectRecord,
    activities: Iterable[ActivityRecord],
    kpis: Iterable[KPIRecord],
    today: dt.date | None = None,
) -> WorkValue:
    if not project.code:
        return WorkValue(0.0, 0.0, 0.0)
    cutoff = until_yesterday(today)
    acts = [a for a in activities if belongs_to_project(a, project)]
    project_kpis = [k for k in kpis if belongs_to_project(k, project)]

    planned_kpis = [k for k in project_kpis if k.is_planned]
    if planned_kpis:
        total = sum(_kpi_total_value(k, activity_rate(related_activity(k, acts, project))) for k in planned_kpis)
    else:
        total = _boq_total(acts)

    planned = earned = 0.0
    for k in project_kpis:
        if k.input_type is None or not _due(k, cutoff):
            continue
        v = _kpi_due_value(k, activity_rate(related_activity(k, acts, project)))
        if k.is_planned:
            planned += v
        else:
            earned += v
    return WorkValue(total=total, planned=planned, earned=earned)


def progress_from_work_value(wv: WorkValue) -> WorkProgress:
    if wv.total > 0:
        planned = min(100.0, max(0.0, wv.planned / wv.total * 100))
        actual = min(100.0, max(0.0, wv.earned / wv.total * 100))
    else:
        planned = actual = 0.0
    return WorkProgress(planned=planned, actual=actual, variance=actual - planned)


def calculate_quantity_status(
    project: ProjectRecord,
    activities: Iterable[ActivityRecord],
    kpis: Iterable[KPIRecord],
    today: dt.date | None = None,
) -> QuantityStatus:
    if not project.code:
        return QuantityStatus(0.0, 0.0, 0.0)
    cutoff = until_yesterday(today)
    project_kpis = [k for k in kpis if belongs_to_project(k, project)]

    total = sum(a.total_units or a.planned_units for a in activities if belongs_to_project(a, project))
    if total == 0:
        total = sum(k.quantity for k in project_kpis if k.is_planned)

    planned = sum(k.quantity for k in project_kpis if k.is_planned and _due(k, cutoff))
    earned = sum(k.quantity for k in project_kpis if k.is_actual and _due(k, cutoff))
    return QuantityStatus(total=float(total), planned=planned, earned=earned)
