import datetime as dt
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from sitetrack.services.etl.extractors import FieldChain
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.etl.utils import until_yesterday
from sitetrack.services.reports.matching import belongs_to_project, kpi_matches_activity

# which date decides whether a KPI is "due"
PLANNED_DATE = FieldChain("date", "target_date", "activity_date", "created_at")
ACTUAL_DATE = FieldChain("actual_date", "activity_date", "created_at")


def is_due(kpi: KPIRecord, cutoff: dt.datetime) -> bool:
    """On or before the cutoff. A KPI with no usable date counts as due."""
    chain = ACTUAL_DATE if kpi.is_actual else PLANNED_DATE
    d = chain.get(kpi)
    return d is None or d <= cutoff


@dataclass(frozen=True)
class QuantitySummary:
    done: float
    total: float
    planned: float
    unit: str | None = None

    @property
    def remaining(self) -> float:
        return max(0.0, self.total - self.done)

    @property
    def progress_pct(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.done / self.total * 100)


@dataclass
class PendingEdits:
    """Quantities typed into the entry form but not yet saved, by activity id."""

    quantities: dict[str, float] = field(default_factory=dict)

    def set(self, activity_id: str, quantity: float) -> None:
        self.quantities[str(activity_id)] = float(quantity)

    def discard(self, activity_id: str) -> None:
        self.quantities.pop(str(activity_id), None)

    def for_activity(self, activity: ActivityRecord) -> float:
        if activity.id is None:
            return 0.0
        return self.quantities.get(str(activity.id), 0.0)

    @classmethod
    def from_mapping(cls, m: Mapping[str, float] | None) -> "PendingEdits":
        return cls({str(k): float(v) for k, v in (m or {}).items()})


def summarize_activity(
    project: ProjectRecord,
    activity: ActivityRecord,
    kpis: Iterable[KPIRecord],
    today: dt.date | None = None,
    pending: PendingEdits | None = None,
) -> QuantitySummary:
    cutoff = until_yesterday(today)
    planned = 0.0
    done = 0.0
    for kpi in kpis:
        if kpi.input_type is None or not kpi_matches_activity(kpi, activity, project):
            continue
        if not is_due(kpi, cutoff):
            continue
        if kpi.is_planned:
            planned += kpi.quantity
        else:
            done += kpi.quantity

    if planned == 0:
        planned = activity.planned_units
    if done == 0:
        done = activity.actual_units
    if pending is not None:
        done += pending.for_activity(activity)

    return QuantitySummary(
        done=done,
        total=activity.total_units or activity.planned_units or 0.0,
        planned=planned,
        unit=activity.unit,
    )


@dataclass(frozen=True)
class ActivityQuantity:
    activity: ActivityRecord
    summary: QuantitySummary


@dataclass(frozen=True)
class ProjectQuantities:
    items: list[ActivityQuantity]
    done: float
    total: float
    planned: float

    @property
    def progress_pct(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.done / self.total * 100)

    @property
    def weighted_progress_pct(self) -> float:
        """Activity progress weighted by BOQ value; a plain average when no
        activity carries a value."""
        if not self.items:
            return 0.0
        progress = [i.summary.done / i.summary.total * 100 if i.summary.total > 0 else 0.0 for i in self.items]
        weights = [max(0.0, i.activity.total_value) for i in self.items]
        total_value = sum(weights)
        if total_value == 0:
            return round(sum(progress) / len(progress), 2)
        return round(sum(p * w for p, w in zip(progress, weights)) / total_value, 2)


def summarize_project(
    project: ProjectRecord,
    activities: Iterable[ActivityRecord],
    kpis: Iterable[KPIRecord],
    today: dt.date | None = None,
    pending: PendingEdits | None = None,
) -> ProjectQuantities:
    kpis = [k for k in kpis if belongs_to_project(k, project)]
    items = [
        ActivityQuantity(a, summarize_activity(project, a, kpis, today, pending))
        for a in activities
        if belongs_to_project(a, project)
    ]
    return ProjectQuantities(
        items=items,
        done=sum(i.summary.done for i in items),
        total=sum(i.summary.total for i in items),
        planned=sum(i.summary.planned for i in items),
    )
