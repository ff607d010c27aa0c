import datetime as dt
from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectRecord:
    id: str | None
    code: str
    sub_code: str | None = None
    full_code: str = ""
    name: str | None = None
    status: str | None = None
    start_date: dt.datetime | None = None
    completion_date: dt.datetime | None = None


@dataclass(frozen=True)
class ActivityRecord:
    id: str | None
    code: str | None = None
    sub_code: str | None = None
    full_code: str | None = None  # as given on the row, never synthesized
    name: str | None = None
    unit: str | None = None
    zone: str | None = None
    timing: str | None = None
    total_units: float = 0.0
    planned_units: float = 0.0
    actual_units: float = 0.0
    rate: float = 0.0
    total_value: float = 0.0


@dataclass(frozen=True)
class KPIRecord:
    id: str | None
    code: str | None = None
    sub_code: str | None = None
    full_code: str | None = None
    activity_name: str | None = None
    input_type: str | None = None  # "Planned" | "Actual"
    zone: str | None = None
    timing: str | None = None
    quantity: float = 0.0
    value: float = 0.0
    rate: float = 0.0
    date: dt.datetime | None = None
    target_date: dt.datetime | None = None
    activity_date: dt.datetime | None = None
    actual_date: dt.datetime | None = None
    created_at: dt.datetime | None = None

    @property
    def is_planned(self) -> bool:
        return self.input_type == "Planned"

    @property
    def is_actual(self) -> bool:
        return self.input_type == "Actual"
