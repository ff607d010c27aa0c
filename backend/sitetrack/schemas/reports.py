from pydantic import BaseModel


class QuantitySummaryOut(BaseModel):
    activity_id: int | None
    activity_name: str | None
    unit: str | None
    zone: str | None
    done: float
    total: float
    planned: float
    remaining: float
    progress_pct: int


class ProjectQuantitiesOut(BaseModel):
    project_id: int
    project_full_code: str
    items: list[QuantitySummaryOut]
    done: float
    total: float
    planned: float
    progress_pct: int
    weighted_progress_pct: float


class QuantityStatusOut(BaseModel):
    total: float
    planned: float
    earned: float


class WorkValueOut(BaseModel):
    project_id: int
    total: float
    planned: float
    earned: float
    remaining: float
    planned_pct: float
    actual_pct: float
    variance: float
    quantities: QuantityStatusOut


class StatusOut(BaseModel):
    project_id: int
    previous: str | None
    status: str
    label: str
    changed: bool
    persisted: bool
    error: str | None = None


class ZoneProgressOut(BaseModel):
    zone: str
    activities: int
    total: float
    done: float
    progress_pct: float
    state: str
    rank: int


class ZoneAnalyticsOut(BaseModel):
    total_zones: int
    active_zones: int
    completed_zones: int
    average_progress: float
    zones: list[ZoneProgressOut]


class ProjectReportOut(BaseModel):
    project_id: int
    status: str
    status_label: str
    quantities: ProjectQuantitiesOut
    work_value: WorkValueOut
    zones: ZoneAnalyticsOut
