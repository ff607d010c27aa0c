from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

Measure = str | float | None


class KPICreate(BaseModel):
    project_code: str | None = None
    project_sub_code: str | None = None
    project_full_code: str | None = None
    activity_name: str
    input_type: Literal["Planned", "Actual"]
    quantity: Measure = None
    value: Measure = None
    zone: str | None = None
    activity_timing: str | None = None
    kpi_date: str | None = None
    target_date: str | None = None
    activity_date: str | None = None
    actual_date: str | None = None
    raw: dict[str, Any] | None = None


class KPIOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_code: str | None = None
    project_sub_code: str | None = None
    project_full_code: str | None = None
    activity_name: str | None = None
    input_type: str | None = None
    quantity: str | None = None
    value: str | None = None
    zone: str | None = None
    activity_timing: str | None = None
    kpi_date: str | None = None
    target_date: str | None = None
    activity_date: str | None = None
    actual_date: str | None = None
