from typing import Any

from pydantic import BaseModel, ConfigDict

Measure = str | float | None


class ActivityCreate(BaseModel):
    project_code: str | None = None
    project_sub_code: str | None = None
    project_full_code: str | None = None
    activity_name: str
    unit: str | None = None
    zone_ref: str | None = None
    zone_number: str | None = None
    activity_timing: str | None = None
    total_units: Measure = None
    planned_units: Measure = None
    actual_units: Measure = None
    rate: Measure = None
    total_value: Measure = None
    raw: dict[str, Any] | None = None


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_code: str | None = None
    project_sub_code: str | None = None
    project_full_code: str | None = None
    activity_name: str | None = None
    unit: str | None = None
    zone_ref: str | None = None
    zone_number: str | None = None
    activity_timing: str | None = None
    total_units: str | None = None
    planned_units: str | None = None
    actual_units: str | None = None
    rate: str | None = None
    total_value: str | None = None
