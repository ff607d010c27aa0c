from typing import Any

from pydantic import BaseModel, ConfigDict


class ProjectCreate(BaseModel):
    project_code: str
    project_sub_code: str | None = None
    project_full_code: str | None = None
    project_name: str | None = None
    project_status: str | None = None
    project_start_date: str | None = None
    project_completion_date: str | None = None
    raw: dict[str, Any] | None = None


class ProjectUpdate(BaseModel):
    project_code: str | None = None
    project_sub_code: str | None = None
    project_full_code: str | None = None
    project_name: str | None = None
    # manual statuses (on-hold, cancelled) are set here
    project_status: str | None = None
    project_start_date: str | None = None
    project_completion_date: str | None = None


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_code: str
    project_sub_code: str | None = None
    project_full_code: str | None = None
    project_name: str | None = None
    project_status: str | None = None
    project_status_label: str | None = None
    project_start_date: str | None = None
    project_completion_date: str | None = None


class ProjectOverviewOut(BaseModel):
    id: int
    project_code: str
    project_sub_code: str | None = None
    project_full_code: str
    project_name: str | None = None
    stored_status: str | None = None
    status: str
    status_label: str
    activities: int
    kpis: int
    progress_pct: int
