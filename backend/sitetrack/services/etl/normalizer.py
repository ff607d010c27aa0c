"""Row normalization at the ingestion boundary.

Rows reach us as ORM objects, API payloads or spreadsheet dicts with
"Title Case" headers, sometimes with the interesting columns nested under
``raw``. Everything past this module only sees the frozen records from
``services.etl.records``.
"""
from collections.abc import Mapping
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from sitetrack.services.etl.extractors import FieldChain
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.etl.utils import clean_zone, norm_str, parse_date, to_float
from sitetrack.services.reports.codes import build_full_code

# codes
PROJECT_CODE = FieldChain("project_code", "Project Code")
SUB_CODE = FieldChain("project_sub_code", "Project Sub Code", "Project Sub-Code")
FULL_CODE = FieldChain("project_full_code", "Project Full Code")

# project
PROJECT_NAME = FieldChain("project_name", "Project Name")
PROJECT_STATUS = FieldChain("project_status", "Project Status")
START_DATE = FieldChain("project_start_date", "Project Start Date")
COMPLETION_DATE = FieldChain("project_completion_date", "Project Completion Date", "deadline", "Deadline")

# activity
ACTIVITY_NAME = FieldChain(
    "activity_name", "Activity Name", "activity", "Activity", "activity_description", "Activity Description"
)
UNIT = FieldChain("unit", "Unit")
ACTIVITY_ZONE = FieldChain("zone_ref", "Zone Ref", "zone_number", "Zone Number", "zone", "Zone")
TIMING = FieldChain("activity_timing", "Activity Timing")
TOTAL_UNITS = FieldChain("total_units", "Total Units")
PLANNED_UNITS = FieldChain("planned_units", "Planned Units")
ACTUAL_UNITS = FieldChain("actual_units", "Actual Units")
RATE = FieldChain("rate", "Rate")
TOTAL_VALUE = FieldChain("total_value", "Total Value")

# kpi
INPUT_TYPE = FieldChain("input_type", "Input Type")
KPI_ZONE = FieldChain("zone", "Zone", "zone_number", "Zone Number", "zone_ref", "Zone Ref")
QUANTITY = FieldChain("quantity", "Quantity")
VALUE = FieldChain("value", "Value")
PLANNED_VALUE = FieldChain("planned_value", "Planned Value") + VALUE
ACTUAL_VALUE = FieldChain("actual_value", "Actual Value") + VALUE
KPI_DATE = FieldChain("kpi_date", "date", "Date")
TARGET_DATE = FieldChain("target_date", "Target Date")
ACTIVITY_DATE = FieldChain("activity_date", "Activity Date", "day", "Day")
ACTUAL_DATE = FieldChain("actual_date", "Actual Date")
CREATED_AT = FieldChain("created_at", "Created At")
ROW_ID = FieldChain("id", "ID")


def _as_mapping(row: Any) -> dict[str, Any]:
    if row is None:
        return {}
    if isinstance(row, Mapping):
        return dict(row)
    try:
        mapper = sa_inspect(row).mapper
    except NoInspectionAvailable:
        return dict(vars(row))
    return {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}


def collapse_raw(row: Any) -> dict[str, Any]:
    """Flatten a row: top-level values win, the nested ``raw`` object fills
    whatever the top level leaves blank."""
    top = _as_mapping(row)
    nested = top.pop("raw", None)
    out: dict[str, Any] = dict(nested) if isinstance(nested, Mapping) else {}
    for k, v in top.items():
        if v is None or (isinstance(v, str) and not v.strip()):
            out.setdefault(k, v)
            continue
        out[k] = v
    return out


def normalize_input_type(v: Any) -> str | None:
    s = (norm_str(v) or "").lower()
    if s.startswith("plan"):
        return "Planned"
    if s.startswith("actual"):
        return "Actual"
    return None


def normalize_timing(v: Any) -> str | None:
    s = (norm_str(v) or "").lower().replace("_", "-").replace(" ", "-")
    if s.startswith("pre"):
        return "pre-commencement"
    if s.startswith("post"):
        return "post-commencement"
    return None


def _id(row: Mapping[str, Any]) -> str | None:
    return ROW_ID.text(row)


def normalize_project(row: Any) -> ProjectRecord:
    r = collapse_raw(row)
    code = PROJECT_CODE.text(r) or ""
    sub = SUB_CODE.text(r)
    return ProjectRecord(
        id=_id(r),
        code=code,
        sub_code=sub,
        full_code=FULL_CODE.text(r) or build_full_code(code, sub),
        name=PROJECT_NAME.text(r),
        status=PROJECT_STATUS.text(r),
        start_date=START_DATE.get(r, convert=parse_date),
        completion_date=COMPLETION_DATE.get(r, convert=parse_date),
    )


def normalize_activity(row: Any) -> ActivityRecord:
    r = collapse_raw(row)
    return ActivityRecord(
        id=_id(r),
        code=PROJECT_CODE.text(r),
        sub_code=SUB_CODE.text(r),
        full_code=FULL_CODE.text(r),
        name=ACTIVITY_NAME.text(r),
        unit=UNIT.text(r),
        zone=ACTIVITY_ZONE.get(r, convert=clean_zone),
        timing=normalize_timing(TIMING.get(r)),
        total_units=to_float(TOTAL_UNITS.get(r)),
        planned_units=to_float(PLANNED_UNITS.get(r)),
        actual_units=to_float(ACTUAL_UNITS.get(r)),
        rate=to_float(RATE.get(r)),
        total_value=to_float(TOTAL_VALUE.get(r)),
    )


def normalize_kpi(row: Any) -> KPIRecord:
    r = collapse_raw(row)
    input_type = normalize_input_type(INPUT_TYPE.get(r))
    value_chain = ACTUAL_VALUE if input_type == "Actual" else PLANNED_VALUE
    return KPIRecord(
        id=_id(r),
        code=PROJECT_CODE.text(r),
        sub_code=SUB_CODE.text(r),
        full_code=FULL_CODE.text(r),
        activity_name=ACTIVITY_NAME.text(r),
        input_type=input_type,
        zone=KPI_ZONE.get(r, convert=clean_zone),
        timing=normalize_timing(TIMING.get(r)),
        quantity=to_float(QUANTITY.get(r)),
        value=to_float(value_chain.get(r)),
        rate=to_float(RATE.get(r)),
        date=KPI_DATE.get(r, convert=parse_date),
        target_date=TARGET_DATE.get(r, convert=parse_date),
        activity_date=ACTIVITY_DATE.get(r, convert=parse_date),
        actual_date=ACTUAL_DATE.get(r, convert=parse_date),
        created_at=CREATED_AT.get(r, convert=parse_date),
    )
