import datetime as dt

from sitetrack.db.models.project import Project
from sitetrack.services.etl.normalizer import collapse_raw, normalize_activity, normalize_kpi, normalize_project

def test_collapse_raw_top_level_wins():
    row = {"project_code": "P1", "activity_name": "", "raw": {"activity_name": "Dig", "project_code": "OLD", "Zone": "A"}}
    out = collapse_raw(row)
    assert out["project_code"] == "P1"
    assert out["activity_name"] == "Dig"
    assert out["Zone"] == "A"
    assert "raw" not in out

def test_activity_from_spreadsheet_headers():
    a = normalize_activity({
        "id": 7,
        "Project Code": "P5066",
        "Project Sub Code": "I1",
        "Activity Name": "Excavation",
        "Zone Ref": "0",
        "Zone Number": "Zone A",
        "Total Units": "1,200",
        "Rate": "35 AED",
        "Activity Timing": "Post Commencement",
    })
    assert a.id == "7"
    assert a.code == "P5066" and a.sub_code == "I1"
    assert a.full_code is None
    assert a.zone == "Zone A"
    assert a.total_units == 1200.0
    assert a.rate == 35.0
    assert a.timing == "post-commencement"

def test_enabling_division_is_no_zone():
    a = normalize_activity({"activity_name": "Fence", "zone_ref": "Enabling Division"})
    assert a.zone is None

def test_kpi_aliases():
    k = normalize_kpi({
        "Input Type": "actual",
        "Quantity": "1,234.5",
        "Actual Value": "",
        "Value": "99",
        "Actual Date": "23-Feb-24",
        "Date": "garbage",
        "raw": {"Project Full Code": "P5066-I1", "Activity Name": "Excavation"},
    })
    assert k.input_type == "Actual"
    assert k.is_actual and not k.is_planned
    assert k.quantity == 1234.5
    assert k.value == 99.0
    assert k.actual_date == dt.datetime(2024, 2, 23)
    assert k.date is None
    assert k.full_code == "P5066-I1"
    assert k.activity_name == "Excavation"

def test_kpi_unknown_input_type():
    assert normalize_kpi({"input_type": "forecast"}).input_type is None

def test_project_from_orm_row():
    p = normalize_project(Project(project_code="P5066", project_sub_code="I2", project_completion_date="31/12/2026"))
    assert p.id is None
    assert p.full_code == "P5066-I2"
    assert p.completion_date == dt.datetime(2026, 12, 31)

def test_project_stored_full_code_wins():
    p = normalize_project({"project_code": "P1", "project_sub_code": "A", "project_full_code": "P1-LEGACY"})
    assert p.full_code == "P1-LEGACY"
