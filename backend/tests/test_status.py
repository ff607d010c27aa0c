import datetime as dt
import itertools
from types import SimpleNamespace

from sqlalchemy.exc import SQLAlchemyError

from sitetrack.db.models.project import Project
from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.events import EventBus
from sitetrack.services.reports.status import (
    ProjectStatus,
    StatusInputs,
    classify_status,
    normalize_status,
    write_back_status,
)

TODAY = dt.date(2024, 3, 10)

def test_manual_statuses_are_sticky():
    done = StatusInputs(total_planned_qty=100, total_actual_qty=100, completion_date=TODAY)
    assert classify_status("On Hold", done, TODAY) == ProjectStatus.ON_HOLD
    assert classify_status("cancelled", done, TODAY) == ProjectStatus.CANCELLED

def test_rule_order():
    assert classify_status(
        "on-going", StatusInputs(100, 100, has_pre_commencement_actual=True), TODAY
    ) == ProjectStatus.CONTRACT_COMPLETED
    assert classify_status(None, StatusInputs(100, 150), TODAY) == ProjectStatus.CONTRACT_COMPLETED
    assert classify_status(
        None, StatusInputs(100, 50, has_post_commencement_actual=True, completion_date=TODAY), TODAY
    ) == ProjectStatus.COMPLETED_DURATION
    assert classify_status(
        None, StatusInputs(100, 50, has_post_commencement_actual=True, completion_date=dt.date(2024, 3, 9)), TODAY
    ) == ProjectStatus.ON_GOING
    assert classify_status(
        None, StatusInputs(0, 5, has_pre_commencement_actual=True, has_post_commencement_actual=True), TODAY
    ) == ProjectStatus.ON_GOING
    assert classify_status(None, StatusInputs(0, 5, has_pre_commencement_actual=True), TODAY) == ProjectStatus.SITE_PREPARATION
    assert classify_status("garbage", StatusInputs(), TODAY) == ProjectStatus.UPCOMING

def test_total_function():
    stored = [None, "", "upcoming", "On Going", "garbage", "On Hold", "cancelled", "contract-completed"]
    qty = [0, 50, 100, 150]
    flags = [False, True]
    dates = [None, TODAY, dt.date(2024, 3, 9)]
    for s, p, a, pre, post, d in itertools.product(stored, qty, qty, flags, flags, dates):
        result = classify_status(s, StatusInputs(p, a, pre, post, d), TODAY)
        assert isinstance(result, ProjectStatus)

def test_normalize_status():
    assert normalize_status("On Going") == ProjectStatus.ON_GOING
    assert normalize_status("on_hold") == ProjectStatus.ON_HOLD
    assert normalize_status("Site Preparation") == ProjectStatus.SITE_PREPARATION
    assert normalize_status("  Contract   Completed ") == ProjectStatus.CONTRACT_COMPLETED
    assert normalize_status("canceled") == ProjectStatus.CANCELLED
    assert normalize_status("xyz") is None
    assert normalize_status(None) is None

def test_inputs_inherit_activity_timing():
    p = ProjectRecord(id="1", code="P1", full_code="P1", completion_date=dt.datetime(2024, 3, 10, 8))
    mob = ActivityRecord(id="1", code="P1", name="Mobilization", timing="pre-commencement")
    kpis = [
        KPIRecord(id=None, code="P1", activity_name="Mobilization", input_type="Actual", quantity=1),
        KPIRecord(id=None, code="P1", activity_name="Mobilization", input_type="Planned", quantity=2),
        KPIRecord(id=None, code="P2", activity_name="Mobilization", input_type="Actual", quantity=50),
    ]
    inputs = StatusInputs.from_records(p, [mob], kpis)
    assert inputs.total_planned_qty == 2
    assert inputs.total_actual_qty == 1
    assert inputs.has_pre_commencement_actual
    assert not inputs.has_post_commencement_actual
    assert inputs.completion_date == TODAY
    assert classify_status(None, inputs, TODAY) == ProjectStatus.COMPLETED_DURATION

def test_untagged_actual_without_activity_counts_as_post():
    p = ProjectRecord(id="1", code="P1", full_code="P1")
    kpis = [KPIRecord(id=None, code="P1", activity_name="Unknown", input_type="Actual", quantity=1)]
    inputs = StatusInputs.from_records(p, [], kpis)
    assert inputs.has_post_commencement_actual
    assert classify_status(None, inputs, TODAY) == ProjectStatus.ON_GOING

def test_write_back_persists_and_notifies(db):
    row = Project(project_code="P1", project_full_code="P1", project_status="upcoming", project_status_label="Upcoming")
    db.add(row)
    db.commit()
    seen = []
    bus = EventBus()
    bus.subscribe(seen.append)

    res = write_back_status(db, row, ProjectStatus.ON_GOING, bus)
    assert res.success and res.changed
    assert res.previous == "upcoming"
    db.refresh(row)
    assert row.project_status == "on-going"
    assert row.project_status_label == "On Going"
    assert [e.table_name for e in seen] == ["project"]

    again = write_back_status(db, row, ProjectStatus.ON_GOING, bus)
    assert again.success and not again.changed
    assert len(seen) == 1

class _BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def add(self, _obj):
        pass

    def commit(self):
        raise SQLAlchemyError("database is locked")

    def rollback(self):
        self.rolled_back = True

def test_write_back_failure_is_a_result():
    session = _BrokenSession()
    row = SimpleNamespace(id=5, project_status="upcoming", project_status_label="Upcoming", updated_at=None)
    res = write_back_status(session, row, ProjectStatus.ON_GOING)
    assert not res.success
    assert "locked" in res.error_message
    assert res.previous == "upcoming"
    assert session.rolled_back
