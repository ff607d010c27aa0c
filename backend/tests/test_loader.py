import time

import pytest
from sqlalchemy.exc import OperationalError

from sitetrack.core.errors import FetchError, FetchTimeoutError, NotFoundError
from sitetrack.crud.activities import create_activity, list_for_project
from sitetrack.crud.kpis import create_kpi
from sitetrack.crud.projects import create_project
from sitetrack.schemas.activities import ActivityCreate
from sitetrack.schemas.kpis import KPICreate
from sitetrack.schemas.project import ProjectCreate
from sitetrack.services.context import ReconciliationContext
from sitetrack.services.reports.loader import _gather, load_portfolio, load_project_rows
from sitetrack.services.reports.matching import belongs_to_project

class _DummySession:
    def close(self):
        pass

    def rollback(self):
        pass

def _seed(db):
    p1 = create_project(db, ProjectCreate(project_code="P5066", project_sub_code="I1"))
    create_project(db, ProjectCreate(project_code="P5066", project_sub_code="I2"))
    create_activity(db, ActivityCreate(project_code="P5066", project_full_code="P5066-I1", activity_name="Excavation", total_units="1,000"))
    create_activity(db, ActivityCreate(project_code="P5066", project_full_code="P5066-I2", activity_name="Excavation", total_units="800"))
    create_kpi(db, KPICreate(project_code="P5066", project_full_code="P5066-I1", activity_name="Excavation", input_type="Actual", quantity="12"))
    return p1

def test_loose_filter_then_precise_match(db, ctx):
    p1 = _seed(db)
    # the database filter lets the sibling's rows through by bare code
    assert len(list_for_project(db, "P5066", "P5066-I1")) == 2

    rows = load_project_rows(ctx, p1.id)
    assert rows.project.full_code == "P5066-I1"
    assert rows.activities[0].total_units == 1000.0
    mine = [a for a in rows.activities if belongs_to_project(a, rows.project)]
    assert [a.full_code for a in mine] == ["P5066-I1"]
    assert rows.kpis[0].quantity == 12.0

def test_portfolio(db, ctx):
    _seed(db)
    pf = load_portfolio(ctx)
    assert len(pf.projects) == 2
    assert len(pf.activities) == 2
    assert len(pf.kpis) == 1

def test_missing_project(ctx):
    with pytest.raises(NotFoundError):
        load_project_rows(ctx, 12345)

def test_timeout():
    ctx = ReconciliationContext(session_factory=_DummySession, fetch_timeout=0.05, max_workers=1)
    try:
        with pytest.raises(FetchTimeoutError):
            _gather(ctx, {"slow": lambda db: time.sleep(0.5)})
    finally:
        ctx.close()

def test_one_reconnect_then_fetch_error():
    calls = []

    def down(_db):
        calls.append(1)
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    ctx = ReconciliationContext(session_factory=_DummySession, max_workers=1)
    try:
        with pytest.raises(FetchError) as ei:
            _gather(ctx, {"projects": down})
        assert not isinstance(ei.value, FetchTimeoutError)
        assert len(calls) == 2
    finally:
        ctx.close()

def test_reconnect_recovers():
    calls = []

    def flaky(_db):
        calls.append(1)
        if len(calls) == 1:
            raise OperationalError("SELECT 1", {}, Exception("server closed the connection"))
        return "ok"

    ctx = ReconciliationContext(session_factory=_DummySession, max_workers=1)
    try:
        assert _gather(ctx, {"projects": flaky}) == {"projects": "ok"}
    finally:
        ctx.close()
