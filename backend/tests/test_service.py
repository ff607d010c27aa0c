import datetime as dt
import threading

from sqlalchemy.exc import OperationalError

from sitetrack.services.context import ReconciliationContext
from sitetrack.services.etl.records import KPIRecord, ProjectRecord
from sitetrack.services.reports import service
from sitetrack.services.reports.loader import PortfolioRows
from sitetrack.services.reports.status import ProjectStatus, StatusWriteback

TODAY = dt.date(2024, 3, 10)

class _DownSession:
    def query(self, *args, **kwargs):
        raise OperationalError("SELECT project", {}, Exception("connection refused"))

    def close(self):
        pass

    def rollback(self):
        pass

def _portfolio():
    project = ProjectRecord(id="1", code="P5066", sub_code="I1", full_code="P5066-I1", status="upcoming")
    kpi = KPIRecord(
        id=None, full_code="P5066-I1", activity_name="Excavation", input_type="Actual",
        quantity=5.0, timing="post-commencement",
    )
    return PortfolioRows(projects=[project], activities=[], kpis=[kpi])

def test_unreachable_database_gives_failed_writeback():
    ctx = ReconciliationContext(session_factory=_DownSession, max_workers=1)
    try:
        res = service._persist_status(ctx, 1, ProjectStatus.ON_GOING)
    finally:
        ctx.close()
    assert isinstance(res, StatusWriteback)
    assert not res.success
    assert res.status == ProjectStatus.ON_GOING
    assert "connection refused" in res.error_message

def test_batch_refresh_keeps_going_when_database_is_down(monkeypatch):
    monkeypatch.setattr(service, "load_portfolio", lambda ctx: _portfolio())
    ctx = ReconciliationContext(session_factory=_DownSession, max_workers=1)
    try:
        overview = service.portfolio_overview(ctx, today=TODAY, write_back=True)
    finally:
        ctx.close()
    assert overview[0].status == ProjectStatus.ON_GOING
    assert not overview[0].writeback.success

def test_refresh_counts_only_saved_changes(monkeypatch):
    monkeypatch.setattr(service, "load_portfolio", lambda ctx: _portfolio())
    monkeypatch.setattr(
        service, "_persist_status", lambda ctx, pid, status: StatusWriteback.fail(status, "upcoming", "locked")
    )
    ctx = ReconciliationContext(session_factory=_DownSession, max_workers=1)
    assert service.refresh_statuses(ctx, today=TODAY) == {"projects": 1, "changed": 0, "failed": 1}

    monkeypatch.setattr(service, "_persist_status", lambda ctx, pid, status: StatusWriteback.ok(status, "upcoming"))
    assert service.refresh_statuses(ctx, today=TODAY) == {"projects": 1, "changed": 1, "failed": 0}

def test_context_builds_one_executor_across_threads():
    ctx = ReconciliationContext(session_factory=_DownSession, max_workers=1)
    seen = []
    threads = [threading.Thread(target=lambda: seen.append(ctx.executor)) for _ in range(8)]
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(e) for e in seen}) == 1
    finally:
        ctx.close()
    assert ctx._executor is None
