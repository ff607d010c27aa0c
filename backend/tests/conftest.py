import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TZ"] = "UTC"
os.environ["SEED_DEMO"] = "false"

import pytest

from sitetrack.db import models  # noqa: E402,F401
from sitetrack.db.base import Base  # noqa: E402
from sitetrack.db.session import SessionLocal, engine  # noqa: E402
from sitetrack.services.context import ReconciliationContext  # noqa: E402


@pytest.fixture()
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(tables):
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def ctx(tables):
    # one worker: the in-memory sqlite connection is shared
    c = ReconciliationContext(session_factory=SessionLocal, max_workers=1, tz="UTC")
    yield c
    c.close()
