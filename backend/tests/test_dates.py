import datetime as dt

from sitetrack.services.etl.utils import parse_date, to_float, until_yesterday

def test_day_mon_yy():
    assert parse_date("23-Feb-24") == dt.datetime(2024, 2, 23)
    assert parse_date("5-September-2023") == dt.datetime(2023, 9, 5)
    assert parse_date("5 Sept 23") == dt.datetime(2023, 9, 5)

def test_iso_and_ymd():
    assert parse_date("2024-02-23") == dt.datetime(2024, 2, 23)
    assert parse_date("2024-02-23T10:30:00") == dt.datetime(2024, 2, 23, 10, 30)
    assert parse_date("2024-2-3") == dt.datetime(2024, 2, 3)

def test_slashed_day_first_then_month_first():
    assert parse_date("2/3/2024") is not None
    assert parse_date("2/3/2024") == dt.datetime(2024, 3, 2)
    assert parse_date("25/12/2024") == dt.datetime(2024, 12, 25)
    assert parse_date("12/25/2024") == dt.datetime(2024, 12, 25)
    assert parse_date("13/25/2024") is None

def test_numbers():
    # Excel day serial
    assert parse_date(45345) == dt.datetime(2024, 2, 23)
    assert parse_date("45345") == dt.datetime(2024, 2, 23)
    # epoch seconds / milliseconds
    assert parse_date(1700000000).date() == dt.date(2023, 11, 14)
    assert parse_date("1700000000000").date() == dt.date(2023, 11, 14)

def test_objects():
    assert parse_date(dt.date(2024, 1, 5)) == dt.datetime(2024, 1, 5)
    aware = dt.datetime(2024, 1, 5, 12, tzinfo=dt.timezone.utc)
    assert parse_date(aware) == dt.datetime(2024, 1, 5, 12)

def test_bounds_and_garbage():
    for v in (None, "", "   ", "N/A", "garbage", "0", "1899-12-31", "2100-01-01", "31-Foo-24", True):
        assert parse_date(v) is None
    assert parse_date("1901-01-01") == dt.datetime(1901, 1, 1)
    assert parse_date("2099-12-31") == dt.datetime(2099, 12, 31)

def test_iso_roundtrip_for_supported_formats():
    day = dt.date(2024, 2, 23)
    for s in ("2024-02-23", "23-Feb-24", "23-February-2024", "23/02/2024", "02/23/2024"):
        assert parse_date(s).date().isoformat() == day.isoformat()

def test_to_float():
    assert to_float("1,234.5") == 1234.5
    assert to_float("12.5 m3") == 12.5
    assert to_float("abc") == 0.0
    assert to_float(None) == 0.0
    assert to_float(float("nan")) == 0.0
    assert to_float(7) == 7.0

def test_until_yesterday():
    cut = until_yesterday(dt.date(2024, 3, 10))
    assert cut.date() == dt.date(2024, 3, 9)
    assert dt.datetime(2024, 3, 9, 23, 59, 59) <= cut
    assert dt.datetime(2024, 3, 10, 0, 0, 1) > cut
