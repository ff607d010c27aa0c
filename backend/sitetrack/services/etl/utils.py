import datetime as dt
import re
from typing import Any
from zoneinfo import ZoneInfo

from openpyxl.utils.datetime import from_excel

from sitetrack.core.config import settings

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

NO_ZONE = {"", "0", "enabling division"}

MIN_YEAR = 1901
MAX_YEAR = 2099
# below this a bare number is an Excel day serial, not an epoch
EXCEL_SERIAL_MAX = 100000
# epochs at or above this magnitude are milliseconds
EPOCH_MS_THRESHOLD = 100_000_000_000

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_DAY_MON_YY = re.compile(r"^(\d{1,2})[-\s]([A-Za-z]+)\.?[-\s](\d{2}|\d{4})$")
_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")
_SLASHED = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NUMERIC = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


def norm_str(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, float) and v != v:
        return None
    s = str(v).strip()
    return s if s else None

def to_float(v: Any, default: float = 0.0) -> float:
    """Numeric coercion for quantity/value fields.

    Thousands-separator commas are stripped and the leading number is parsed
    the way ``parseFloat`` does ("12.5 m3" -> 12.5). Anything unparseable is
    ``default``.
    """
    if v is None or isinstance(v, bool):
        return default
    if isinstance(v, (int, float)):
        return default if v != v else float(v)
    s = str(v).replace(",", "").strip()
    m = _LEADING_FLOAT.match(s)
    if not m:
        return default
    try:
        out = float(m.group(0))
    except ValueError:
        return default
    return default if out != out else out

def clean_zone(v: Any) -> str | None:
    """Zone value or None: empty, "0" and "Enabling Division" are not zones."""
    s = norm_str(v)
    if s is None or s.lower() in NO_ZONE:
        return None
    return s

def _in_range(d: dt.datetime | None) -> dt.datetime | None:
    if d is None:
        return None
    return d if MIN_YEAR <= d.year <= MAX_YEAR else None

def _to_local_naive(d: dt.datetime) -> dt.datetime:
    if d.tzinfo is None:
        return d
    return d.astimezone(ZoneInfo(settings.TZ)).replace(tzinfo=None)

def _build(year: int, month: int, day: int) -> dt.datetime | None:
    try:
        return dt.datetime(year, month, day)
    except ValueError:
        return None

def _parse_iso(s: str) -> dt.datetime | None:
    try:
        d = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if not 1900 <= d.year <= 2100:
        return None
    return _to_local_naive(d)

def _parse_day_mon_yy(s: str) -> dt.datetime | None:
    m = _DAY_MON_YY.match(s)
    if not m:
        return None
    month = MONTHS.get(m.group(2).lower())
    if month is None:
        return None
    year = int(m.group(3))
    if year < 100:
        year += 2000
    return _build(year, month, int(m.group(1)))

def _parse_ymd(s: str) -> dt.datetime | None:
    m = _YMD.match(s)
    if not m:
        return None
    return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

def _parse_slashed(s: str) -> dt.datetime | None:
    m = _SLASHED.match(s)
    if not m:
        return None
    a, b, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
    # day-first, then month-first
    for day, month in ((a, b), (b, a)):
        d = _in_range(_build(year, month, day))
        if d is not None:
            return d
    return None

def _parse_number(s: str) -> dt.datetime | None:
    if not _NUMERIC.match(s):
        return None
    n = float(s)
    if n <= 0:
        return None
    if n < EXCEL_SERIAL_MAX:
        d = from_excel(n)
        if isinstance(d, dt.datetime):
            return d
        return dt.datetime.combine(d, dt.time())
    if n >= EPOCH_MS_THRESHOLD:
        n = n / 1000.0
    return _to_local_naive(dt.datetime.fromtimestamp(n, tz=dt.timezone.utc))

_STRATEGIES = (_parse_iso, _parse_day_mon_yy, _parse_ymd, _parse_slashed, _parse_number)

def parse_date(v: Any) -> dt.datetime | None:
    """Parse a date from any of the formats found in imported sheets.

    Tried in order: ISO 8601, ``DD-Mon-YY`` (3-letter or full month names,
    "Sept" accepted), ``YYYY-MM-DD``, ``DD/MM/YYYY`` then ``MM/DD/YYYY``,
    and a bare number (Excel day serial, epoch seconds, epoch milliseconds).
    Returns a naive local datetime, or None when nothing yields a year in
    [1901, 2099]. Never raises.
    """
    if v is None or isinstance(v, bool):
        return None
    try:
        if isinstance(v, dt.datetime):
            return _in_range(_to_local_naive(v))
        if isinstance(v, dt.date):
            return _in_range(dt.datetime.combine(v, dt.time()))
        if isinstance(v, (int, float)):
            return _in_range(_parse_number(repr(float(v)) if isinstance(v, float) else str(v)))
        s = norm_str(v)
        if s is None:
            return None
        for strategy in _STRATEGIES:
            d = _in_range(strategy(s))
            if d is not None:
                return d
    except (ValueError, OverflowError, OSError, TypeError):
        return None
    return None

def today_local(tz: str | None = None) -> dt.date:
    return dt.datetime.now(ZoneInfo(tz or settings.TZ)).date()

def until_yesterday(today: dt.date | None = None) -> dt.datetime:
    """End of yesterday (23:59:59.999999): same-day entries are not yet due."""
    today = today or today_local()
    return dt.datetime.combine(today - dt.timedelta(days=1), dt.time.max)
