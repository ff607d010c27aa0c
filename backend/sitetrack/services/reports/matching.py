"""Which project a row belongs to, and which activity a KPI counts against.

Priorities for ``match_priority`` (lower wins):

1. the row's own full code equals the project's full code
2. a row without a full code: its code + sub-code, built the same way,
   equals it
3. project has a sub-code: the row's full code extends the project's full
   code past a separator (legacy sub-project rows)
4. project has no sub-code and the row carries neither a full code nor a
   sub-code: bare codes are equal

All comparisons are case-insensitive.
"""
import re
from collections.abc import Iterable, Sequence
from typing import TypeVar

from sitetrack.services.etl.records import ActivityRecord, KPIRecord, ProjectRecord
from sitetrack.services.etl.utils import clean_zone, norm_str
from sitetrack.services.reports.codes import build_full_code, project_full_code

R = TypeVar("R")

EXACT_FULL_CODE = 1
BUILT_FULL_CODE = 2
FULL_CODE_PREFIX = 3
BARE_CODE = 4


def _up(v) -> str:
    return (norm_str(v) or "").upper()


def match_priority(record, project: ProjectRecord) -> int | None:
    full = _up(project_full_code(project))
    if not full:
        return None
    rec_full = _up(getattr(record, "full_code", None))
    rec_code = _up(getattr(record, "code", None))
    rec_sub = _up(getattr(record, "sub_code", None))

    if rec_full and rec_full == full:
        return EXACT_FULL_CODE
    if not rec_full and rec_code and rec_sub and build_full_code(rec_code, rec_sub).upper() == full:
        return BUILT_FULL_CODE
    if _up(project.sub_code):
        # P5066-I1 must not pick up P5066-I10
        if rec_full.startswith(full) and len(rec_full) > len(full) and not rec_full[len(full)].isalnum():
            return FULL_CODE_PREFIX
        return None
    if not rec_full and not rec_sub and rec_code and rec_code == _up(project.code):
        return BARE_CODE
    return None


def belongs_to_project(record, project: ProjectRecord) -> bool:
    return match_priority(record, project) is not None


def filter_for_project(records: Iterable[R], project: ProjectRecord) -> list[R]:
    return [r for r in records if belongs_to_project(r, project)]


def project_key(project: ProjectRecord) -> str:
    return project.id or project_full_code(project)


def assign_to_projects(records: Iterable[R], projects: Sequence[ProjectRecord]) -> dict[str, list[R]]:
    """Give every record to at most one project: the best priority, then the
    longest (most specific) full code, then the first listed."""
    out: dict[str, list[R]] = {project_key(p): [] for p in projects}
    for rec in records:
        best: tuple[int, int, int] | None = None
        winner: ProjectRecord | None = None
        for i, p in enumerate(projects):
            prio = match_priority(rec, p)
            if prio is None:
                continue
            rank = (prio, -len(project_full_code(p)), i)
            if best is None or rank < best:
                best, winner = rank, p
        if winner is not None:
            out[project_key(winner)].append(rec)
    return out


def _prefix_patterns(prefix: str) -> list[re.Pattern]:
    p = re.escape(prefix)
    return [
        re.compile(rf"^{p}\s*-\s*", re.IGNORECASE),
        re.compile(rf"^{p}\s+", re.IGNORECASE),
        re.compile(rf"^{p}-", re.IGNORECASE),
    ]


def local_zone_name(zone: str, full_code: str | None, code: str | None) -> str:
    """Zone name without its project decoration, lower-cased:
    "P5073 - Parking-Side-A" -> "parking-side-a". The full code is tried
    before the bare code."""
    z = zone.strip()
    for prefix in (norm_str(full_code), norm_str(code)):
        if not prefix:
            continue
        for pattern in _prefix_patterns(prefix):
            if pattern.match(z):
                return pattern.sub("", z, count=1).strip().lower()
    return z.lower()


def zones_match(a, b, full_code: str | None = None, code: str | None = None) -> bool:
    za, zb = clean_zone(a), clean_zone(b)
    if za is None or zb is None:
        return False
    if za.lower() == zb.lower():
        return True
    la = local_zone_name(za, full_code, code)
    lb = local_zone_name(zb, full_code, code)
    return bool(la) and la == lb


def kpi_matches_activity(kpi: KPIRecord, activity: ActivityRecord, project: ProjectRecord) -> bool:
    """Same project, same activity name (case-insensitive), same zone.
    A zoneless KPI only matches a zoneless activity and vice versa."""
    if not belongs_to_project(kpi, project):
        return False
    kname = (kpi.activity_name or "").strip().lower()
    aname = (activity.name or "").strip().lower()
    if not kname or kname != aname:
        return False
    kzone, azone = clean_zone(kpi.zone), clean_zone(activity.zone)
    if kzone is None and azone is None:
        return True
    return zones_match(kzone, azone, project_full_code(project), project.code)


def find_activity_for_kpi(
    kpi: KPIRecord, activities: Iterable[ActivityRecord], project: ProjectRecord
) -> ActivityRecord | None:
    for activity in activities:
        if kpi_matches_activity(kpi, activity, project):
            return activity
    return None
