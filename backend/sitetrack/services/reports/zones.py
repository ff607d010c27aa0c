"""Progress per zone of one project.

Activities are grouped by their local zone name, so "P5066-I1 - Zone A" and
"Zone A" fall in the same zone. Activities without a zone are left out.
"""
from dataclasses import dataclass

from sitetrack.services.etl.records import ProjectRecord
from sitetrack.services.etl.utils import clean_zone
from sitetrack.services.reports.codes import project_full_code
from sitetrack.services.reports.matching import local_zone_name
from sitetrack.services.reports.quantities import ProjectQuantities

PENDING = "pending"
ACTIVE = "active"
COMPLETED = "completed"


@dataclass(frozen=True)
class ZoneProgress:
    zone: str
    activities: int
    total: float
    done: float

    @property
    def progress_pct(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(self.done / self.total * 100, 2)

    @property
    def state(self) -> str:
        pct = self.progress_pct
        if pct >= 100:
            return COMPLETED
        if pct > 0:
            return ACTIVE
        return PENDING


@dataclass(frozen=True)
class ZoneAnalytics:
    zones: list[ZoneProgress]

    @property
    def active(self) -> int:
        return sum(1 for z in self.zones if z.state == ACTIVE)

    @property
    def completed(self) -> int:
        return sum(1 for z in self.zones if z.state == COMPLETED)

    @property
    def average_progress(self) -> float:
        if not self.zones:
            return 0.0
        return round(sum(z.progress_pct for z in self.zones) / len(self.zones), 2)

    def ranked(self) -> list[ZoneProgress]:
        return sorted(self.zones, key=lambda z: (-z.progress_pct, z.zone.lower()))


def zone_analytics(project: ProjectRecord, quantities: ProjectQuantities) -> ZoneAnalytics:
    full = project_full_code(project)
    groups: dict[str, dict] = {}
    for item in quantities.items:
        zone = clean_zone(item.activity.zone)
        if zone is None:
            continue
        key = local_zone_name(zone, full, project.code)
        g = groups.setdefault(key, {"zone": zone, "activities": 0, "total": 0.0, "done": 0.0})
        g["activities"] += 1
        g["total"] += item.summary.total
        g["done"] += item.summary.done
    zones = [ZoneProgress(**g) for _, g in sorted(groups.items())]
    return ZoneAnalytics(zones=zones)
