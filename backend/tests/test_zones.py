import itertools

from sitetrack.services.etl.records import ActivityRecord, ProjectRecord
from sitetrack.services.etl.utils import clean_zone
from sitetrack.services.reports.matching import local_zone_name, zones_match
from sitetrack.services.reports.quantities import ActivityQuantity, ProjectQuantities, QuantitySummary
from sitetrack.services.reports.zones import zone_analytics

def test_prefixed_zone_matches_plain():
    assert zones_match("P5073 - Parking-Side-A", "Parking-Side-A", "P5073", "P5073")
    assert zones_match("p5073 parking-side-a", "Parking-Side-A", "P5073", "P5073")
    assert zones_match("P5073-Parking-Side-A", "Parking-Side-A", "P5073", "P5073")

def test_bare_code_prefix_when_full_code_absent_from_zone():
    assert zones_match("P5073 - Zone B", "Zone B", "P5073-I1", "P5073")
    assert zones_match("P5073-I1 - Zone B", "P5073 Zone B", "P5073-I1", "P5073")

def test_local_name_keeps_full_zone_name():
    assert local_zone_name("P5073 - Parking-Side-A", "P5073", "P5073") == "parking-side-a"
    assert local_zone_name("Parking-Side-A", "P5073", "P5073") == "parking-side-a"

def test_different_zones():
    assert not zones_match("Zone A", "Zone B", "P1", "P1")
    assert not zones_match("Zone A", "Zone A1", "P1", "P1")

def test_no_zone_values():
    for z in ("", "0", "Enabling Division", "enabling division", None):
        assert not zones_match(z, z, "P1", "P1")
        assert not zones_match(z, "Zone A", "P1", "P1")

def test_symmetric():
    zones = ["P5073 - Parking-Side-A", "Parking-Side-A", "P5073 Zone B", "Zone B", "0", "", "zone b", "P5073-I1-Zone B"]
    for a, b in itertools.product(zones, repeat=2):
        for full, code in (("P5073", "P5073"), ("P5073-I1", "P5073"), ("", "")):
            assert zones_match(a, b, full, code) == zones_match(b, a, full, code)

def test_zone_analytics_groups_by_local_name():
    project = ProjectRecord(id="1", code="P5073", sub_code="I1", full_code="P5073-I1")

    def item(zone, total, done):
        return ActivityQuantity(ActivityRecord(id=None, zone=zone), QuantitySummary(done=done, total=total, planned=0.0))

    items = [
        item("P5073-I1 - Zone A", 100, 40),
        item("Zone A", 100, 60),
        item("Zone B", 50, 50),
        item("Zone C", 10, 0),
        item(None, 10, 10),
        item("Enabling Division", 10, 10),
    ]
    za = zone_analytics(project, ProjectQuantities(items=items, done=0, total=0, planned=0))
    by_zone = {z.zone: z for z in za.zones}
    assert set(by_zone) == {"P5073-I1 - Zone A", "Zone B", "Zone C"}
    a = by_zone["P5073-I1 - Zone A"]
    assert (a.activities, a.total, a.done, a.progress_pct, a.state) == (2, 200, 100, 50.0, "active")
    assert by_zone["Zone B"].state == "completed"
    assert by_zone["Zone C"].state == "pending"
    assert (za.active, za.completed) == (1, 1)
    assert za.average_progress == 50.0
    assert [z.zone for z in za.ranked()] == ["Zone B", "P5073-I1 - Zone A", "Zone C"]

def test_placeholder_zones_are_no_zone():
    for v in (None, "", "  ", "0", 0, "Enabling Division", "enabling division "):
        assert clean_zone(v) is None
    assert clean_zone(" Zone A ") == "Zone A"
