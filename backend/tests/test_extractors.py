from types import SimpleNamespace

from sitetrack.services.etl.extractors import FieldChain
from sitetrack.services.etl.utils import parse_date

def test_first_non_blank_wins():
    chain = FieldChain("a", "b", "c")
    assert chain.get({"a": "", "b": "  ", "c": "x"}) == "x"
    assert chain.get({"a": None, "b": float("nan"), "c": 0}) == 0
    assert chain.get({"b": "B", "c": "C"}) == "B"
    assert chain.get({}, default="d") == "d"
    assert chain.get(None, default="d") == "d"

def test_attributes():
    chain = FieldChain("zone_ref", "zone_number")
    assert chain.get(SimpleNamespace(zone_ref=None, zone_number="Z1")) == "Z1"
    assert chain.text(SimpleNamespace(zone_ref="  Z0 ")) == "Z0"

def test_convert_falls_through():
    chain = FieldChain("Date", "Target Date")
    d = chain.get({"Date": "not a date", "Target Date": "23-Feb-24"}, convert=parse_date)
    assert d.day == 23 and d.month == 2

def test_concat():
    chain = FieldChain("a") + FieldChain("b")
    assert chain.names == ("a", "b")
    assert chain.get({"b": 1}) == 1
