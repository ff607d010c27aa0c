from sitetrack.services.etl.records import ProjectRecord
from sitetrack.services.reports.codes import build_full_code, project_full_code

def test_build_full_code():
    assert build_full_code("P5066", "I1") == "P5066-I1"
    assert build_full_code("P5066", "-I1") == "P5066-I1"
    assert build_full_code(" P5066 ", " I1 ") == "P5066-I1"
    assert build_full_code("P5066", "") == "P5066"
    assert build_full_code("P5066", None) == "P5066"
    assert build_full_code(None, None) == ""

def test_sub_code_already_prefixed():
    assert build_full_code("P5066", "P5066-I1") == "P5066-I1"
    assert build_full_code("P5066", "p5066-I1") == "p5066-I1"

def test_project_full_code():
    assert project_full_code(ProjectRecord(id=None, code="P1", sub_code="A")) == "P1-A"
    assert project_full_code(ProjectRecord(id=None, code="P1", sub_code="A", full_code="P1-X")) == "P1-X"
