from typing import Any

from sitetrack.services.etl.utils import norm_str


def build_full_code(code: Any, sub_code: Any) -> str:
    """Canonical "full code" from a project code and sub-code.

    - no sub-code: the code itself
    - sub-code already starting with the code (case-insensitive): the
      sub-code verbatim, so "P5066" + "P5066-I1" stays "P5066-I1"
    - sub-code starting with "-": concatenated as is
    - otherwise joined with "-"
    """
    c = norm_str(code) or ""
    s = norm_str(sub_code) or ""
    if not s:
        return c
    if s.upper().startswith(c.upper()):
        return s
    if s.startswith("-"):
        return f"{c}{s}"
    return f"{c}-{s}"


def project_full_code(project) -> str:
    """Stored full code when present, otherwise synthesized."""
    stored = norm_str(getattr(project, "full_code", None))
    if stored:
        return stored
    return build_full_code(getattr(project, "code", None), getattr(project, "sub_code", None))
