from sqlalchemy import func, or_

from sitetrack.services.etl.utils import norm_str

as_text = norm_str


def loose_project_filter(model, code: str | None, full_code: str | None):
    """Coarse OR filter: full code prefix or equal bare code. Rows it lets
    through are matched precisely afterwards."""
    conds = []
    full = norm_str(full_code)
    if full:
        escaped = full.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        conds.append(model.project_full_code.ilike(f"{escaped}%", escape="\\"))
    c = norm_str(code)
    if c:
        conds.append(func.upper(model.project_code) == c.upper())
    if not conds:
        return None
    return or_(*conds)
