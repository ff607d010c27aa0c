from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from sitetrack.db.base import Base
from sitetrack.db.models._mixins import TimestampMixin

class BOQActivity(Base, TimestampMixin):
    __tablename__ = "boq_activity"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_code: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    project_sub_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_full_code: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    activity_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    zone_ref: Mapped[str | None] = mapped_column(String(128), nullable=True)
    zone_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    activity_timing: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # measures as entered (spreadsheet text, may carry thousands separators)
    total_units: Mapped[str | None] = mapped_column(String(64), nullable=True)
    planned_units: Mapped[str | None] = mapped_column(String(64), nullable=True)
    actual_units: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rate: Mapped[str | None] = mapped_column(String(64), nullable=True)
    total_value: Mapped[str | None] = mapped_column(String(64), nullable=True)

    raw: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
