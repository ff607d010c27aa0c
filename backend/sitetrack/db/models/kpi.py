from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from sitetrack.db.base import Base
from sitetrack.db.models._mixins import TimestampMixin

class KPIEntry(Base, TimestampMixin):
    __tablename__ = "kpi_record"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_code: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    project_sub_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_full_code: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    activity_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    input_type: Mapped[str | None] = mapped_column(String(16), nullable=True)  # Planned|Actual
    zone: Mapped[str | None] = mapped_column(String(128), nullable=True)
    activity_timing: Mapped[str | None] = mapped_column(String(32), nullable=True)

    quantity: Mapped[str | None] = mapped_column(String(64), nullable=True)
    value: Mapped[str | None] = mapped_column(String(64), nullable=True)

    kpi_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    target_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    activity_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    actual_date: Mapped[str | None] = mapped_column(String(64), nullable=True)

    raw: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
