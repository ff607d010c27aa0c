from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from sitetrack.db.base import Base
from sitetrack.db.models._mixins import TimestampMixin

class Project(Base, TimestampMixin):
    __tablename__ = "project"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_code: Mapped[str] = mapped_column(String(64), index=True)
    project_sub_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_full_code: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    project_name: Mapped[str | None] = mapped_column(String(256), nullable=True)

    # normalized slug + display label, both written by status write-back
    project_status: Mapped[str] = mapped_column(String(32), default="upcoming")
    project_status_label: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # dates are kept as entered; parsed at the normalization boundary
    project_start_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    project_completion_date: Mapped[str | None] = mapped_column(String(64), nullable=True)

    raw: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
