"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _codes():
    return [
        sa.Column("project_code", sa.String(length=64), nullable=True),
        sa.Column("project_sub_code", sa.String(length=64), nullable=True),
        sa.Column("project_full_code", sa.String(length=128), nullable=True),
    ]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    ]


def upgrade():
    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_code", sa.String(length=64), nullable=False),
        sa.Column("project_sub_code", sa.String(length=64), nullable=True),
        sa.Column("project_full_code", sa.String(length=128), nullable=True),
        sa.Column("project_name", sa.String(length=256), nullable=True),
        sa.Column("project_status", sa.String(length=32), nullable=False, server_default="upcoming"),
        sa.Column("project_status_label", sa.String(length=64), nullable=True),
        sa.Column("project_start_date", sa.String(length=64), nullable=True),
        sa.Column("project_completion_date", sa.String(length=64), nullable=True),
        sa.Column("raw", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_project_project_code", "project", ["project_code"])
    op.create_index("ix_project_project_full_code", "project", ["project_full_code"])

    op.create_table(
        "boq_activity",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_codes(),
        sa.Column("activity_name", sa.String(length=512), nullable=True),
        sa.Column("unit", sa.String(length=32), nullable=True),
        sa.Column("zone_ref", sa.String(length=128), nullable=True),
        sa.Column("zone_number", sa.String(length=64), nullable=True),
        sa.Column("activity_timing", sa.String(length=32), nullable=True),
        sa.Column("total_units", sa.String(length=64), nullable=True),
        sa.Column("planned_units", sa.String(length=64), nullable=True),
        sa.Column("actual_units", sa.String(length=64), nullable=True),
        sa.Column("rate", sa.String(length=64), nullable=True),
        sa.Column("total_value", sa.String(length=64), nullable=True),
        sa.Column("raw", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_boq_activity_project_code", "boq_activity", ["project_code"])
    op.create_index("ix_boq_activity_project_full_code", "boq_activity", ["project_full_code"])

    op.create_table(
        "kpi_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        *_codes(),
        sa.Column("activity_name", sa.String(length=512), nullable=True),
        sa.Column("input_type", sa.String(length=16), nullable=True),
        sa.Column("zone", sa.String(length=128), nullable=True),
        sa.Column("activity_timing", sa.String(length=32), nullable=True),
        sa.Column("quantity", sa.String(length=64), nullable=True),
        sa.Column("value", sa.String(length=64), nullable=True),
        sa.Column("kpi_date", sa.String(length=64), nullable=True),
        sa.Column("target_date", sa.String(length=64), nullable=True),
        sa.Column("activity_date", sa.String(length=64), nullable=True),
        sa.Column("actual_date", sa.String(length=64), nullable=True),
        sa.Column("raw", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_kpi_record_project_code", "kpi_record", ["project_code"])
    op.create_index("ix_kpi_record_project_full_code", "kpi_record", ["project_full_code"])


def downgrade():
    op.drop_table("kpi_record")
    op.drop_table("boq_activity")
    op.drop_table("project")
