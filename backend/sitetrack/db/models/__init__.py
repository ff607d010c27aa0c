# import all models for Alembic
from sitetrack.db.models.project import Project
from sitetrack.db.models.activity import BOQActivity
from sitetrack.db.models.kpi import KPIEntry
