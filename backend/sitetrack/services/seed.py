from sqlalchemy.orm import Session
from sitetrack.db.session import SessionLocal
from sitetrack.crud.projects import list_projects, create_project
from sitetrack.crud.activities import create_activity
from sitetrack.crud.kpis import create_kpi
from sitetrack.schemas.project import ProjectCreate
from sitetrack.schemas.activities import ActivityCreate
from sitetrack.schemas.kpis import KPICreate
from sitetrack.core.logging import logger

# two sibling sub-projects sharing the base code P5066
DEMO_PROJECTS = [
    ProjectCreate(project_code="P5066", project_sub_code="I1", project_name="Infrastructure Phase 1",
                  project_start_date="01-Jan-24", project_completion_date="31-Dec-26"),
    ProjectCreate(project_code="P5066", project_sub_code="I2", project_name="Infrastructure Phase 2",
                  project_start_date="2025-03-01", project_completion_date="2027-06-30"),
]

DEMO_ACTIVITIES = [
    ActivityCreate(project_code="P5066", project_sub_code="I1", project_full_code="P5066-I1",
                   activity_name="Mobilization", unit="LS", activity_timing="pre-commencement",
                   total_units="1", total_value="25,000"),
    ActivityCreate(project_code="P5066", project_sub_code="I1", project_full_code="P5066-I1",
                   activity_name="Excavation", unit="m3", zone_ref="P5066-I1 - Zone A",
                   activity_timing="post-commencement", total_units="1,200", rate="35"),
    ActivityCreate(project_code="P5066", project_sub_code="I2", project_full_code="P5066-I2",
                   activity_name="Excavation", unit="m3", zone_ref="Zone A",
                   activity_timing="post-commencement", total_units="800", rate="40"),
]

DEMO_KPIS = [
    KPICreate(project_full_code="P5066-I1", project_code="P5066", activity_name="Mobilization",
              input_type="Planned", quantity="1", target_date="2024-01-10"),
    KPICreate(project_full_code="P5066-I1", project_code="P5066", activity_name="Mobilization",
              input_type="Actual", quantity="1", actual_date="15-Jan-24", activity_timing="pre-commencement"),
    KPICreate(project_full_code="P5066-I1", project_code="P5066", activity_name="Excavation", zone="Zone A",
              input_type="Planned", quantity="400", target_date="2024-02-28"),
    KPICreate(project_full_code="P5066-I1", project_code="P5066", activity_name="Excavation", zone="Zone A",
              input_type="Actual", quantity="350", actual_date="2024-02-27"),
    KPICreate(project_full_code="P5066-I2", project_code="P5066", activity_name="Excavation", zone="Zone A",
              input_type="Planned", quantity="200", target_date="2025-04-15"),
]

def seed_demo():
    db: Session = SessionLocal()
    try:
        # Create demo portfolio if none
        if list_projects(db):
            return
        for p in DEMO_PROJECTS:
            create_project(db, p)
        for a in DEMO_ACTIVITIES:
            create_activity(db, a)
        for k in DEMO_KPIS:
            create_kpi(db, k)
        logger.info("demo_seeded", projects=len(DEMO_PROJECTS), activities=len(DEMO_ACTIVITIES), kpis=len(DEMO_KPIS))
    finally:
        db.close()
