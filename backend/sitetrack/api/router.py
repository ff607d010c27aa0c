from fastapi import APIRouter
from sitetrack.api.routers import projects, activities, kpis, reports

api_router = APIRouter()
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(kpis.router, prefix="/kpis", tags=["kpis"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
