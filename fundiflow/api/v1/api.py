# File: fundiflow/api/v1/api.py

from fastapi import APIRouter

from fundiflow.api.v1.routes_ai import router as ai_router
from fundiflow.api.v1.routes_announcements import router as announcements_router
from fundiflow.api.v1.routes_auth import router as auth_router
from fundiflow.api.v1.routes_dashboard import router as dashboard_router
from fundiflow.api.v1.routes_notifications import router as notifications_router
from fundiflow.api.v1.routes_project import router as project_router
from fundiflow.api.v1.routes_work_sessions import router as work_sessions_router
from fundiflow.api.v1.routes_worker import router as worker_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(project_router, prefix="/projects", tags=["projects"])
api_router.include_router(worker_router, prefix="/workers", tags=["workers"])
api_router.include_router(work_sessions_router, prefix="/work-sessions", tags=["work-sessions"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
api_router.include_router(announcements_router, prefix="/announcements", tags=["announcements"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(ai_router, prefix="/ai", tags=["ai"])
