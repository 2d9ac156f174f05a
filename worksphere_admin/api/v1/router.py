from fastapi import APIRouter

from worksphere_admin.api.v1.endpoints import dashboard, employees, health, roster

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(dashboard.router)
api_router.include_router(roster.router)
api_router.include_router(employees.router)
