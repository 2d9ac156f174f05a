from __future__ import annotations

from fastapi import APIRouter, Depends

from worksphere_admin.core.config import settings
from worksphere_admin.core.dependencies import get_current_user
from worksphere_admin.models.auth import UserInfo
from worksphere_admin.services.employee_api import employee_api

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    if employee_api.initialized:
        ok = await employee_api.check_connection()
        services["employee_api"] = "ok" if ok else "error"
    else:
        services["employee_api"] = "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
