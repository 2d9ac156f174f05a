from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from worksphere_admin.core.dependencies import get_current_user
from worksphere_admin.models.auth import UserInfo
from worksphere_admin.models.dashboard import DashboardView
from worksphere_admin.services.employee_api import employee_api
from worksphere_admin.viewmodels.dashboard import DashboardViewModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardView)
async def get_dashboard(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    dashboard = DashboardViewModel(employee_api)
    await dashboard.load()

    if dashboard.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=dashboard.error,
        )
    return dashboard.view
