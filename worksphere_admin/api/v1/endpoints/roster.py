from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from worksphere_admin.core.config import settings
from worksphere_admin.core.dependencies import get_current_user
from worksphere_admin.models.auth import UserInfo
from worksphere_admin.models.roster import RosterPage
from worksphere_admin.services.employee_api import employee_api
from worksphere_admin.viewmodels.roster import (
    ITEMS_PER_PAGE_OPTIONS,
    RosterState,
    RosterViewModel,
    SortDirection,
    SortField,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/roster", tags=["roster"])


@router.get("", response_model=RosterPage)
async def get_roster(
    search: str = "",
    department: str = "",
    status_filter: str = Query("", alias="status"),
    sort: SortField = SortField.ID,
    direction: SortDirection = SortDirection.ASC,
    page: int = Query(1, ge=1),
    per_page: int | None = None,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    items_per_page = settings.DEFAULT_ITEMS_PER_PAGE if per_page is None else per_page
    if items_per_page not in ITEMS_PER_PAGE_OPTIONS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"per_page must be one of {list(ITEMS_PER_PAGE_OPTIONS)}",
        )

    state = RosterState(
        search_term=search,
        department_filter=department,
        status_filter=status_filter,
        sort_field=sort,
        sort_direction=direction,
        current_page=page,
        items_per_page=items_per_page,
    )
    roster = RosterViewModel(employee_api, state)
    await roster.load()

    if roster.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=roster.error,
        )

    logger.debug(
        "Roster page %d/%d: %d of %d employees, user=%s",
        roster.view.current_page,
        roster.view.total_pages,
        roster.view.filtered_count,
        roster.view.total_count,
        user.name,
    )
    return roster.to_page()
