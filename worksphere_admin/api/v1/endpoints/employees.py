from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from worksphere_admin.core.dependencies import get_current_user, require_admin
from worksphere_admin.models.auth import UserInfo
from worksphere_admin.models.employee import Employee, EmployeeFormView
from worksphere_admin.models.employee_details import EmployeeDetailsView
from worksphere_admin.services.employee_api import EmployeeApiError, employee_api
from worksphere_admin.viewmodels.employee_details import EmployeeDetailsViewModel
from worksphere_admin.viewmodels.employee_form import EmployeeFormViewModel
from worksphere_admin.viewmodels.roster import RosterViewModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


async def _load_for_edit(employee_id: int) -> Employee:
    try:
        employee = await employee_api.get_employee(employee_id)
    except EmployeeApiError as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load employee details",
        ) from err

    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id {employee_id} not found",
        )
    return employee


def _form_failure(form: EmployeeFormViewModel) -> HTTPException:
    if form.errors:
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Please correct the highlighted fields", "errors": form.errors},
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=form.notification,
    )


@router.get("/search", response_model=list[Employee])
async def search_employees(
    search_term: str | None = Query(None, alias="searchTerm"),
    department: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_api.search_employees(search_term, department, status_filter)
    except EmployeeApiError as err:
        logger.exception("Failed to search employees")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to search employees",
        ) from err


@router.get("/form", response_model=EmployeeFormView)
async def new_employee_form(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    return EmployeeFormViewModel(employee_api).to_view()


@router.get("/{employee_id}", response_model=EmployeeDetailsView)
async def get_employee_details(
    employee_id: int,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    details = EmployeeDetailsViewModel(employee_api, employee_id)
    await details.load()

    if details.not_found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=details.error,
        )
    if details.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=details.error,
        )
    return details.view


@router.get("/{employee_id}/form", response_model=EmployeeFormView)
async def edit_employee_form(
    employee_id: int,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    employee = await _load_for_edit(employee_id)
    return EmployeeFormViewModel(employee_api, employee).to_view()


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: dict[str, Any] = Body(...),  # noqa: B008
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    form = EmployeeFormViewModel(employee_api)
    created = await form.submit(data)
    if created is None:
        raise _form_failure(form)

    logger.info("Employee %s created by user=%s", created.id, user.name)
    return created


@router.put("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: int,
    data: dict[str, Any] = Body(...),  # noqa: B008
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    employee = await _load_for_edit(employee_id)
    form = EmployeeFormViewModel(employee_api, employee)
    updated = await form.submit(data)
    if updated is None:
        raise _form_failure(form)

    logger.info("Employee %s updated by user=%s", employee_id, user.name)
    return updated


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: int,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    roster = RosterViewModel(employee_api)
    if not await roster.delete_employee(employee_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=roster.notification,
        )

    logger.info("Employee %s deleted by user=%s", employee_id, user.name)
    return {"message": "Employee deleted successfully"}
