from __future__ import annotations

import logging

from worksphere_admin.core.formatting import format_currency, format_date, or_placeholder, status_slug
from worksphere_admin.models.employee import Employee
from worksphere_admin.models.employee_details import EmployeeDetailsView, LeaveSummary, SalaryBreakdown
from worksphere_admin.services.employee_api import EmployeeApiClient, EmployeeApiError

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load employee details"
NOT_FOUND_MESSAGE = "Employee not found"


def _initials(employee: Employee) -> str:
    return f"{employee.first_name[:1]}{employee.last_name[:1]}".upper()


def build_employee_details(employee: Employee) -> EmployeeDetailsView:
    salary = employee.salary or 0.0
    status = employee.effective_status
    available = employee.effective_leave_balance
    taken = employee.effective_leaves_taken
    position = or_placeholder(employee.position)

    return EmployeeDetailsView(
        id=employee.id,
        employee_number=f"#{employee.id}",
        initials=_initials(employee),
        full_name=employee.full_name,
        subtitle=f"{position} • {employee.department}",
        email=employee.email,
        phone=or_placeholder(employee.phone),
        address=or_placeholder(employee.address),
        department=employee.department,
        position=position,
        hire_date=format_date(employee.hire_date),
        status=status,
        status_slug=status_slug(status),
        salary=SalaryBreakdown(
            annual=format_currency(salary),
            monthly=format_currency(salary / 12),
            per_day=format_currency(salary / 365),
        ),
        leave=LeaveSummary(available_days=available, taken_days=taken, total_days=available + taken),
    )


class EmployeeDetailsViewModel:
    """Loads one employee; ``error`` covers both failures and a missing record."""

    def __init__(self, client: EmployeeApiClient, employee_id: int) -> None:
        self._client = client
        self.employee_id = employee_id
        self.employee: Employee | None = None
        self.view: EmployeeDetailsView | None = None
        self.loading = False
        self.error: str | None = None
        self.not_found = False
        self.disposed = False

    async def load(self) -> None:
        if self.disposed:
            return

        self.loading = True
        self.error = None
        self.not_found = False
        try:
            employee = await self._client.get_employee(self.employee_id)
        except EmployeeApiError:
            logger.exception("Error loading employee details for %s", self.employee_id)
            if self.disposed:
                return
            self.employee = None
            self.view = None
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            return

        if self.disposed:
            return
        self.loading = False
        self.employee = employee
        if employee is None:
            self.view = None
            self.not_found = True
            self.error = NOT_FOUND_MESSAGE
            return
        self.view = build_employee_details(employee)

    def dispose(self) -> None:
        self.disposed = True
