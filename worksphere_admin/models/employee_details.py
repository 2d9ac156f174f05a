"""Response model for the single-employee details view."""

from __future__ import annotations

from pydantic import BaseModel

from worksphere_admin.models.employee import CAMEL_CONFIG


class SalaryBreakdown(BaseModel):
    model_config = CAMEL_CONFIG

    annual: str
    monthly: str
    per_day: str


class LeaveSummary(BaseModel):
    model_config = CAMEL_CONFIG

    available_days: int
    taken_days: int
    total_days: int


class EmployeeDetailsView(BaseModel):
    model_config = CAMEL_CONFIG

    id: int
    employee_number: str
    initials: str
    full_name: str
    subtitle: str
    email: str
    phone: str
    address: str
    department: str
    position: str
    hire_date: str
    status: str
    status_slug: str
    salary: SalaryBreakdown
    leave: LeaveSummary
