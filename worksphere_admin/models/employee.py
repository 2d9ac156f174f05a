"""Employee models exchanged with the Employee REST backend."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"
STATUS_ON_LEAVE = "On Leave"
STATUSES: tuple[str, ...] = (STATUS_ACTIVE, STATUS_INACTIVE, STATUS_ON_LEAVE)

DEFAULT_LEAVE_BALANCE = 20
DEFAULT_LEAVES_TAKEN = 0

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Employee(BaseModel):
    """A single employee record as returned by the backend."""

    model_config = CAMEL_CONFIG

    id: int
    first_name: str
    last_name: str
    email: str
    department: str
    position: str | None = None
    phone: str | None = None
    salary: float | None = None
    hire_date: date | None = None
    status: str | None = None
    address: str | None = None
    leave_balance: int | None = None
    leaves_taken: int | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def effective_status(self) -> str:
        return self.status or STATUS_ACTIVE

    @property
    def effective_leave_balance(self) -> int:
        return self.leave_balance if self.leave_balance is not None else DEFAULT_LEAVE_BALANCE

    @property
    def effective_leaves_taken(self) -> int:
        return self.leaves_taken if self.leaves_taken is not None else DEFAULT_LEAVES_TAKEN


class StatisticsSummary(BaseModel):
    """Backend-computed aggregate consumed read-only by the dashboard."""

    model_config = CAMEL_CONFIG

    total_employees: int = 0
    total_salary: float = 0.0
    average_salary: float = 0.0
    recent_hires: int = 0
    status_breakdown: dict[str, int] = {}
    department_breakdown: dict[str, int] = {}


class EmployeeFormValues(BaseModel):
    """Raw, unvalidated form values used to prefill the create/edit form."""

    model_config = CAMEL_CONFIG

    first_name: str | None = ""
    last_name: str | None = ""
    email: str | None = ""
    phone: str | None = ""
    department: str | None = ""
    position: str | None = ""
    salary: float | str | None = ""
    hire_date: str | None = ""
    status: str | None = STATUS_ACTIVE
    address: str | None = ""


_REQUIRED_MESSAGES: dict[str, str] = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "department": "Department is required",
    "position": "Position is required",
}


def _require_text(value: Any, message: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise PydanticCustomError("required", message)
    return text


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EmployeeForm(BaseModel):
    """Validated create/update payload.

    Every check here runs before any request is sent; failures carry the
    field-level message shown next to the input.
    """

    model_config = CAMEL_CONFIG

    first_name: str = Field(default="", validate_default=True)
    last_name: str = Field(default="", validate_default=True)
    email: str = Field(default="", validate_default=True)
    phone: str | None = None
    department: str = Field(default="", validate_default=True)
    position: str = Field(default="", validate_default=True)
    salary: float | None = Field(default=None, validate_default=True)
    hire_date: date | None = None
    status: Literal["Active", "Inactive", "On Leave"] = STATUS_ACTIVE
    address: str | None = None

    @field_validator("first_name", "last_name", "department", "position", mode="before")
    @classmethod
    def _check_required(cls, value: Any, info: ValidationInfo) -> str:
        return _require_text(value, _REQUIRED_MESSAGES[info.field_name])

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: Any) -> str:
        text = _require_text(value, "Email is required")
        if not _EMAIL_PATTERN.search(text):
            raise PydanticCustomError("email_invalid", "Email is invalid")
        return text

    @field_validator("salary", mode="before")
    @classmethod
    def _check_salary(cls, value: Any) -> float:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("required", "Salary is required")
        try:
            amount = float(value)
        except (TypeError, ValueError):
            raise PydanticCustomError("salary_invalid", "Salary must be a number") from None
        if amount <= 0:
            raise PydanticCustomError("salary_positive", "Salary must be greater than 0")
        return amount

    @field_validator("phone", "hire_date", "address", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return STATUS_ACTIVE
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EmployeeFormView(BaseModel):
    """What the browser needs to render the create/edit form."""

    model_config = CAMEL_CONFIG

    title: str
    submit_label: str
    values: EmployeeFormValues
    errors: dict[str, str] = {}
