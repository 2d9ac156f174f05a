"""Create/edit form: prefill, client-side validation and submission."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from worksphere_admin.models.employee import (
    STATUS_ACTIVE,
    Employee,
    EmployeeForm,
    EmployeeFormValues,
    EmployeeFormView,
)
from worksphere_admin.services.employee_api import EmployeeApiClient, EmployeeApiError

logger = logging.getLogger(__name__)

SAVE_ERROR_MESSAGE = "Failed to save employee. Please try again."


class FormValidationError(Exception):
    """Form input rejected before submission; ``errors`` maps input name to message."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(f"Invalid fields: {', '.join(errors)}")
        self.errors = errors


def _field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(name, error["msg"])
    return errors


def validate_employee_form(data: Mapping[str, Any]) -> EmployeeForm:
    try:
        return EmployeeForm.model_validate(dict(data))
    except ValidationError as e:
        raise FormValidationError(_field_errors(e)) from e


def form_values_from_employee(employee: Employee | None) -> EmployeeFormValues:
    if employee is None:
        return EmployeeFormValues()

    return EmployeeFormValues(
        first_name=employee.first_name or "",
        last_name=employee.last_name or "",
        email=employee.email or "",
        phone=employee.phone or "",
        department=employee.department or "",
        position=employee.position or "",
        salary=employee.salary if employee.salary else "",
        hire_date=employee.hire_date.isoformat() if employee.hire_date else "",
        status=employee.status or STATUS_ACTIVE,
        address=employee.address or "",
    )


class EmployeeFormViewModel:
    """State of one open form.

    ``submit`` validates first and sends nothing when validation fails. A
    failed save leaves ``notification`` set and returns ``None``; the caller
    reloads the roster after a successful one.
    """

    def __init__(self, client: EmployeeApiClient, employee: Employee | None = None) -> None:
        self._client = client
        self.employee = employee
        self.values = form_values_from_employee(employee)
        self.errors: dict[str, str] = {}
        self.saving = False
        self.notification: str | None = None

    @property
    def is_edit(self) -> bool:
        return self.employee is not None

    @property
    def title(self) -> str:
        return "Edit Employee" if self.is_edit else "Add New Employee"

    @property
    def submit_label(self) -> str:
        if self.saving:
            return "Saving..."
        return "Update" if self.is_edit else "Create"

    def change(self, name: str, value: Any) -> None:
        """Update one input and clear its error."""
        field_name = to_snake(name)
        if field_name not in EmployeeFormValues.model_fields:
            raise KeyError(name)
        self.values = self.values.model_copy(update={field_name: value})
        self.errors.pop(to_camel(field_name), None)

    def validate(self) -> EmployeeForm | None:
        try:
            form = validate_employee_form(self.values.model_dump(by_alias=True))
        except FormValidationError as e:
            self.errors = e.errors
            return None
        self.errors = {}
        return form

    async def submit(self, data: Mapping[str, Any] | None = None) -> Employee | None:
        if data is not None:
            merged = {**self.values.model_dump(), **{to_snake(key): value for key, value in data.items()}}
            try:
                self.values = EmployeeFormValues.model_validate(merged)
            except ValidationError as e:
                self.errors = _field_errors(e)
                return None

        form = self.validate()
        if form is None:
            return None

        self.saving = True
        self.notification = None
        try:
            if self.employee is not None:
                saved = await self._client.update_employee(self.employee.id, form.to_payload())
            else:
                saved = await self._client.create_employee(form.to_payload())
        except EmployeeApiError:
            logger.exception("Error saving employee")
            self.notification = SAVE_ERROR_MESSAGE
            return None
        finally:
            self.saving = False

        logger.info("Saved employee %s", saved.id)
        return saved

    def to_view(self) -> EmployeeFormView:
        return EmployeeFormView(
            title=self.title,
            submit_label=self.submit_label,
            values=self.values,
            errors=dict(self.errors),
        )
