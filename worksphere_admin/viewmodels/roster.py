"""Roster view-model: filter, sort and paginate the employee collection.

The collection is a value snapshot replaced wholesale on every ``load``.
``RosterState`` is immutable; every transition returns a new state and any
filter, sort or page-size change resets the page to 1. ``derive_view`` is a
pure function of (collection, state) and is recomputed synchronously after
every change.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypeVar

from worksphere_admin.core.formatting import format_currency, or_placeholder, status_slug
from worksphere_admin.models.employee import STATUSES, Employee
from worksphere_admin.models.roster import RosterFilters, RosterPage, RosterRow
from worksphere_admin.services.employee_api import EmployeeApiClient, EmployeeApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ITEMS_PER_PAGE_OPTIONS: tuple[int, ...] = (10, 20, 50, 100)
ELLIPSIS = "..."

LOAD_ERROR_MESSAGE = "Failed to load employees. Make sure the backend is running."
DELETE_ERROR_MESSAGE = "Failed to delete employee"
EMPTY_MESSAGE = "No employees found"


class SortField(str, Enum):
    ID = "id"
    FIRST_NAME = "firstName"
    EMAIL = "email"
    PHONE = "phone"
    DEPARTMENT = "department"
    POSITION = "position"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_ATTRIBUTES: dict[SortField, str] = {
    SortField.ID: "id",
    SortField.FIRST_NAME: "first_name",
    SortField.EMAIL: "email",
    SortField.PHONE: "phone",
    SortField.DEPARTMENT: "department",
    SortField.POSITION: "position",
    SortField.STATUS: "status",
}


def _matches_search(employee: Employee, term: str) -> bool:
    needle = term.lower()
    texts = (employee.first_name, employee.last_name, employee.email, employee.position)
    if any(needle in (text or "").lower() for text in texts):
        return True
    return term in str(employee.id)


def filter_employees(
    employees: Iterable[Employee],
    search_term: str = "",
    department: str = "",
    status: str = "",
) -> list[Employee]:
    filtered = list(employees)

    if search_term:
        filtered = [e for e in filtered if _matches_search(e, search_term)]

    if department:
        filtered = [e for e in filtered if e.department == department]

    if status:
        filtered = [e for e in filtered if e.status == status]

    return filtered


def _sort_key(sort_field: SortField):
    attribute = _SORT_ATTRIBUTES[sort_field]

    if sort_field is SortField.ID:
        return lambda employee: employee.id

    def key(employee: Employee) -> str:
        value = getattr(employee, attribute)
        return "" if value is None else str(value).lower()

    return key


def sort_employees(
    employees: Iterable[Employee],
    sort_field: SortField = SortField.ID,
    direction: SortDirection = SortDirection.ASC,
) -> list[Employee]:
    # sorted() keeps equal elements in input order even with reverse=True
    return sorted(
        employees,
        key=_sort_key(SortField(sort_field)),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )


def paginate(items: Sequence[T], current_page: int, items_per_page: int) -> tuple[list[T], int]:
    if items_per_page <= 0:
        raise ValueError(f"items_per_page must be positive, got {items_per_page}")
    if current_page < 1:
        raise ValueError(f"current_page must be >= 1, got {current_page}")

    total_pages = max(1, math.ceil(len(items) / items_per_page))
    start = (current_page - 1) * items_per_page
    end = min(len(items), current_page * items_per_page)
    return list(items[start:end]), total_pages


def page_numbers(current_page: int, total_pages: int) -> list[int | str]:
    """Page links to render: first, last, neighbours of current, one ELLIPSIS per gap."""
    pages: list[int | str] = []
    for page in range(1, total_pages + 1):
        if page in (1, total_pages) or abs(page - current_page) <= 1:
            pages.append(page)
        elif pages[-1] != ELLIPSIS:
            pages.append(ELLIPSIS)
    return pages


def unique_departments(employees: Iterable[Employee]) -> list[str]:
    return list(dict.fromkeys(e.department for e in employees))


@dataclass(frozen=True)
class RosterState:
    search_term: str = ""
    department_filter: str = ""
    status_filter: str = ""
    sort_field: SortField = SortField.ID
    sort_direction: SortDirection = SortDirection.ASC
    current_page: int = 1
    items_per_page: int = 10

    def __post_init__(self) -> None:
        if self.items_per_page not in ITEMS_PER_PAGE_OPTIONS:
            raise ValueError(
                f"items_per_page must be one of {ITEMS_PER_PAGE_OPTIONS}, got {self.items_per_page}"
            )
        if self.current_page < 1:
            raise ValueError(f"current_page must be >= 1, got {self.current_page}")
        object.__setattr__(self, "sort_field", SortField(self.sort_field))
        object.__setattr__(self, "sort_direction", SortDirection(self.sort_direction))

    @property
    def has_active_filters(self) -> bool:
        return bool(self.search_term or self.department_filter or self.status_filter)

    def with_search_term(self, search_term: str) -> RosterState:
        return replace(self, search_term=search_term, current_page=1)

    def with_department_filter(self, department: str) -> RosterState:
        return replace(self, department_filter=department, current_page=1)

    def with_status_filter(self, status: str) -> RosterState:
        return replace(self, status_filter=status, current_page=1)

    def with_sort(self, sort_field: SortField, direction: SortDirection | None = None) -> RosterState:
        """Sort by ``sort_field``; without a direction, re-selecting the current field flips it."""
        sort_field = SortField(sort_field)
        if direction is None:
            if sort_field is self.sort_field and self.sort_direction is SortDirection.ASC:
                direction = SortDirection.DESC
            else:
                direction = SortDirection.ASC
        return replace(self, sort_field=sort_field, sort_direction=direction, current_page=1)

    def with_items_per_page(self, items_per_page: int) -> RosterState:
        return replace(self, items_per_page=items_per_page, current_page=1)

    def with_page(self, page: int) -> RosterState:
        return replace(self, current_page=page)

    def cleared_filters(self) -> RosterState:
        return replace(self, search_term="", department_filter="", status_filter="", current_page=1)


@dataclass(frozen=True)
class DerivedView:
    filtered: tuple[Employee, ...]
    sorted: tuple[Employee, ...]
    page: tuple[Employee, ...]
    current_page: int
    total_pages: int
    total_count: int
    page_numbers: list[int | str] = field(default_factory=list)

    @property
    def filtered_count(self) -> int:
        return len(self.filtered)

    @property
    def is_empty(self) -> bool:
        return not self.filtered


def derive_view(employees: Sequence[Employee], state: RosterState) -> DerivedView:
    filtered = filter_employees(employees, state.search_term, state.department_filter, state.status_filter)
    ordered = sort_employees(filtered, state.sort_field, state.sort_direction)
    page, total_pages = paginate(ordered, state.current_page, state.items_per_page)
    return DerivedView(
        filtered=tuple(filtered),
        sorted=tuple(ordered),
        page=tuple(page),
        current_page=state.current_page,
        total_pages=total_pages,
        total_count=len(employees),
        page_numbers=page_numbers(state.current_page, total_pages),
    )


def build_row(employee: Employee) -> RosterRow:
    status = employee.effective_status
    return RosterRow(
        id=employee.id,
        name=employee.full_name,
        email=employee.email,
        phone=or_placeholder(employee.phone),
        department=employee.department,
        position=or_placeholder(employee.position),
        salary=format_currency(employee.salary),
        status=status,
        status_slug=status_slug(status),
    )


class RosterViewModel:
    """Holds the employee snapshot and the current roster state.

    Backend failures never propagate out of this class: a failed ``load``
    sets ``error`` and drops the snapshot, a failed mutation sets
    ``notification`` and keeps it. After ``dispose`` no request result
    touches the state.
    """

    def __init__(self, client: EmployeeApiClient, state: RosterState | None = None) -> None:
        self._client = client
        self.employees: tuple[Employee, ...] = ()
        self.state = state or RosterState()
        self.loading = False
        self.error: str | None = None
        self.notification: str | None = None
        self.disposed = False
        self.view = derive_view(self.employees, self.state)

    def _recompute(self) -> None:
        self.view = derive_view(self.employees, self.state)

    def _apply(self, state: RosterState) -> None:
        self.state = state
        self._recompute()

    @property
    def departments(self) -> list[str]:
        return unique_departments(self.employees)

    async def load(self) -> None:
        if self.disposed:
            return

        self.loading = True
        self.error = None
        try:
            employees = await self._client.list_employees()
        except EmployeeApiError:
            logger.exception("Error loading employees")
            if self.disposed:
                return
            self.employees = ()
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            self._recompute()
            return

        if self.disposed:
            return
        self.employees = tuple(employees)
        self.loading = False
        self._recompute()

    async def delete_employee(self, employee_id: int) -> bool:
        """Delete one employee; the caller reloads on success."""
        if self.disposed:
            return False

        self.notification = None
        try:
            await self._client.delete_employee(employee_id)
        except EmployeeApiError:
            logger.exception("Error deleting employee %s", employee_id)
            if not self.disposed:
                self.notification = DELETE_ERROR_MESSAGE
            return False

        logger.info("Deleted employee %s", employee_id)
        return True

    def dismiss_notification(self) -> None:
        self.notification = None

    def dispose(self) -> None:
        self.disposed = True

    def set_search_term(self, search_term: str) -> None:
        self._apply(self.state.with_search_term(search_term))

    def set_department_filter(self, department: str) -> None:
        self._apply(self.state.with_department_filter(department))

    def set_status_filter(self, status: str) -> None:
        self._apply(self.state.with_status_filter(status))

    def set_sort(self, sort_field: SortField, direction: SortDirection | None = None) -> None:
        self._apply(self.state.with_sort(sort_field, direction))

    def set_items_per_page(self, items_per_page: int) -> None:
        self._apply(self.state.with_items_per_page(items_per_page))

    def set_page(self, page: int) -> None:
        self._apply(self.state.with_page(page))

    def clear_filters(self) -> None:
        self._apply(self.state.cleared_filters())

    def to_page(self) -> RosterPage:
        view = self.view
        return RosterPage(
            rows=[build_row(e) for e in view.page],
            current_page=view.current_page,
            items_per_page=self.state.items_per_page,
            total_pages=view.total_pages,
            page_numbers=view.page_numbers,
            filtered_count=view.filtered_count,
            total_count=view.total_count,
            results_info=f"Showing {view.filtered_count} of {view.total_count} employees",
            empty_message=EMPTY_MESSAGE if view.is_empty else None,
            filters=RosterFilters(
                search_term=self.state.search_term,
                department=self.state.department_filter,
                status=self.state.status_filter,
                sort_field=self.state.sort_field.value,
                sort_direction=self.state.sort_direction.value,
                has_active_filters=self.state.has_active_filters,
            ),
            departments=self.departments,
            statuses=list(STATUSES),
            items_per_page_options=list(ITEMS_PER_PAGE_OPTIONS),
        )
