"""Response models for the roster list page."""

from __future__ import annotations

from pydantic import BaseModel

from worksphere_admin.models.employee import CAMEL_CONFIG


class RosterRow(BaseModel):
    """One table row, with every value already formatted for display."""

    model_config = CAMEL_CONFIG

    id: int
    name: str
    email: str
    phone: str
    department: str
    position: str
    salary: str
    status: str
    status_slug: str


class RosterFilters(BaseModel):
    model_config = CAMEL_CONFIG

    search_term: str = ""
    department: str = ""
    status: str = ""
    sort_field: str = "id"
    sort_direction: str = "asc"
    has_active_filters: bool = False


class RosterPage(BaseModel):
    model_config = CAMEL_CONFIG

    rows: list[RosterRow]
    current_page: int
    items_per_page: int
    total_pages: int
    page_numbers: list[int | str]
    filtered_count: int
    total_count: int
    results_info: str
    empty_message: str | None = None
    filters: RosterFilters
    departments: list[str]
    statuses: list[str]
    items_per_page_options: list[int]
