from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tests.conftest import make_employee
from worksphere_admin.services.employee_api import EmployeeApiError
from worksphere_admin.viewmodels.roster import (
    DELETE_ERROR_MESSAGE,
    ELLIPSIS,
    EMPTY_MESSAGE,
    LOAD_ERROR_MESSAGE,
    RosterState,
    RosterViewModel,
    SortDirection,
    SortField,
    build_row,
    derive_view,
    filter_employees,
    page_numbers,
    paginate,
    sort_employees,
    unique_departments,
)


def _mock_client(employees=None) -> MagicMock:
    client = MagicMock()
    client.list_employees = AsyncMock(return_value=employees or [])
    client.delete_employee = AsyncMock(return_value=None)
    return client


def _ids(employees) -> list[int]:
    return [e.id for e in employees]


# filtering


def test_search_matches_names_email_and_position_case_insensitively(sample_employees):
    assert _ids(filter_employees(sample_employees, "ALICE")) == [1]
    assert _ids(filter_employees(sample_employees, "jones")) == [2]
    assert _ids(filter_employees(sample_employees, "carol@")) == [3]
    assert _ids(filter_employees(sample_employees, "manager")) == [42]


def test_search_matches_id_as_text(sample_employees):
    assert _ids(filter_employees(sample_employees, "42")) == [42]


def test_search_skips_missing_position(sample_employees):
    # Carol has no position; the search must not fail on it
    assert _ids(filter_employees(sample_employees, "developer")) == [1]


def test_department_and_status_are_exact_matches(sample_employees):
    assert _ids(filter_employees(sample_employees, department="IT")) == [1, 42]
    assert filter_employees(sample_employees, department="it") == []
    assert _ids(filter_employees(sample_employees, status="On Leave")) == [2]


def test_filters_combine(sample_employees):
    assert _ids(filter_employees(sample_employees, "a", department="IT", status="Active")) == [1, 42]


def test_filtering_is_idempotent(sample_employees):
    once = filter_employees(sample_employees, "a", department="IT", status="Active")
    twice = filter_employees(once, "a", department="IT", status="Active")
    assert once == twice


def test_filtered_is_subset_in_original_order(sample_employees):
    filtered = filter_employees(sample_employees, "o")
    positions = [sample_employees.index(e) for e in filtered]
    assert positions == sorted(positions)


def test_empty_filters_keep_everything(sample_employees):
    assert filter_employees(sample_employees) == sample_employees


# sorting


def test_sort_is_case_insensitive():
    bob = make_employee(1, firstName="Bob")
    alice = make_employee(2, firstName="alice")
    ordered = sort_employees([bob, alice], SortField.FIRST_NAME, SortDirection.ASC)
    assert [e.first_name for e in ordered] == ["alice", "Bob"]


def test_sort_by_id_is_numeric():
    employees = [make_employee(10), make_employee(9), make_employee(100)]
    assert _ids(sort_employees(employees, SortField.ID)) == [9, 10, 100]
    assert _ids(sort_employees(employees, SortField.ID, SortDirection.DESC)) == [100, 10, 9]


@pytest.mark.parametrize("direction", [SortDirection.ASC, SortDirection.DESC])
def test_sort_is_stable(direction):
    employees = [
        make_employee(3, department="IT"),
        make_employee(1, department="HR"),
        make_employee(2, department="IT"),
        make_employee(4, department="HR"),
    ]
    ordered = sort_employees(employees, SortField.DEPARTMENT, direction)
    it_ids = [e.id for e in ordered if e.department == "IT"]
    hr_ids = [e.id for e in ordered if e.department == "HR"]
    assert it_ids == [3, 2]
    assert hr_ids == [1, 4]


def test_sort_treats_missing_value_as_empty():
    with_phone = make_employee(1, phone="+91-1")
    without_phone = make_employee(2, phone=None)
    assert _ids(sort_employees([with_phone, without_phone], SortField.PHONE)) == [2, 1]


def test_sort_accepts_raw_values():
    employees = [make_employee(2), make_employee(1)]
    assert _ids(sort_employees(employees, "id", "desc")) == [2, 1]


# pagination


def test_paginate_twenty_five_items():
    items = list(range(25))
    page, total_pages = paginate(items, 3, 10)
    assert total_pages == 3
    assert page == [20, 21, 22, 23, 24]


def test_paginate_empty_has_one_page():
    page, total_pages = paginate([], 1, 10)
    assert page == []
    assert total_pages == 1


def test_paginate_beyond_last_page_is_empty():
    page, total_pages = paginate(list(range(5)), 4, 10)
    assert page == []
    assert total_pages == 1


@pytest.mark.parametrize("per_page", [10, 20, 50, 100])
def test_pages_cover_sequence_without_overlap(per_page):
    items = list(range(137))
    _, total_pages = paginate(items, 1, per_page)
    collected = []
    for current in range(1, total_pages + 1):
        page, _ = paginate(items, current, per_page)
        assert len(page) <= per_page
        collected.extend(page)
    assert collected == items


def test_paginate_rejects_invalid_arguments():
    with pytest.raises(ValueError):
        paginate([1], 0, 10)
    with pytest.raises(ValueError):
        paginate([1], 1, 0)


@pytest.mark.parametrize(
    ("current", "total", "expected"),
    [
        (1, 1, [1]),
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, ELLIPSIS, 10]),
        (5, 10, [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]),
        (10, 10, [1, ELLIPSIS, 9, 10]),
        (3, 5, [1, 2, 3, 4, 5]),
    ],
)
def test_page_numbers(current, total, expected):
    assert page_numbers(current, total) == expected


def test_unique_departments_keeps_first_seen_order(sample_employees):
    assert unique_departments(sample_employees) == ["IT", "HR", "Sales"]


# state transitions


@pytest.mark.parametrize(
    "transition",
    [
        lambda s: s.with_search_term("a"),
        lambda s: s.with_department_filter("IT"),
        lambda s: s.with_status_filter("Active"),
        lambda s: s.with_sort(SortField.EMAIL),
        lambda s: s.with_items_per_page(20),
        lambda s: s.cleared_filters(),
    ],
)
def test_filter_and_sort_changes_reset_page(transition):
    state = RosterState(current_page=4)
    assert transition(state).current_page == 1
    assert state.current_page == 4


def test_page_change_keeps_filters():
    state = RosterState(search_term="a", department_filter="IT").with_page(3)
    assert state.current_page == 3
    assert state.search_term == "a"
    assert state.department_filter == "IT"


def test_reselecting_sort_field_toggles_direction():
    state = RosterState()
    state = state.with_sort(SortField.ID)
    assert state.sort_direction is SortDirection.DESC
    state = state.with_sort(SortField.ID)
    assert state.sort_direction is SortDirection.ASC


def test_selecting_new_sort_field_starts_ascending():
    state = RosterState(sort_direction=SortDirection.DESC).with_sort(SortField.EMAIL)
    assert state.sort_field is SortField.EMAIL
    assert state.sort_direction is SortDirection.ASC


def test_state_coerces_raw_sort_values():
    state = RosterState(sort_field="firstName", sort_direction="desc")
    assert state.sort_field is SortField.FIRST_NAME
    assert state.sort_direction is SortDirection.DESC


def test_state_rejects_unknown_page_size():
    with pytest.raises(ValueError):
        RosterState(items_per_page=15)


def test_clear_filters_keeps_sort():
    state = RosterState(search_term="a", status_filter="Active", sort_field=SortField.EMAIL)
    cleared = state.cleared_filters()
    assert not cleared.has_active_filters
    assert cleared.sort_field is SortField.EMAIL


# derived view


def test_derive_view_pipeline():
    employees = [make_employee(i) for i in range(1, 26)]
    view = derive_view(employees, RosterState(current_page=3))
    assert view.total_pages == 3
    assert _ids(view.page) == [21, 22, 23, 24, 25]
    assert view.filtered_count == 25
    assert view.total_count == 25
    assert view.page_numbers == [1, 2, 3]


def test_derive_view_empty_result(sample_employees):
    view = derive_view(sample_employees, RosterState(search_term="nobody"))
    assert view.is_empty
    assert view.total_pages == 1
    assert view.page == ()


def test_build_row_formats_values(sample_employees):
    carol = sample_employees[2]
    row = build_row(carol)
    assert row.name == "Carol White"
    assert row.phone == "-"
    assert row.position == "-"
    assert row.salary == "₹50,000"
    assert row.status_slug == "inactive"


def test_build_row_defaults_status_to_active():
    row = build_row(make_employee(1, status=None, salary=None))
    assert row.status == "Active"
    assert row.salary == "₹0"


# view-model


@pytest.mark.anyio
async def test_load_replaces_snapshot(sample_employees):
    roster = RosterViewModel(_mock_client(sample_employees))
    await roster.load()

    assert roster.error is None
    assert roster.loading is False
    assert _ids(roster.employees) == [1, 2, 3, 42]
    assert roster.departments == ["IT", "HR", "Sales"]
    assert roster.view.filtered_count == 4


@pytest.mark.anyio
async def test_load_failure_clears_snapshot(sample_employees):
    client = _mock_client(sample_employees)
    roster = RosterViewModel(client)
    await roster.load()

    client.list_employees.side_effect = EmployeeApiError("connection refused")
    await roster.load()

    assert roster.error == LOAD_ERROR_MESSAGE
    assert roster.employees == ()
    assert roster.loading is False
    assert roster.to_page().rows == []


@pytest.mark.anyio
async def test_load_after_dispose_does_nothing(sample_employees):
    client = _mock_client(sample_employees)
    roster = RosterViewModel(client)
    roster.dispose()
    await roster.load()

    client.list_employees.assert_not_awaited()
    assert roster.employees == ()


@pytest.mark.anyio
async def test_result_arriving_after_dispose_is_dropped(sample_employees):
    client = _mock_client()
    roster = RosterViewModel(client)

    async def _list_and_dispose():
        roster.dispose()
        return sample_employees

    client.list_employees.side_effect = _list_and_dispose
    await roster.load()

    assert roster.employees == ()


@pytest.mark.anyio
async def test_delete_success():
    client = _mock_client()
    roster = RosterViewModel(client)

    assert await roster.delete_employee(7) is True
    client.delete_employee.assert_awaited_once_with(7)
    assert roster.notification is None


@pytest.mark.anyio
async def test_delete_failure_sets_notification_and_keeps_snapshot(sample_employees):
    client = _mock_client(sample_employees)
    client.delete_employee.side_effect = EmployeeApiError("gone", status=500)
    roster = RosterViewModel(client)
    await roster.load()

    assert await roster.delete_employee(1) is False
    assert roster.notification == DELETE_ERROR_MESSAGE
    assert len(roster.employees) == 4

    roster.dismiss_notification()
    assert roster.notification is None


@pytest.mark.anyio
async def test_setters_recompute_view(sample_employees):
    roster = RosterViewModel(_mock_client(sample_employees))
    await roster.load()

    roster.set_department_filter("IT")
    assert _ids(roster.view.page) == [1, 42]

    roster.set_sort(SortField.ID)
    assert _ids(roster.view.page) == [42, 1]

    roster.set_search_term("dave")
    assert _ids(roster.view.page) == [42]

    roster.clear_filters()
    assert roster.view.filtered_count == 4


@pytest.mark.anyio
async def test_to_page(sample_employees):
    roster = RosterViewModel(_mock_client(sample_employees))
    await roster.load()
    roster.set_status_filter("Active")

    page = roster.to_page()
    assert page.results_info == "Showing 2 of 4 employees"
    assert page.empty_message is None
    assert page.filters.has_active_filters is True
    assert page.statuses == ["Active", "Inactive", "On Leave"]
    assert page.items_per_page_options == [10, 20, 50, 100]

    data = page.model_dump(by_alias=True)
    assert data["filters"]["sortField"] == "id"
    assert data["rows"][0]["statusSlug"] == "active"


@pytest.mark.anyio
async def test_to_page_empty_message(sample_employees):
    roster = RosterViewModel(_mock_client(sample_employees))
    await roster.load()
    roster.set_search_term("zzz")

    page = roster.to_page()
    assert page.empty_message == EMPTY_MESSAGE
    assert page.results_info == "Showing 0 of 4 employees"


@pytest.mark.anyio
async def test_load_with_non_json_body_sets_error():
    from worksphere_admin.core.config import Settings
    from worksphere_admin.services.employee_api import EmployeeApiClient

    client = EmployeeApiClient()
    await client.initialize(Settings(EMPLOYEE_API_BASE_URL="http://backend.test/api/employees"))

    response = MagicMock()
    response.status = 200
    response.content_length = None
    response.json = AsyncMock(side_effect=ValueError("Expecting value: line 1 column 1 (char 0)"))
    request_context = AsyncMock()
    request_context.__aenter__.return_value = response
    session = MagicMock()
    session.request.return_value = request_context
    client_session = AsyncMock()
    client_session.__aenter__.return_value = session

    roster = RosterViewModel(client)
    with patch("worksphere_admin.services.employee_api.aiohttp.ClientSession", return_value=client_session):
        await roster.load()

    assert roster.error == LOAD_ERROR_MESSAGE
    assert roster.employees == ()
    assert roster.loading is False
