"""Dashboard view-model over the backend statistics aggregate.

No aggregation happens here; the only client-side arithmetic is the share
of a count in the total workforce and the monthly payroll estimate. Both
yield 0 when there is nothing to divide by.
"""

from __future__ import annotations

import logging

from worksphere_admin.core.formatting import format_currency, format_fixed, round_half_up, status_slug
from worksphere_admin.models.dashboard import (
    DashboardView,
    DepartmentShare,
    FinancialItem,
    MetricCard,
    StatusLabel,
    StatusSegment,
)
from worksphere_admin.models.employee import (
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    STATUS_ON_LEAVE,
    StatisticsSummary,
)
from worksphere_admin.services.employee_api import EmployeeApiClient, EmployeeApiError

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load statistics"

# chart and legend order
_CHART_STATUSES: tuple[str, ...] = (STATUS_ACTIVE, STATUS_ON_LEAVE, STATUS_INACTIVE)


def percentage(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100


def monthly_cost(total_salary: float) -> int:
    return round_half_up(total_salary / 12)


def _status_count(stats: StatisticsSummary, status: str) -> int:
    return stats.status_breakdown.get(status, 0) or 0


def _metrics(stats: StatisticsSummary) -> list[MetricCard]:
    active = _status_count(stats, STATUS_ACTIVE)
    active_share = round_half_up(percentage(active, stats.total_employees))
    return [
        MetricCard(key="total", label="Total Workforce", value=stats.total_employees, footer="employees"),
        MetricCard(key="active", label="Active Now", value=active, footer=f"{active_share}% of total"),
        MetricCard(
            key="on-leave",
            label="On Leave",
            value=_status_count(stats, STATUS_ON_LEAVE),
            footer="employees away",
        ),
        MetricCard(
            key="inactive",
            label="Inactive",
            value=_status_count(stats, STATUS_INACTIVE),
            footer="employees",
        ),
    ]


def _financials(stats: StatisticsSummary) -> list[FinancialItem]:
    return [
        FinancialItem(
            key="total-payroll",
            label="Total Annual Payroll",
            amount=format_currency(stats.total_salary),
            sublabel=f"{stats.total_employees} employees",
        ),
        FinancialItem(
            key="avg-salary",
            label="Average Salary",
            amount=format_currency(stats.average_salary),
            sublabel="per employee/year",
        ),
        FinancialItem(
            key="monthly-cost",
            label="Monthly Cost",
            amount=format_currency(monthly_cost(stats.total_salary)),
            sublabel="estimated payroll",
        ),
    ]


def _departments(stats: StatisticsSummary) -> list[DepartmentShare]:
    ranked = sorted(stats.department_breakdown.items(), key=lambda item: item[1], reverse=True)
    return [
        DepartmentShare(
            department=department,
            count=count,
            percentage=format_fixed(percentage(count, stats.total_employees), 1),
        )
        for department, count in ranked
    ]


def _status_segments(stats: StatisticsSummary) -> list[StatusSegment]:
    segments: list[StatusSegment] = []
    for status in _CHART_STATUSES:
        count = _status_count(stats, status)
        if count <= 0:
            continue
        segments.append(
            StatusSegment(
                status=status,
                slug=status_slug(status),
                count=count,
                width_percent=percentage(count, stats.total_employees),
                title=f"{status}: {count}",
            )
        )
    return segments


def _status_labels(stats: StatisticsSummary) -> list[StatusLabel]:
    labels: list[StatusLabel] = []
    for status in _CHART_STATUSES:
        count = _status_count(stats, status)
        labels.append(StatusLabel(status=status, slug=status_slug(status), count=count, text=f"{status} ({count})"))
    return labels


def build_dashboard(stats: StatisticsSummary) -> DashboardView:
    return DashboardView(
        metrics=_metrics(stats),
        financials=_financials(stats),
        recent_hires=stats.recent_hires,
        recent_hires_label="New Hires (Last 30 Days)",
        departments=_departments(stats),
        status_segments=_status_segments(stats),
        status_labels=_status_labels(stats),
    )


class DashboardViewModel:
    def __init__(self, client: EmployeeApiClient) -> None:
        self._client = client
        self.statistics: StatisticsSummary | None = None
        self.view: DashboardView | None = None
        self.loading = False
        self.error: str | None = None
        self.disposed = False

    async def load(self) -> None:
        if self.disposed:
            return

        self.loading = True
        self.error = None
        try:
            statistics = await self._client.get_statistics()
        except EmployeeApiError:
            logger.exception("Error loading statistics")
            if self.disposed:
                return
            self.statistics = None
            self.view = None
            self.error = LOAD_ERROR_MESSAGE
            self.loading = False
            return

        if self.disposed:
            return
        self.statistics = statistics
        self.view = build_dashboard(statistics)
        self.loading = False

    def dispose(self) -> None:
        self.disposed = True
