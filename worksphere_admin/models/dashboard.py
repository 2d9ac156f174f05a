"""Response models for the dashboard page."""

from __future__ import annotations

from pydantic import BaseModel

from worksphere_admin.models.employee import CAMEL_CONFIG


class MetricCard(BaseModel):
    model_config = CAMEL_CONFIG

    key: str
    label: str
    value: int
    footer: str


class FinancialItem(BaseModel):
    model_config = CAMEL_CONFIG

    key: str
    label: str
    amount: str
    sublabel: str


class DepartmentShare(BaseModel):
    model_config = CAMEL_CONFIG

    department: str
    count: int
    percentage: str


class StatusSegment(BaseModel):
    """A bar segment; only statuses with a positive count get one."""

    model_config = CAMEL_CONFIG

    status: str
    slug: str
    count: int
    width_percent: float
    title: str


class StatusLabel(BaseModel):
    model_config = CAMEL_CONFIG

    status: str
    slug: str
    count: int
    text: str


class DashboardView(BaseModel):
    model_config = CAMEL_CONFIG

    metrics: list[MetricCard]
    financials: list[FinancialItem]
    recent_hires: int
    recent_hires_label: str
    departments: list[DepartmentShare]
    status_segments: list[StatusSegment]
    status_labels: list[StatusLabel]
