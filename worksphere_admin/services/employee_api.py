"""HTTP client for the Employee REST backend."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from worksphere_admin.core.config import Settings
from worksphere_admin.models.employee import Employee, StatisticsSummary

logger = logging.getLogger(__name__)


class EmployeeApiError(Exception):
    """A backend call failed at the transport level or returned a non-2xx status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EmployeeApiClient:
    def __init__(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.timeout_seconds = 300.0

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.EMPLOYEE_API_BASE_URL:
            logger.warning("Employee API base URL missing, EmployeeApiClient not initialized")
            return

        self.base_url = settings.EMPLOYEE_API_BASE_URL.rstrip("/")
        self.timeout_seconds = settings.EMPLOYEE_API_TIMEOUT_SECONDS
        self.initialized = True
        logger.info("EmployeeApiClient initialized (base_url=%s)", self.base_url)

    async def close(self) -> None:
        self.initialized = False
        self.base_url = ""

    async def list_employees(self) -> list[Employee]:
        data = await self._request("GET", "")
        return self._parse_employees(data)

    async def get_employee(self, employee_id: int) -> Employee | None:
        try:
            data = await self._request("GET", f"/{employee_id}")
        except EmployeeApiError as e:
            if e.status == 404:
                return None
            raise
        return self._parse_employee(data)

    async def create_employee(self, payload: dict[str, Any]) -> Employee:
        data = await self._request("POST", "", json=payload)
        return self._parse_employee(data)

    async def update_employee(self, employee_id: int, payload: dict[str, Any]) -> Employee:
        data = await self._request("PUT", f"/{employee_id}", json=payload)
        return self._parse_employee(data)

    async def delete_employee(self, employee_id: int) -> None:
        await self._request("DELETE", f"/{employee_id}")

    async def search_employees(
        self,
        search_term: str | None = None,
        department: str | None = None,
        status: str | None = None,
    ) -> list[Employee]:
        params: dict[str, str] = {}
        if search_term:
            params["searchTerm"] = search_term
        if department:
            params["department"] = department
        if status:
            params["status"] = status

        data = await self._request("GET", "/search", params=params)
        return self._parse_employees(data)

    async def get_statistics(self) -> StatisticsSummary:
        data = await self._request("GET", "/statistics")
        try:
            return StatisticsSummary.model_validate(data or {})
        except ValidationError as e:
            raise EmployeeApiError(f"Malformed statistics response: {e}") from e

    async def check_connection(self) -> bool:
        if not self.initialized:
            return False

        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(f"{self.base_url}/statistics") as response:
                    return response.status == 200
        except Exception:
            logger.exception("Employee API connection check failed")
            return False

    def _parse_employee(self, data: Any) -> Employee:
        try:
            return Employee.model_validate(data)
        except ValidationError as e:
            raise EmployeeApiError(f"Malformed employee response: {e}") from e

    def _parse_employees(self, data: Any) -> list[Employee]:
        if not isinstance(data, list):
            raise EmployeeApiError(f"Expected a list of employees, got {type(data).__name__}")
        return [self._parse_employee(item) for item in data]

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        if not self.initialized:
            raise EmployeeApiError("EmployeeApiClient not initialized")

        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, json=json, params=params) as response:
                    if response.status >= 400:
                        error_text = await response.text()
                        raise EmployeeApiError(
                            f"{method} {url} failed: {response.status} - {error_text}",
                            status=response.status,
                        )
                    if response.status == 204 or response.content_length == 0:
                        return None
                    return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise EmployeeApiError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise EmployeeApiError(f"{method} {url} returned invalid JSON") from e
        except TimeoutError as e:
            raise EmployeeApiError(f"{method} {url} timed out") from e


employee_api = EmployeeApiClient()
