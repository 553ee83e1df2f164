"""Authenticated access to the Planday REST API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..auth import SessionAuthority
from ..enrichment import Page
from ..errors import PlandayAPIError, UnauthenticatedError
from ..http import create_async_client
from ..logging import get_logger
from ..settings import PlandaySettings, load_planday_settings
from .config import DEFAULT_ENDPOINTS, PlandayApiEndpoints
from .schemas import AbsenceRecord, Department, Employee, PayrollData, Position, Shift, ShiftType

LOGGER = get_logger(__name__)


def _unwrap_data(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class PlandayClient:
    """Issues bearer-authenticated requests using tokens from the session authority."""

    def __init__(
        self,
        authority: SessionAuthority,
        settings: Optional[PlandaySettings] = None,
        *,
        endpoints: PlandayApiEndpoints = DEFAULT_ENDPOINTS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._authority = authority
        self.settings = settings or load_planday_settings()
        self.endpoints = endpoints
        self._transport = transport

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        access_token = await self._authority.require_access_token()
        headers = {
            "Authorization": f"Bearer {access_token}",
            "X-ClientId": self.settings.client_id,
            "Content-Type": "application/json",
        }
        LOGGER.debug("planday_request", method=method, path=path)
        try:
            async with create_async_client(
                timeout=self.settings.request_timeout_seconds,
                base_url=self.settings.api_base_url,
                headers=headers,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            LOGGER.error("planday_request_failed", method=method, path=path, error=str(exc))
            raise PlandayAPIError(f"Network error: {exc}") from exc

        if response.status_code == 401:
            raise UnauthenticatedError(
                "Planday rejected the access token. Please re-authenticate using the authenticate_planday tool."
            )
        if response.is_error:
            raise PlandayAPIError(
                f"API Error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def fetch_page(self, path: str, *, limit: int, offset: int = 0) -> Page:
        payload = await self.get(path, params={"limit": limit, "offset": offset})
        if isinstance(payload, list):
            return Page(items=payload, offset=offset)
        payload = payload or {}
        paging = payload.get("paging") or {}
        return Page(items=list(payload.get("data") or []), offset=offset, total=paging.get("total"))

    async def fetch_entity(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            payload = await self.get(path)
        except PlandayAPIError as exc:
            if exc.is_not_found:
                return None
            raise
        entity = _unwrap_data(payload)
        return entity if isinstance(entity, dict) and entity else None

    async def get_shifts(
        self,
        start_date: str,
        end_date: str,
        *,
        department_ids: Sequence[int] = (),
        employee_ids: Sequence[int] = (),
        position_ids: Sequence[int] = (),
        shift_type_ids: Sequence[int] = (),
        status: Optional[str] = None,
    ) -> List[Shift]:
        params: Dict[str, Any] = {"From": start_date, "To": end_date}
        for name, ids in (
            ("DepartmentId", department_ids),
            ("EmployeeId", employee_ids),
            ("PositionId", position_ids),
            ("ShiftTypeId", shift_type_ids),
        ):
            if ids:
                params[name] = ",".join(str(entity_id) for entity_id in ids)
        if status:
            params["ShiftStatus"] = status
        payload = await self.get(self.endpoints.shifts_path, params=params)
        return [Shift.model_validate(item) for item in _unwrap_data(payload) or []]

    async def get_absence_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        statuses: Sequence[str] = (),
    ) -> List[AbsenceRecord]:
        params: Dict[str, Any] = {}
        if employee_id:
            params["employeeId"] = employee_id
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        if statuses:
            params["statuses"] = list(statuses)
        payload = await self.get(self.endpoints.absence_records_path, params=params or None)
        return [AbsenceRecord.model_validate(item) for item in _unwrap_data(payload) or []]

    async def get_absence_record(self, record_id: int) -> Optional[AbsenceRecord]:
        entity = await self.fetch_entity(self.endpoints.absence_record_path.format(record_id=record_id))
        return AbsenceRecord.model_validate(entity) if entity else None

    async def get_payroll(
        self,
        start_date: str,
        end_date: str,
        department_ids: Optional[Sequence[int]] = None,
    ) -> PayrollData:
        # The payroll endpoint requires an explicit department list.
        if not department_ids:
            department_ids = [department.id for department in await self.list_departments()]
            if not department_ids:
                raise PlandayAPIError("No departments found in the portal")
        params = {
            "from": start_date,
            "to": end_date,
            "departmentIds": ",".join(str(department_id) for department_id in department_ids),
        }
        payload = await self.get(self.endpoints.payroll_path, params=params)
        return PayrollData.model_validate(payload or {})

    async def get_employee(self, employee_id: int) -> Optional[Employee]:
        entity = await self.fetch_entity(self.endpoints.employee_path.format(id=employee_id))
        return Employee.model_validate(entity) if entity else None

    async def list_employees(self, *, limit: int = 50, offset: int = 0) -> List[Employee]:
        page = await self.fetch_page(self.endpoints.employees_path, limit=limit, offset=offset)
        return [Employee.model_validate(item) for item in page.items]

    async def list_departments(self, *, limit: int = 50) -> List[Department]:
        page = await self.fetch_page(self.endpoints.departments_path, limit=limit)
        return [Department.model_validate(item) for item in page.items]

    async def list_positions(self, *, limit: int = 50) -> List[Position]:
        page = await self.fetch_page(self.endpoints.positions_path, limit=limit)
        return [Position.model_validate(item) for item in page.items]

    async def list_shift_types(self, *, limit: int = 50) -> List[ShiftType]:
        page = await self.fetch_page(self.endpoints.shift_types_path, limit=limit)
        return [ShiftType.model_validate(item) for item in page.items]
