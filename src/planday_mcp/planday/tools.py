"""Planday MCP tool implementations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from ..auth import PlandayTokenExchanger, SessionAuthority
from ..auth.authority import Clock, utc_now
from ..enrichment import EnrichedRecord, ReferenceResolver, Resolution, enrich
from ..logging import get_logger
from ..settings import PlandaySettings, load_planday_settings
from .client import PlandayClient
from .formatters import (
    format_absence_records,
    format_authentication_result,
    format_employee,
    format_payroll_details,
    format_payroll_summary,
    format_shifts,
)
from .references import (
    ABSENCE_REFERENCES,
    DEPARTMENTS,
    EMPLOYEE_REFERENCES,
    PAYROLL_REFERENCES,
    SHIFT_REFERENCES,
)
from .schemas import PayrollData

LOGGER = get_logger(__name__)


@dataclass
class PlandayRuntime:
    """Everything a tool call needs; one instance per server process."""

    settings: PlandaySettings
    authority: SessionAuthority
    client: PlandayClient
    resolver: ReferenceResolver


def build_runtime(
    settings: Optional[PlandaySettings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Clock = utc_now,
) -> PlandayRuntime:
    settings = settings or load_planday_settings()
    authority = SessionAuthority(PlandayTokenExchanger(settings, transport=transport), clock=clock)
    client = PlandayClient(authority, settings, transport=transport)
    resolver = ReferenceResolver(client, settings=settings)
    return PlandayRuntime(settings=settings, authority=authority, client=client, resolver=resolver)


def _require_date(value: Optional[str], name: str) -> str:
    if not value:
        raise ValueError(f"{name} is required (YYYY-MM-DD)")
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a date in YYYY-MM-DD format, got {value!r}") from exc
    return value


def _serialize(item: EnrichedRecord) -> Dict[str, Any]:
    return {**item.record.model_dump(by_alias=True, exclude_none=True), "references": item.names}


class PlandayTools:
    def __init__(self, runtime: PlandayRuntime) -> None:
        self.runtime = runtime

    async def authenticate_planday(self, refreshToken: str) -> Dict[str, Any]:
        """Authenticate with Planday using a refresh token from the portal's API access settings."""
        result = await self.runtime.authority.authenticate(refreshToken)
        payload: Dict[str, Any] = {"success": result.success, "summary": format_authentication_result(result)}
        if result.error:
            payload["error"] = result.error
        return payload

    async def debug_session(self) -> Dict[str, Any]:
        authority = self.runtime.authority
        return {
            "success": True,
            "authenticated": authority.is_authenticated(),
            "session": authority.session_info(),
            "clientId": self.runtime.settings.client_id,
        }

    async def clear_session(self) -> Dict[str, Any]:
        self.runtime.authority.clear_session()
        return {"success": True, "message": "Planday session cleared"}

    async def get_shifts(
        self,
        startDate: str,
        endDate: str,
        departmentIds: Optional[List[int]] = None,
        employeeIds: Optional[List[int]] = None,
        positionIds: Optional[List[int]] = None,
        shiftTypeIds: Optional[List[int]] = None,
        shiftStatus: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List shifts in a date range with employee, department, position and shift type names.

        Optional filters narrow the result by department, employee, position,
        shift type or status (e.g. Assigned, Open).
        """
        start = _require_date(startDate, "startDate")
        end = _require_date(endDate, "endDate")
        shifts = await self.runtime.client.get_shifts(
            start,
            end,
            department_ids=departmentIds or (),
            employee_ids=employeeIds or (),
            position_ids=positionIds or (),
            shift_type_ids=shiftTypeIds or (),
            status=shiftStatus,
        )
        resolution = await self.runtime.resolver.resolve(shifts, SHIFT_REFERENCES)
        enriched = enrich(shifts, resolution, SHIFT_REFERENCES)
        return {
            "success": True,
            "shifts": [_serialize(item) for item in enriched],
            "total": len(enriched),
            "summary": format_shifts(enriched, start, end),
        }

    async def get_absence_records(
        self,
        employeeId: Optional[int] = None,
        startDate: Optional[str] = None,
        endDate: Optional[str] = None,
        statuses: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """List absence records, optionally filtered by employee, period and status (Approved, Declined)."""
        start = _require_date(startDate, "startDate") if startDate else None
        end = _require_date(endDate, "endDate") if endDate else None
        records = await self.runtime.client.get_absence_records(
            employee_id=employeeId,
            start_date=start,
            end_date=end,
            statuses=statuses or (),
        )
        resolution = await self.runtime.resolver.resolve(records, ABSENCE_REFERENCES)
        enriched = enrich(records, resolution, ABSENCE_REFERENCES)
        filters = ", ".join(
            part
            for part in (
                f"Employee ID: {employeeId}" if employeeId else "",
                f"Start: {start}" if start else "",
                f"End: {end}" if end else "",
                f"Status: {'/'.join(statuses)}" if statuses else "",
            )
            if part
        )
        return {
            "success": True,
            "absenceRecords": [_serialize(item) for item in enriched],
            "total": len(enriched),
            "summary": format_absence_records(enriched, filters),
        }

    async def get_absence_record(self, recordId: int) -> Dict[str, Any]:
        record = await self.runtime.client.get_absence_record(recordId)
        if record is None:
            return {"success": False, "error": f"No absence record found with ID: {recordId}"}
        resolution = await self.runtime.resolver.resolve([record], ABSENCE_REFERENCES)
        enriched = enrich([record], resolution, ABSENCE_REFERENCES)
        return {
            "success": True,
            "absenceRecord": _serialize(enriched[0]),
            "summary": format_absence_records(enriched, f"Record ID: {recordId}"),
        }

    async def _payroll(
        self, startDate: str, endDate: str, departmentIds: Optional[List[int]]
    ) -> Tuple[str, str, PayrollData, Resolution, Dict[str, Any]]:
        start = _require_date(startDate, "startDate")
        end = _require_date(endDate, "endDate")
        payroll = await self.runtime.client.get_payroll(start, end, departmentIds)
        resolution = await self.runtime.resolver.resolve(payroll.lines, PAYROLL_REFERENCES)
        payload: Dict[str, Any] = {
            "success": True,
            "currencySymbol": payroll.currency_symbol,
            "lines": [_serialize(item) for item in enrich(payroll.lines, resolution, PAYROLL_REFERENCES)],
        }
        return start, end, payroll, resolution, payload

    async def get_payroll_summary(
        self,
        startDate: str,
        endDate: str,
        departmentIds: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Summarise labor cost for a period, broken down by department and employee."""
        start, end, payroll, resolution, payload = await self._payroll(startDate, endDate, departmentIds)
        payload["summary"] = format_payroll_summary(payroll, resolution, start, end)
        return payload

    async def get_payroll_data(
        self,
        startDate: str,
        endDate: str,
        includeDetails: bool = False,
        departmentIds: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Payroll cost for a period; ``includeDetails`` lists every shift, supplement and salary line."""
        start, end, payroll, resolution, payload = await self._payroll(startDate, endDate, departmentIds)
        formatter = format_payroll_details if includeDetails else format_payroll_summary
        payload["summary"] = formatter(payroll, resolution, start, end)
        return payload

    async def get_departments(self) -> Dict[str, Any]:
        departments = await self.runtime.client.list_departments()
        return {"success": True, "departments": [d.model_dump(by_alias=True, exclude_none=True) for d in departments]}

    async def get_positions(self) -> Dict[str, Any]:
        positions = await self.runtime.client.list_positions()
        return {"success": True, "positions": [p.model_dump(by_alias=True, exclude_none=True) for p in positions]}

    async def get_shift_types(self) -> Dict[str, Any]:
        shift_types = await self.runtime.client.list_shift_types()
        return {"success": True, "shiftTypes": [s.model_dump(by_alias=True, exclude_none=True) for s in shift_types]}

    async def get_employee_by_id(self, employeeId: int) -> Dict[str, Any]:
        """Get one employee's profile with the primary department name."""
        employee = await self.runtime.client.get_employee(employeeId)
        if employee is None:
            return {"success": False, "error": f"No employee found with ID: {employeeId}"}
        resolution = await self.runtime.resolver.resolve([employee], EMPLOYEE_REFERENCES)
        (enriched,) = enrich([employee], resolution, EMPLOYEE_REFERENCES)
        department = enriched.names[DEPARTMENTS.name]
        return {
            "success": True,
            "employee": {**employee.model_dump(by_alias=True, exclude_none=True), "fullName": employee.full_name},
            "references": enriched.names,
            "summary": format_employee(employee, department),
        }

    async def get_employees(self, limit: int = 50, offset: int = 0) -> Dict[str, Any]:
        employees = await self.runtime.client.list_employees(limit=limit, offset=offset)
        return {
            "success": True,
            "employees": [
                {**employee.model_dump(by_alias=True, exclude_none=True), "fullName": employee.full_name}
                for employee in employees
            ],
        }

    def tool_specs(self) -> List[Dict[str, Any]]:
        entries: List[tuple[str, Callable[..., Any], str]] = [
            ("authenticate_planday", self.authenticate_planday, "Authenticate with Planday using a refresh token."),
            ("debug_session", self.debug_session, "Show the current Planday session state."),
            ("clear_session", self.clear_session, "Forget the stored Planday session."),
            ("get_shifts", self.get_shifts, "List shifts for a date range with resolved names."),
            ("get_absence_records", self.get_absence_records, "List absence records with employee names."),
            ("get_absence_record", self.get_absence_record, "Get one absence record by ID."),
            ("get_payroll_summary", self.get_payroll_summary, "Summarise payroll costs for a date range."),
            ("get_payroll_data", self.get_payroll_data, "Get payroll costs, optionally with a per-line breakdown."),
            ("get_departments", self.get_departments, "List departments."),
            ("get_positions", self.get_positions, "List positions."),
            ("get_shift_types", self.get_shift_types, "List shift types."),
            ("get_employees", self.get_employees, "List active employees."),
            ("get_employee_by_id", self.get_employee_by_id, "Get one employee by ID."),
        ]
        return [{"name": name, "func": func, "summary": summary} for name, func, summary in entries]
