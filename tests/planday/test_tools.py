"""Smoke tests for Planday tools."""

from __future__ import annotations

from typing import List

import httpx
import pytest
import pytest_asyncio

from planday_mcp.planday import build_planday_server
from planday_mcp.planday.tools import PlandayTools, build_runtime

EXPECTED_TOOLS = {
    "authenticate_planday",
    "debug_session",
    "clear_session",
    "get_shifts",
    "get_absence_records",
    "get_absence_record",
    "get_payroll_summary",
    "get_payroll_data",
    "get_departments",
    "get_positions",
    "get_shift_types",
    "get_employees",
    "get_employee_by_id",
}

SHIFTS = {
    "data": [
        {
            "id": 100,
            "date": "2024-06-03",
            "startDateTime": "2024-06-03T09:00:00",
            "endDateTime": "2024-06-03T17:00:00",
            "status": "Assigned",
            "employeeId": 5,
            "departmentId": 1,
            "positionId": 10,
            "shiftTypeId": 3,
        },
        {"id": 101, "date": "2024-06-03", "status": "Open", "departmentId": 1, "positionId": 11},
    ]
}

PAYROLL = {
    "shiftsPayroll": [
        {
            "id": 100,
            "date": "2024-06-03",
            "start": "09:00",
            "end": "17:00",
            "salary": 100.0,
            "employeeId": 5,
            "departmentId": 1,
            "employeeGroupId": 7,
        }
    ],
    "supplementsPayroll": [{"name": "Evening bonus", "date": "2024-06-03", "salary": 20.0, "employeeId": 9}],
    "salariedPayroll": [
        {"startDate": "2024-06-01", "endDate": "2024-06-07", "salary": 30.0, "employeeId": 5},
    ],
    "currencySymbol": "kr",
}

ABSENCES = {
    "data": [
        {
            "id": 1,
            "employeeId": 5,
            "status": "Approved",
            "absencePeriod": {"start": "2024-06-10T00:00:00", "end": "2024-06-12T00:00:00"},
        }
    ]
}

EMPLOYEE = {
    "data": {
        "id": 5,
        "firstName": "Ana",
        "lastName": "Ruiz",
        "email": "ana@example.test",
        "primaryDepartmentId": 1,
        "custom_42": "Night crew",
    }
}

ROUTES = {
    "/scheduling/v1.0/shifts": (200, SHIFTS),
    "/hr/v1.0/employees": (200, {"data": [{"id": 5, "firstName": "Ana", "lastName": "Ruiz"}]}),
    "/hr/v1.0/employees/5": (200, EMPLOYEE),
    "/hr/v1.0/departments": (200, {"data": [{"id": 1, "name": "Kitchen"}]}),
    "/hr/v1.0/employeegroups": (500, None),
    "/scheduling/v1.0/shifttypes": (200, {"data": [{"id": 3, "name": "Evening"}]}),
    "/scheduling/v1.0/positions/10": (200, {"data": {"id": 10, "name": "Chef"}}),
    "/scheduling/v1.0/positions/11": (503, None),
    "/payroll/v1.0/payroll": (200, PAYROLL),
    "/absence/v1.0/absencerecords": (200, ABSENCES),
    "/absence/v1.0/absencerecords/1": (200, {"data": ABSENCES["data"][0]}),
}


class PlandayApi:
    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/connect/token":
            return httpx.Response(
                200, json={"access_token": "access-abc", "expires_in": 3600, "token_type": "Bearer"}
            )
        status, body = ROUTES.get(path, (404, None))
        return httpx.Response(status, json=body) if body is not None else httpx.Response(status)

    def last(self, path: str) -> httpx.Request:
        return [request for request in self.requests if request.url.path == path][-1]


@pytest.fixture
def api() -> PlandayApi:
    return PlandayApi()


@pytest.fixture
def runtime(settings, clock, api):
    return build_runtime(settings, transport=httpx.MockTransport(api), clock=clock)


@pytest_asyncio.fixture
async def tools(runtime) -> PlandayTools:
    planday_tools = PlandayTools(runtime)
    auth = await planday_tools.authenticate_planday("refresh-token-value")
    assert auth["success"] is True
    return planday_tools


@pytest.mark.asyncio
async def test_tool_registry_contains_expected_tools(runtime) -> None:
    registered = {spec["name"] for spec in PlandayTools(runtime).tool_specs()}
    assert registered == EXPECTED_TOOLS


@pytest.mark.asyncio
async def test_server_registers_every_tool(runtime) -> None:
    server = build_planday_server(runtime)

    tools = await server.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS


@pytest.mark.asyncio
async def test_get_shifts_returns_enriched_records(tools) -> None:
    result = await tools.get_shifts("2024-06-03", "2024-06-03")

    assert result["total"] == 2
    first, second = result["shifts"]
    assert first["id"] == 100
    assert first["references"] == {
        "employee": "Ana Ruiz",
        "department": "Kitchen",
        "position": "Chef",
        "shift_type": "Evening",
    }
    assert second["references"]["employee"] == "Unassigned"
    assert second["references"]["position"] == "Position ID: 11"
    assert second["references"]["shift_type"] == "Standard"
    assert "Ana Ruiz 09:00-17:00" in result["summary"]


@pytest.mark.asyncio
async def test_get_shifts_forwards_filters(tools, api) -> None:
    await tools.get_shifts("2024-06-03", "2024-06-09", departmentIds=[1, 2], employeeIds=[5], shiftStatus="Open")

    params = api.last("/scheduling/v1.0/shifts").url.params
    assert params["From"] == "2024-06-03"
    assert params["DepartmentId"] == "1,2"
    assert params["EmployeeId"] == "5"
    assert params["ShiftStatus"] == "Open"
    assert "PositionId" not in params


@pytest.mark.asyncio
async def test_payroll_summary_resolves_every_line_kind(tools) -> None:
    result = await tools.get_payroll_summary("2024-06-01", "2024-06-07")

    shift_line, supplement_line, salaried_line = result["lines"]
    assert shift_line["references"] == {
        "employee": "Ana Ruiz",
        "department": "Kitchen",
        "employee_group": "Employee Group ID: 7",
    }
    assert supplement_line["references"] == {
        "employee": "Employee ID: 9",
        "department": "No department",
        "employee_group": "No group",
    }
    assert salaried_line["references"]["employee"] == "Ana Ruiz"

    summary = result["summary"]
    assert result["currencySymbol"] == "kr"
    assert "Total labor cost: kr150.00" in summary
    assert "By department:\n- Kitchen: kr100.00" in summary
    assert "- Ana Ruiz: kr130.00" in summary
    assert "- Employee ID: 9: kr20.00" in summary


@pytest.mark.asyncio
async def test_payroll_data_with_details_lists_each_line(tools) -> None:
    summary_only = await tools.get_payroll_data("2024-06-01", "2024-06-07")
    detailed = await tools.get_payroll_data("2024-06-01", "2024-06-07", includeDetails=True)

    assert summary_only["summary"].startswith("Payroll summary")
    summary = detailed["summary"]
    assert "1. Ana Ruiz (Kitchen) 2024-06-03 09:00-17:00: kr100.00" in summary
    assert "1. Employee ID: 9 Evening bonus 2024-06-03: kr20.00" in summary
    assert "1. Ana Ruiz 2024-06-01 - 2024-06-07: kr30.00" in summary
    assert "- Kitchen: kr100.00 (66.7%)" in summary


@pytest.mark.asyncio
async def test_absence_records_filter_by_status(tools, api) -> None:
    result = await tools.get_absence_records(employeeId=5, statuses=["Approved"])

    request = api.last("/absence/v1.0/absencerecords")
    assert request.url.params.get_list("statuses") == ["Approved"]
    assert request.url.params["employeeId"] == "5"
    assert result["total"] == 1
    assert result["absenceRecords"][0]["references"] == {"employee": "Ana Ruiz"}
    assert "- #1 Ana Ruiz: 2024-06-10 to 2024-06-12 [Approved]" in result["summary"]
    assert "Status: Approved" in result["summary"]


@pytest.mark.asyncio
async def test_absence_record_lookup(tools) -> None:
    found = await tools.get_absence_record(1)
    missing = await tools.get_absence_record(404)

    assert found["success"] is True
    assert found["absenceRecord"]["references"]["employee"] == "Ana Ruiz"
    assert missing == {"success": False, "error": "No absence record found with ID: 404"}


@pytest.mark.asyncio
async def test_employee_by_id_includes_department_name(tools) -> None:
    found = await tools.get_employee_by_id(5)
    missing = await tools.get_employee_by_id(404)

    assert found["success"] is True
    assert found["employee"]["fullName"] == "Ana Ruiz"
    assert found["references"] == {"department": "Kitchen"}
    assert "Department: Kitchen" in found["summary"]
    assert "custom_42: Night crew" in found["summary"]
    assert missing["success"] is False


@pytest.mark.asyncio
async def test_debug_session_masks_tokens(tools) -> None:
    info = await tools.debug_session()

    assert info["authenticated"] is True
    assert info["session"]["refreshToken"] == "refr...alue"
    assert "access-abc" not in str(info)

    await tools.clear_session()
    assert (await tools.debug_session())["authenticated"] is False


@pytest.mark.asyncio
async def test_invalid_dates_are_rejected(tools) -> None:
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        await tools.get_shifts("03/06/2024", "2024-06-07")
