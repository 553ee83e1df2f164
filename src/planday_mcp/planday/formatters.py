"""Plain-text summaries of enriched Planday records for the agent."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..auth import AuthenticationResult
from ..enrichment import EnrichedRecord, ForeignKeyDomain, Resolution, ResolutionMap
from .references import DEPARTMENTS, EMPLOYEES
from .schemas import AbsenceRecord, Employee, PayrollData, Shift


def format_authentication_result(result: AuthenticationResult) -> str:
    if result.success:
        return (
            "Authentication successful.\n"
            f"Status: {result.message or 'Authenticated'}\n"
            "The access token is refreshed automatically; all Planday tools are now available."
        )
    return (
        "Authentication failed.\n"
        f"Error: {result.error or 'Unknown authentication error'}\n"
        "Check that the refresh token is correct, has not been revoked, "
        "and that the portal has API access enabled."
    )


def _clock_time(value: Optional[str]) -> str:
    if not value or "T" not in value:
        return "?"
    return value.split("T", 1)[1][:5]


def format_shifts(shifts: Sequence[EnrichedRecord], start_date: str, end_date: str) -> str:
    if not shifts:
        return f"No shifts found for the period {start_date} to {end_date}."

    by_date: Dict[str, List[EnrichedRecord]] = defaultdict(list)
    for item in shifts:
        shift: Shift = item.record
        by_date[shift.date or (shift.start_date_time or "")[:10] or "undated"].append(item)
    statuses = Counter((item.record.status or "Unknown") for item in shifts)

    lines = [
        f"Shifts {start_date} to {end_date}",
        f"Total shifts: {len(shifts)} across {len(by_date)} day(s)",
        "Status: " + ", ".join(f"{status} ({count})" for status, count in sorted(statuses.items())),
    ]
    for day in sorted(by_date):
        lines.append("")
        lines.append(f"{day}")
        for item in by_date[day]:
            shift = item.record
            names = item.names
            lines.append(
                f"- {names.get('employee', 'Unassigned')} "
                f"{_clock_time(shift.start_date_time)}-{_clock_time(shift.end_date_time)} | "
                f"{names.get('department', '')} | {names.get('position', '')} | {names.get('shift_type', '')}"
            )
            if shift.comment:
                lines.append(f"  Note: {shift.comment}")
    return "\n".join(lines)


def format_absence_records(records: Sequence[EnrichedRecord], filters: str = "") -> str:
    if not records:
        return f"No absence records found with filters: {filters}" if filters else "No absence records found."

    lines = [f"Absence records ({len(records)})" + (f" - {filters}" if filters else "")]
    for item in records:
        record: AbsenceRecord = item.record
        period = record.absence_period
        span = f"{(period.start or '?')[:10]} to {(period.end or '?')[:10]}" if period else "period unknown"
        lines.append(f"- #{record.id} {item.names.get('employee', 'Unassigned')}: {span} [{record.status or 'Unknown'}]")
        if record.note:
            lines.append(f"  Note: {record.note}")
    return "\n".join(lines)


def _days_between(start_date: str, end_date: str) -> int:
    try:
        return max(1, (date.fromisoformat(end_date) - date.fromisoformat(start_date)).days)
    except ValueError:
        return 1


def format_payroll_summary(payroll: PayrollData, resolution: Resolution, start_date: str, end_date: str) -> str:
    if payroll.is_empty:
        return f"No payroll data found for period {start_date} to {end_date}."

    currency = payroll.currency_symbol
    shift_costs = sum(line.salary for line in payroll.shifts_payroll)
    supplement_costs = sum(line.salary for line in payroll.supplements_payroll)
    salaried_costs = sum(line.salary for line in payroll.salaried_payroll)
    total = shift_costs + supplement_costs + salaried_costs

    per_employee: Dict[Optional[int], float] = defaultdict(float)
    for line in payroll.lines:
        per_employee[line.employee_id] += line.salary
    per_department: Dict[Optional[int], float] = defaultdict(float)
    for line in payroll.shifts_payroll:
        per_department[line.department_id] += line.salary

    employees = resolution.get(EMPLOYEES.name)
    departments = resolution.get(DEPARTMENTS.name)

    lines = [
        f"Payroll summary {start_date} to {end_date}",
        f"Total labor cost: {currency}{total:.2f}",
        f"Employees paid: {len([key for key in per_employee if key])}",
        f"Shift wages: {currency}{shift_costs:.2f} ({len(payroll.shifts_payroll)} shifts)",
        f"Supplements: {currency}{supplement_costs:.2f} ({len(payroll.supplements_payroll)} items)",
        f"Salaries: {currency}{salaried_costs:.2f} ({len(payroll.salaried_payroll)} items)",
        f"Average per day: {currency}{total / _days_between(start_date, end_date):.2f}",
    ]
    if per_department and departments is not None:
        lines.append("")
        lines.append("By department:")
        for department_id, amount in sorted(per_department.items(), key=lambda pair: -pair[1]):
            lines.append(f"- {departments.display(department_id)}: {currency}{amount:.2f}")
    if per_employee and employees is not None:
        lines.append("")
        lines.append("By employee:")
        for employee_id, amount in sorted(per_employee.items(), key=lambda pair: -pair[1]):
            lines.append(f"- {employees.display(employee_id)}: {currency}{amount:.2f}")
    return "\n".join(lines)


def _names(resolution: Resolution, domain: ForeignKeyDomain) -> ResolutionMap:
    return resolution.get(domain.name) or ResolutionMap(domain)


def format_payroll_details(payroll: PayrollData, resolution: Resolution, start_date: str, end_date: str) -> str:
    """Line-by-line payroll breakdown followed by the cost per department."""
    if payroll.is_empty:
        return f"No payroll data found for period {start_date} to {end_date}."

    currency = payroll.currency_symbol
    employees = _names(resolution, EMPLOYEES)
    departments = _names(resolution, DEPARTMENTS)
    total = sum(line.salary for line in payroll.lines)

    lines = [f"Payroll breakdown {start_date} to {end_date}", f"Total labor cost: {currency}{total:.2f}"]
    if payroll.shifts_payroll:
        lines += ["", f"Shift wages ({len(payroll.shifts_payroll)} shifts):"]
        for index, shift in enumerate(payroll.shifts_payroll, start=1):
            lines.append(
                f"{index}. {employees.display(shift.employee_id)} ({departments.display(shift.department_id)}) "
                f"{shift.date or '?'} {shift.start or '?'}-{shift.end or '?'}: {currency}{shift.salary:.2f}"
            )
    if payroll.supplements_payroll:
        lines += ["", f"Supplements ({len(payroll.supplements_payroll)} items):"]
        for index, supplement in enumerate(payroll.supplements_payroll, start=1):
            label = f" {supplement.name}" if supplement.name else ""
            lines.append(
                f"{index}. {employees.display(supplement.employee_id)}{label} "
                f"{supplement.date or '?'}: {currency}{supplement.salary:.2f}"
            )
            if supplement.note:
                lines.append(f"   Note: {supplement.note}")
    if payroll.salaried_payroll:
        lines += ["", f"Salaries ({len(payroll.salaried_payroll)} items):"]
        for index, salaried in enumerate(payroll.salaried_payroll, start=1):
            period = f"{salaried.start_date or salaried.date or '?'} - {salaried.end_date or salaried.date or '?'}"
            lines.append(f"{index}. {employees.display(salaried.employee_id)} {period}: {currency}{salaried.salary:.2f}")

    per_department: Dict[Optional[int], float] = defaultdict(float)
    for shift in payroll.shifts_payroll:
        per_department[shift.department_id] += shift.salary
    if per_department:
        lines += ["", "Cost per department:"]
        for department_id, amount in sorted(per_department.items(), key=lambda pair: -pair[1]):
            share = amount / total * 100 if total else 0.0
            lines.append(f"- {departments.display(department_id)}: {currency}{amount:.2f} ({share:.1f}%)")
    return "\n".join(lines)


def format_employee(employee: Employee, department: str) -> str:
    lines = [
        f"Employee {employee.full_name} (ID: {employee.id})",
        f"Department: {department}",
    ]
    for label, value in (
        ("Email", employee.email),
        ("Phone", employee.cell_phone),
        ("Username", employee.user_name),
        ("Hired", employee.hired_date),
        ("Deactivated", employee.deactivation_date),
    ):
        if value:
            lines.append(f"{label}: {value}")
    for key, value in sorted(employee.extensions.items()):
        lines.append(f"{key}: {value}")
    return "\n".join(lines)
