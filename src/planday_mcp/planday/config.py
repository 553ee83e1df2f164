"""Planday-specific endpoint configuration."""

from __future__ import annotations

from pydantic import BaseModel


class PlandayApiEndpoints(BaseModel):
    """Paths relative to ``PlandaySettings.api_base_url``."""

    shifts_path: str = "/scheduling/v1.0/shifts"
    positions_path: str = "/scheduling/v1.0/positions"
    position_path: str = "/scheduling/v1.0/positions/{id}"
    shift_types_path: str = "/scheduling/v1.0/shifttypes"
    employees_path: str = "/hr/v1.0/employees"
    employee_path: str = "/hr/v1.0/employees/{id}"
    departments_path: str = "/hr/v1.0/departments"
    employee_groups_path: str = "/hr/v1.0/employeegroups"
    absence_records_path: str = "/absence/v1.0/absencerecords"
    absence_record_path: str = "/absence/v1.0/absencerecords/{record_id}"
    payroll_path: str = "/payroll/v1.0/payroll"


DEFAULT_ENDPOINTS = PlandayApiEndpoints()
