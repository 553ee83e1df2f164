"""Planday foreign-key domains used to enrich shifts, absences and payroll."""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from ..enrichment import BulkFetch, ForeignKeyDomain, PerIdFetch, full_name
from .config import DEFAULT_ENDPOINTS

EMPLOYEES = ForeignKeyDomain(
    name="employee",
    label="Employee",
    key="employee_id",
    fetch=BulkFetch(DEFAULT_ENDPOINTS.employees_path),
    namer=full_name,
    unassigned="Unassigned",
)

DEPARTMENTS = ForeignKeyDomain(
    name="department",
    label="Department",
    key="department_id",
    fetch=BulkFetch(DEFAULT_ENDPOINTS.departments_path),
    unassigned="No department",
)

# Positions are fetched one ID per request.
POSITIONS = ForeignKeyDomain(
    name="position",
    label="Position",
    key="position_id",
    fetch=PerIdFetch(DEFAULT_ENDPOINTS.position_path),
    unassigned="No position",
)

SHIFT_TYPES = ForeignKeyDomain(
    name="shift_type",
    label="Shift Type",
    key="shift_type_id",
    fetch=BulkFetch(DEFAULT_ENDPOINTS.shift_types_path),
    unassigned="Standard",
)

EMPLOYEE_GROUPS = ForeignKeyDomain(
    name="employee_group",
    label="Employee Group",
    key="employee_group_id",
    fetch=BulkFetch(DEFAULT_ENDPOINTS.employee_groups_path),
    unassigned="No group",
)

SHIFT_REFERENCES: Tuple[ForeignKeyDomain, ...] = (EMPLOYEES, DEPARTMENTS, POSITIONS, SHIFT_TYPES)
ABSENCE_REFERENCES: Tuple[ForeignKeyDomain, ...] = (EMPLOYEES,)
PAYROLL_REFERENCES: Tuple[ForeignKeyDomain, ...] = (EMPLOYEES, DEPARTMENTS, EMPLOYEE_GROUPS)
# Employee records point at their department through ``primaryDepartmentId``.
EMPLOYEE_REFERENCES: Tuple[ForeignKeyDomain, ...] = (replace(DEPARTMENTS, key="primary_department_id"),)
