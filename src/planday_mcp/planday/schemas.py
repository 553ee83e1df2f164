"""Pydantic models for Planday tool IO."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlandayModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Shift(PlandayModel):
    id: int
    date: Optional[str] = None
    start_date_time: Optional[str] = Field(None, alias="startDateTime")
    end_date_time: Optional[str] = Field(None, alias="endDateTime")
    status: Optional[str] = None
    employee_id: Optional[int] = Field(None, alias="employeeId")
    department_id: Optional[int] = Field(None, alias="departmentId")
    position_id: Optional[int] = Field(None, alias="positionId")
    shift_type_id: Optional[int] = Field(None, alias="shiftTypeId")
    employee_group_id: Optional[int] = Field(None, alias="employeeGroupId")
    comment: Optional[str] = None


class AbsencePeriod(PlandayModel):
    start: Optional[str] = None
    end: Optional[str] = None


class AbsenceRecord(PlandayModel):
    id: int
    employee_id: Optional[int] = Field(None, alias="employeeId")
    status: Optional[str] = None
    note: Optional[str] = None
    absence_period: Optional[AbsencePeriod] = Field(None, alias="absencePeriod")


class PayrollShift(PlandayModel):
    id: Optional[int] = None
    date: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    salary: float = 0.0
    salary_code: Optional[str] = Field(None, alias="salaryCode")
    employee_id: Optional[int] = Field(None, alias="employeeId")
    department_id: Optional[int] = Field(None, alias="departmentId")
    position_id: Optional[int] = Field(None, alias="positionId")
    shift_type_id: Optional[int] = Field(None, alias="shiftTypeId")
    employee_group_id: Optional[int] = Field(None, alias="employeeGroupId")


class SupplementPayroll(PlandayModel):
    name: Optional[str] = None
    date: Optional[str] = None
    note: Optional[str] = None
    salary: float = 0.0
    salary_code: Optional[str] = Field(None, alias="salaryCode")
    employee_id: Optional[int] = Field(None, alias="employeeId")


class SalariedPayroll(PlandayModel):
    date: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    salary: float = 0.0
    salary_code: Optional[str] = Field(None, alias="salaryCode")
    employee_id: Optional[int] = Field(None, alias="employeeId")


class PayrollData(PlandayModel):
    shifts_payroll: List[PayrollShift] = Field(default_factory=list, alias="shiftsPayroll")
    supplements_payroll: List[SupplementPayroll] = Field(default_factory=list, alias="supplementsPayroll")
    salaried_payroll: List[SalariedPayroll] = Field(default_factory=list, alias="salariedPayroll")
    currency_symbol: str = Field("$", alias="currencySymbol")

    @property
    def lines(self) -> List[PlandayModel]:
        return [*self.shifts_payroll, *self.supplements_payroll, *self.salaried_payroll]

    @property
    def is_empty(self) -> bool:
        return not self.lines


class Employee(PlandayModel):
    """An employee record; portal-specific ``custom_*`` attributes live in ``extensions``."""

    id: int
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    cell_phone: Optional[str] = Field(None, alias="cellPhone")
    user_name: Optional[str] = Field(None, alias="userName")
    primary_department_id: Optional[int] = Field(None, alias="primaryDepartmentId")
    hired_date: Optional[str] = Field(None, alias="hiredDate")
    deactivation_date: Optional[str] = Field(None, alias="deactivationDate")
    extensions: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_custom_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        custom = {key: value for key, value in data.items() if key.startswith("custom_")}
        if not custom:
            return data
        core = {key: value for key, value in data.items() if not key.startswith("custom_")}
        core["extensions"] = {**core.get("extensions", {}), **custom}
        return core

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or f"Employee ID: {self.id}"


class Department(PlandayModel):
    id: int
    name: Optional[str] = None


class Position(PlandayModel):
    id: int
    name: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")
    department_id: Optional[int] = Field(None, alias="departmentId")
    employee_group_id: Optional[int] = Field(None, alias="employeeGroupId")


class ShiftType(PlandayModel):
    id: int
    name: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")
    color: Optional[str] = None
    salary_code: Optional[str] = Field(None, alias="salaryCode")
