from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_text, require_enum, require_money, require_non_empty
from ..core.constants import EMPLOYEE_CODE_PREFIX, EMPLOYEE_CODE_WIDTH
from ..core.context import Caller, require_manager, require_self_or_manager
from ..core.enums import EmployeeStatus
from ..core.exceptions import ConflictError, EmployeeInactive, NotFoundError, ValidationError
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def next_employee_code(last_code: Optional[str]) -> str:
    """EMP001, EMP002, ... continuing from the company's most recent code."""

    number = 1
    if last_code and last_code.startswith(EMPLOYEE_CODE_PREFIX):
        try:
            number = int(last_code[len(EMPLOYEE_CODE_PREFIX):]) + 1
        except ValueError:
            number = 1
    return f"{EMPLOYEE_CODE_PREFIX}{number:0{EMPLOYEE_CODE_WIDTH}d}"


def resolve_employee(
    employees: EmployeeRepository,
    caller: Caller,
    employee_id: int,
    *,
    require_active: bool = False,
) -> Employee:
    """Tenant-scoped employee lookup shared by the ledger services."""

    employee = employees.get_by_id(int(employee_id), company_id=caller.company_id)
    if employee is None:
        raise NotFoundError("Employee")
    if require_active and not employee.is_active:
        raise EmployeeInactive()
    return employee


class EmployeeService:
    """Use case: onboard and maintain employees of the caller's company."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def build_profile(
        *,
        first_name: str,
        last_name: str,
        email: str,
        department: str,
        position: str,
        start_date: date,
        user_id: Optional[int] = None,
        phone: Optional[str] = None,
        salary=None,
        location: Optional[str] = None,
    ) -> EmployeeProfile:
        email = require_non_empty(email, "email")
        if "@" not in email:
            raise ValidationError("email", "must be an email address")
        if not isinstance(start_date, date):
            raise ValidationError("start_date", "is required")

        return EmployeeProfile(
            first_name=require_non_empty(first_name, "first_name"),
            last_name=require_non_empty(last_name, "last_name"),
            email=email,
            department=require_non_empty(department, "department"),
            position=require_non_empty(position, "position"),
            start_date=start_date,
            user_id=int(user_id) if user_id is not None else None,
            phone=optional_text(phone),
            salary=require_money(salary, "salary") if salary not in (None, "") else None,
            location=optional_text(location),
        )

    def onboard(self, caller: Caller, profile: EmployeeProfile) -> Employee:
        require_manager(caller)

        code = next_employee_code(self._employees.last_employee_code(caller.company_id))
        employee_id = self._employees.insert_employee(
            company_id=caller.company_id,
            employee_code=code,
            profile=profile,
        )
        if employee_id is None:
            raise ConflictError(f"employee code {code} is already in use, try again")

        logger.info("employee onboarded: id=%s code=%s company=%s", employee_id, code, caller.company_id)
        return self.get(caller, employee_id)

    def update_profile(self, caller: Caller, employee_id: int, profile: EmployeeProfile) -> Employee:
        require_manager(caller)
        resolve_employee(self._employees, caller, employee_id)

        if not self._employees.update_profile(int(employee_id), company_id=caller.company_id, profile=profile):
            raise NotFoundError("Employee")
        return self.get(caller, employee_id)

    def set_status(self, caller: Caller, employee_id: int, status) -> Employee:
        """Employees are never deleted; deactivation is the way out."""

        require_manager(caller)
        status = require_enum(EmployeeStatus, status, "status")
        resolve_employee(self._employees, caller, employee_id)

        if not self._employees.set_status(int(employee_id), company_id=caller.company_id, status=status):
            raise NotFoundError("Employee")
        logger.info("employee %s status -> %s", employee_id, status.value)
        return self.get(caller, employee_id)

    def get(self, caller: Caller, employee_id: int) -> Employee:
        require_self_or_manager(caller, employee_id)
        return resolve_employee(self._employees, caller, employee_id)

    def get_for_user(self, caller: Caller) -> Employee:
        employee = self._employees.get_by_user_id(caller.user_id, company_id=caller.company_id)
        if employee is None:
            raise NotFoundError("Employee profile")
        return employee

    def list_for_company(self, caller: Caller) -> Sequence[Employee]:
        require_manager(caller)
        return self._employees.list_for_company(caller.company_id)
