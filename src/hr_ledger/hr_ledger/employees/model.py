from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee of one company (tenant).

    Attendance, leave and payroll rows reference it by ``employee_id`` and are
    visible only inside ``company_id``.
    """

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    department: str
    position: str
    status: EmployeeStatus
    start_date: date
    company_id: int
    user_id: Optional[int] = None
    phone: Optional[str] = None
    salary: Optional[Decimal] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class EmployeeProfile:
    """Editable profile fields, validated by the service before they reach the store."""

    first_name: str
    last_name: str
    email: str
    department: str
    position: str
    start_date: date
    user_id: Optional[int] = None
    phone: Optional[str] = None
    salary: Optional[Decimal] = None
    location: Optional[str] = None
