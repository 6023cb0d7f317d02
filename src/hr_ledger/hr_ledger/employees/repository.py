from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee, EmployeeProfile


class EmployeeRepository(Protocol):
    """Repository port for Employee.

    Every lookup takes the caller's ``company_id``; an id from another company
    behaves exactly like an unknown id.
    """

    def get_by_id(self, employee_id: int, *, company_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int, *, company_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def last_employee_code(self, company_id: int) -> Optional[str]:
        raise NotImplementedError

    def insert_employee(self, *, company_id: int, employee_code: str, profile: EmployeeProfile) -> Optional[int]:
        """Return the new id, or None when the code is already taken in the company."""

        raise NotImplementedError

    def update_profile(self, employee_id: int, *, company_id: int, profile: EmployeeProfile) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, *, company_id: int, status: EmployeeStatus) -> bool:
        raise NotImplementedError
