from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role
from .exceptions import AuthorizationError

MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR_MANAGER})


@dataclass(frozen=True)
class Caller:
    """Who is acting, as resolved by the identity provider.

    Passed explicitly into every service call; nothing about the caller is kept
    in process-wide state.
    """

    user_id: int
    role: Role
    company_id: int
    employee_id: Optional[int] = None

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES


def require_manager(caller: Caller) -> None:
    if not caller.is_manager:
        raise AuthorizationError("admin or hr_manager role required")


def require_self_or_manager(caller: Caller, employee_id: int) -> None:
    """Employees act on their own rows only; managers on any row of their company."""

    if caller.is_manager:
        return
    if caller.employee_id is None or int(caller.employee_id) != int(employee_id):
        raise AuthorizationError("employees may only act on their own records")
