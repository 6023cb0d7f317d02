from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def insert_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, leave_id: int, *, company_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def update_leave_status_if_pending(
        self,
        *,
        leave_id: int,
        company_id: int,
        status: LeaveStatus,
        approved_by: Optional[int],
        approved_at: datetime,
        admin_comments: Optional[str],
    ) -> bool:
        """Single conditional update keyed on ``status='pending'``; False if it did not apply."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_company(self, company_id: int, *, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError
