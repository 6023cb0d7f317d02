from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    status: LeaveStatus
    reason: str
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    admin_comments: Optional[str] = None
