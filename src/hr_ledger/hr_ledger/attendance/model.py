from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance session of an employee on a work date.

    A record with ``check_in`` set and ``check_out`` unset is an open session.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[time]
    check_out: Optional[time]
    total_hours: float
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    __json_extra__ = ("is_open", "needs_review")

    @property
    def is_open(self) -> bool:
        return self.check_in is not None and self.check_out is None

    @property
    def needs_review(self) -> bool:
        """Check-out earlier than check-in, e.g. a night shift with no date rollover."""
        return self.check_in is not None and self.check_out is not None and self.check_out < self.check_in


@dataclass(frozen=True)
class ManualAttendanceEntry:
    """Admin create/edit payload. ``attendance_id`` None means create."""

    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    notes: Optional[str] = None
    attendance_id: Optional[int] = None
