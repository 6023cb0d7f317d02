from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Repository port for AttendanceRecord.

    Each method maps to a single store query. Mutations that guard the session
    state machine are conditional and report whether they applied.
    """

    def find_open_session(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_latest_for_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """Most recently created record of the employee on that date."""

        raise NotImplementedError

    def insert_open_session(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: time,
        status: AttendanceStatus,
    ) -> Optional[int]:
        """Insert a new open session; None when the employee already has one."""

        raise NotImplementedError

    def start_session(self, *, attendance_id: int, check_in: time, status: AttendanceStatus) -> bool:
        """Set check-in on a record that has none yet (``check_in IS NULL`` guard)."""

        raise NotImplementedError

    def close_session(self, *, attendance_id: int, check_out: time, total_hours: float) -> bool:
        """Set check-out on an open session (``check_out IS NULL`` guard)."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: int, *, company_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: Optional[time],
        check_out: Optional[time],
        total_hours: float,
        status: AttendanceStatus,
        notes: Optional[str],
    ) -> Optional[int]:
        """None when the row would be a second open session for the employee."""

        raise NotImplementedError

    def update_manual(
        self,
        *,
        attendance_id: int,
        company_id: int,
        work_date: date,
        check_in: Optional[time],
        check_out: Optional[time],
        total_hours: float,
        status: AttendanceStatus,
        notes: Optional[str],
    ) -> Optional[bool]:
        """False when the id is not in the company, None on an open-session clash."""

        raise NotImplementedError

    def delete(self, attendance_id: int, *, company_id: int) -> bool:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_company(self, company_id: int, *, work_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
