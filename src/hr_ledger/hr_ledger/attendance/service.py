from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_enum
from ..core.context import Caller, require_manager, require_self_or_manager
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    NotCheckedIn,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..employees.service import resolve_employee
from .factory import DurationPolicyFactory
from .model import AttendanceRecord, ManualAttendanceEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance session state machine.

    Per employee and day: no record -> open session (check-in) -> closed session
    (check-out). Whether someone is checked in is always derived from the store.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        policy_factory: Optional[DurationPolicyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policies = policy_factory or DurationPolicyFactory()
        self._clock = clock

    def check_in(self, caller: Caller, employee_id: int, *, at: Optional[datetime] = None) -> AttendanceRecord:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id, require_active=True)

        at = at or self._clock()
        today = at.date()
        check_in = at.time().replace(microsecond=0)

        if self._attendance.find_open_session(employee.employee_id, today) is not None:
            raise AlreadyCheckedIn()

        latest = self._attendance.find_latest_for_date(employee.employee_id, today)
        if latest is not None and latest.check_in is None:
            # Row prepared by an admin (e.g. marked absent) before the employee arrived.
            if not self._attendance.start_session(
                attendance_id=latest.attendance_id,
                check_in=check_in,
                status=AttendanceStatus.PRESENT,
            ):
                raise AlreadyCheckedIn()
            attendance_id = latest.attendance_id
        else:
            inserted = self._attendance.insert_open_session(
                employee_id=employee.employee_id,
                work_date=today,
                check_in=check_in,
                status=AttendanceStatus.PRESENT,
            )
            if inserted is None:
                raise AlreadyCheckedIn()
            attendance_id = inserted

        logger.info("check-in: employee=%s date=%s time=%s", employee.employee_id, today, check_in)
        return self._reload(caller, attendance_id)

    def check_out(self, caller: Caller, employee_id: int, *, at: Optional[datetime] = None) -> AttendanceRecord:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)

        at = at or self._clock()
        today = at.date()
        check_out = at.time().replace(microsecond=0)

        record = self._attendance.find_open_session(employee.employee_id, today)
        if record is None:
            latest = self._attendance.find_latest_for_date(employee.employee_id, today)
            if latest is not None and latest.check_out is not None:
                raise AlreadyCheckedOut()
            raise NotCheckedIn()

        decision = self._policies.for_checkout().decide(
            work_date=record.work_date,
            check_in=record.check_in,
            check_out=check_out,
        )
        if not self._attendance.close_session(
            attendance_id=record.attendance_id,
            check_out=check_out,
            total_hours=decision.total_hours,
        ):
            raise AlreadyCheckedOut()

        logger.info(
            "check-out: employee=%s date=%s hours=%.2f%s",
            employee.employee_id,
            today,
            decision.total_hours,
            " (flagged for review)" if decision.flagged else "",
        )
        return self._reload(caller, record.attendance_id)

    def is_checked_in(self, caller: Caller, employee_id: int, *, on: Optional[date] = None) -> bool:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)
        day = on or self._clock().date()
        return self._attendance.find_open_session(employee.employee_id, day) is not None

    def manual_upsert(self, caller: Caller, entry: ManualAttendanceEntry) -> AttendanceRecord:
        """Admin create/edit for any date and status, outside the check-in flow."""

        require_manager(caller)
        employee = resolve_employee(self._employees, caller, entry.employee_id)
        status = require_enum(AttendanceStatus, entry.status, "status")

        if entry.check_out is not None and entry.check_in is None:
            raise ValidationError("check_in", "is required when check_out is set")

        total_hours = 0.0
        if entry.check_in is not None and entry.check_out is not None:
            total_hours = self._policies.for_manual_entry().decide(
                work_date=entry.work_date,
                check_in=entry.check_in,
                check_out=entry.check_out,
            ).total_hours

        notes = optional_text(entry.notes)

        if entry.attendance_id is None:
            attendance_id = self._attendance.insert_manual(
                employee_id=employee.employee_id,
                work_date=entry.work_date,
                check_in=entry.check_in,
                check_out=entry.check_out,
                total_hours=total_hours,
                status=status,
                notes=notes,
            )
            if attendance_id is None:
                raise AlreadyCheckedIn("employee already has an open session")
            logger.info("attendance %s created manually by user %s", attendance_id, caller.user_id)
            return self._reload(caller, attendance_id)

        existing = self._attendance.get_by_id(int(entry.attendance_id), company_id=caller.company_id)
        if existing is None or existing.employee_id != employee.employee_id:
            raise NotFoundError("Attendance record")

        updated = self._attendance.update_manual(
            attendance_id=existing.attendance_id,
            company_id=caller.company_id,
            work_date=entry.work_date,
            check_in=entry.check_in,
            check_out=entry.check_out,
            total_hours=total_hours,
            status=status,
            notes=notes,
        )
        if updated is None:
            raise AlreadyCheckedIn("employee already has an open session")
        if not updated:
            raise NotFoundError("Attendance record")
        logger.info("attendance %s edited manually by user %s", existing.attendance_id, caller.user_id)
        return self._reload(caller, existing.attendance_id)

    def delete(self, caller: Caller, attendance_id: int) -> None:
        require_manager(caller)
        if not self._attendance.delete(int(attendance_id), company_id=caller.company_id):
            raise NotFoundError("Attendance record")
        logger.info("attendance %s deleted by user %s", attendance_id, caller.user_id)

    def get(self, caller: Caller, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id), company_id=caller.company_id)
        if record is None:
            raise NotFoundError("Attendance record")
        require_self_or_manager(caller, record.employee_id)
        return record

    def list_for_employee(
        self,
        caller: Caller,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)
        if start is not None and end is not None and end < start:
            raise ValidationError("end", "must not be before start")
        return self._attendance.list_for_employee(employee.employee_id, start_date=start, end_date=end)

    def list_for_company(self, caller: Caller, *, work_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        require_manager(caller)
        return self._attendance.list_for_company(caller.company_id, work_date=work_date)

    def _reload(self, caller: Caller, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id), company_id=caller.company_id)
        if record is None:
            raise NotFoundError("Attendance record")
        return record
