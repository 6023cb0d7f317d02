from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import inclusive_days, now_local
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.context import Caller, require_manager, require_self_or_manager
from ..core.enums import Decision, LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError, NotPending, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import resolve_employee
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave workflow: submit, then exactly one approve/reject.

    ``days`` counts calendar days, weekends and holidays included. No leave
    balance is checked before a request is accepted.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._clock = clock

    def submit(
        self,
        caller: Caller,
        *,
        employee_id: int,
        leave_type,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)

        leave_type = require_enum(LeaveType, leave_type, "leave_type")
        if not isinstance(start_date, date):
            raise ValidationError("start_date", "is required")
        if not isinstance(end_date, date):
            raise ValidationError("end_date", "is required")
        if end_date < start_date:
            raise ValidationError("end_date", "must not be before start_date")
        reason = require_non_empty(reason, "reason")

        days = inclusive_days(start_date, end_date)
        leave_id = self._leaves.insert_leave(
            employee_id=employee.employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
        )
        logger.info(
            "leave %s submitted: employee=%s type=%s %s..%s (%d days)",
            leave_id,
            employee.employee_id,
            leave_type.value,
            start_date,
            end_date,
            days,
        )
        return self._load(caller, leave_id)

    def adjudicate(
        self,
        caller: Caller,
        leave_id: int,
        decision,
        *,
        comments: Optional[str] = None,
        reviewer_id: Optional[int] = None,
    ) -> LeaveRequest:
        require_manager(caller)
        decision = require_enum(Decision, decision, "decision")

        request = self._load(caller, leave_id)
        if request.status != LeaveStatus.PENDING:
            raise NotPending()

        reviewer = reviewer_id if reviewer_id is not None else caller.employee_id
        if reviewer is not None:
            reviewer = resolve_employee(self._employees, caller, reviewer).employee_id

        applied = self._leaves.update_leave_status_if_pending(
            leave_id=request.leave_id,
            company_id=caller.company_id,
            status=decision.resulting_status,
            approved_by=reviewer,
            approved_at=self._clock(),
            admin_comments=optional_text(comments),
        )
        if not applied:
            # Another reviewer got there first.
            raise NotPending()

        logger.info("leave %s %s by employee %s", request.leave_id, decision.resulting_status.value, reviewer)
        return self._load(caller, request.leave_id)

    def get(self, caller: Caller, leave_id: int) -> LeaveRequest:
        request = self._load(caller, leave_id)
        require_self_or_manager(caller, request.employee_id)
        return request

    def list_for_employee(self, caller: Caller, employee_id: int) -> Sequence[LeaveRequest]:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)
        return self._leaves.list_for_employee(employee.employee_id)

    def list_for_company(self, caller: Caller, *, status=None) -> Sequence[LeaveRequest]:
        require_manager(caller)
        if status is not None:
            status = require_enum(LeaveStatus, status, "status")
        return self._leaves.list_for_company(caller.company_id, status=status)

    def _load(self, caller: Caller, leave_id: int) -> LeaveRequest:
        request = self._leaves.get_leave(int(leave_id), company_id=caller.company_id)
        if request is None:
            raise NotFoundError("Leave request")
        return request
