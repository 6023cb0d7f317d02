from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_enum, require_money
from ..core.context import Caller, require_manager, require_self_or_manager
from ..core.enums import PayrollStatus
from ..core.exceptions import NotFoundError, PayrollLocked, PayrollNotProcessed, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import resolve_employee
from .calculator.base import NetPayCalculator
from .calculator.standard_calculator import StandardNetPayCalculator
from .model import PayrollAmounts, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _require_period(period_start: date, period_end: date) -> None:
    if not isinstance(period_start, date):
        raise ValidationError("pay_period_start", "is required")
    if not isinstance(period_end, date):
        raise ValidationError("pay_period_end", "is required")
    if period_end < period_start:
        raise ValidationError("pay_period_end", "must not be before pay_period_start")


class PayrollService:
    """Payroll records: create with computed net pay, then pending -> processed -> paid.

    Net pay is only ever computed inside the operation that writes the inputs.
    Processing an already processed (or paid) record returns it unchanged.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[NetPayCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardNetPayCalculator()
        self._clock = clock

    def _amounts(self, base_salary, bonus, deductions) -> PayrollAmounts:
        amounts = self._calculator.compute(
            base_salary=require_money(base_salary, "base_salary"),
            bonus=require_money(bonus if bonus is not None else 0, "bonus"),
            deductions=require_money(deductions if deductions is not None else 0, "deductions"),
        )
        if amounts.net_pay < 0:
            logger.warning(
                "negative net pay %s (base=%s bonus=%s deductions=%s)",
                amounts.net_pay,
                amounts.base_salary,
                amounts.bonus,
                amounts.deductions,
            )
        return amounts

    def create(
        self,
        caller: Caller,
        *,
        employee_id: int,
        period_start: date,
        period_end: date,
        base_salary,
        bonus=0,
        deductions=0,
        status=PayrollStatus.PENDING,
        idempotency_key: Optional[str] = None,
    ) -> PayrollRecord:
        require_manager(caller)
        employee = resolve_employee(self._employees, caller, employee_id)
        _require_period(period_start, period_end)
        status = require_enum(PayrollStatus, status, "status")
        amounts = self._amounts(base_salary, bonus, deductions)
        idempotency_key = optional_text(idempotency_key)

        if idempotency_key is not None:
            existing = self._payroll.find_by_idempotency_key(employee.employee_id, idempotency_key)
            if existing is not None:
                logger.info("payroll create replayed: key=%s -> %s", idempotency_key, existing.payroll_id)
                return existing

        payroll_id = self._payroll.insert_payroll(
            employee_id=employee.employee_id,
            period_start=period_start,
            period_end=period_end,
            amounts=amounts,
            status=status,
            processed_at=self._clock() if status != PayrollStatus.PENDING else None,
            idempotency_key=idempotency_key,
        )
        if payroll_id is None:
            # Lost a race against a request carrying the same key.
            existing = self._payroll.find_by_idempotency_key(employee.employee_id, idempotency_key)
            if existing is None:
                raise NotFoundError("Payroll record")
            return existing

        logger.info(
            "payroll %s created: employee=%s period=%s..%s net=%s",
            payroll_id,
            employee.employee_id,
            period_start,
            period_end,
            amounts.net_pay,
        )
        return self._load(caller, payroll_id)

    def process(self, caller: Caller, payroll_id: int) -> PayrollRecord:
        require_manager(caller)
        record = self._load(caller, payroll_id)
        if record.status != PayrollStatus.PENDING:
            logger.debug("payroll %s already %s; process is a no-op", record.payroll_id, record.status.value)
            return record

        self._payroll.transition_status(
            payroll_id=record.payroll_id,
            company_id=caller.company_id,
            from_status=PayrollStatus.PENDING,
            to_status=PayrollStatus.PROCESSED,
            processed_at=self._clock(),
        )
        # A concurrent process() that won the update leaves the same end state.
        record = self._load(caller, record.payroll_id)
        logger.info("payroll %s processed at %s", record.payroll_id, record.processed_at)
        return record

    def mark_paid(self, caller: Caller, payroll_id: int) -> PayrollRecord:
        require_manager(caller)
        record = self._load(caller, payroll_id)
        if record.status == PayrollStatus.PAID:
            return record
        if record.status != PayrollStatus.PROCESSED:
            raise PayrollNotProcessed()

        if not self._payroll.transition_status(
            payroll_id=record.payroll_id,
            company_id=caller.company_id,
            from_status=PayrollStatus.PROCESSED,
            to_status=PayrollStatus.PAID,
        ):
            record = self._load(caller, record.payroll_id)
            if record.status != PayrollStatus.PAID:
                raise PayrollNotProcessed()
            return record

        logger.info("payroll %s paid", record.payroll_id)
        return self._load(caller, record.payroll_id)

    def update_amounts(
        self,
        caller: Caller,
        payroll_id: int,
        *,
        base_salary,
        bonus=0,
        deductions=0,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
    ) -> PayrollRecord:
        """Edit inputs of a pending record; net pay is recomputed in the same write."""

        require_manager(caller)
        record = self._load(caller, payroll_id)
        if record.status != PayrollStatus.PENDING:
            raise PayrollLocked()

        period_start = period_start or record.pay_period_start
        period_end = period_end or record.pay_period_end
        _require_period(period_start, period_end)
        amounts = self._amounts(base_salary, bonus, deductions)

        if not self._payroll.update_amounts_if_pending(
            payroll_id=record.payroll_id,
            company_id=caller.company_id,
            period_start=period_start,
            period_end=period_end,
            amounts=amounts,
        ):
            raise PayrollLocked()

        logger.info("payroll %s amounts updated: net=%s", record.payroll_id, amounts.net_pay)
        return self._load(caller, record.payroll_id)

    def get(self, caller: Caller, payroll_id: int) -> PayrollRecord:
        record = self._load(caller, payroll_id)
        require_self_or_manager(caller, record.employee_id)
        return record

    def list_for_employee(self, caller: Caller, employee_id: int) -> Sequence[PayrollRecord]:
        require_self_or_manager(caller, employee_id)
        employee = resolve_employee(self._employees, caller, employee_id)
        return self._payroll.list_for_employee(employee.employee_id)

    def list_for_company(self, caller: Caller) -> Sequence[PayrollRecord]:
        require_manager(caller)
        return self._payroll.list_for_company(caller.company_id)

    def _load(self, caller: Caller, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_payroll(int(payroll_id), company_id=caller.company_id)
        if record is None:
            raise NotFoundError("Payroll record")
        return record
