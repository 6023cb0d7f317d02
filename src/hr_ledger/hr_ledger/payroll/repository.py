from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollAmounts, PayrollRecord


class PayrollRepository(Protocol):
    def insert_payroll(
        self,
        *,
        employee_id: int,
        period_start: date,
        period_end: date,
        amounts: PayrollAmounts,
        status: PayrollStatus,
        processed_at: Optional[datetime] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[int]:
        """New id, or None when ``idempotency_key`` was already used for the employee."""

        raise NotImplementedError

    def find_by_idempotency_key(self, employee_id: int, idempotency_key: str) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_payroll(self, payroll_id: int, *, company_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def transition_status(
        self,
        *,
        payroll_id: int,
        company_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        processed_at: Optional[datetime] = None,
    ) -> bool:
        """Conditional on the current status; ``processed_at`` is only written when given."""

        raise NotImplementedError

    def update_amounts_if_pending(
        self,
        *,
        payroll_id: int,
        company_id: int,
        period_start: date,
        period_end: date,
        amounts: PayrollAmounts,
    ) -> bool:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError
