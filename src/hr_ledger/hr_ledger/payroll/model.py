from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollRecord:
    """Compensation of one employee for one pay period.

    ``net_pay == base_salary + bonus - deductions`` always; it may be negative.
    """

    payroll_id: int
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    base_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus
    created_at: datetime
    processed_at: Optional[datetime] = None
    idempotency_key: Optional[str] = None


@dataclass(frozen=True)
class PayrollAmounts:
    base_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    net_pay: Decimal
