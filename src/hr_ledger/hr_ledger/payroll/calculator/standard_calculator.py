from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import MONEY_QUANT
from ..model import PayrollAmounts
from .base import NetPayCalculator


class StandardNetPayCalculator(NetPayCalculator):
    """Standard rule: base + bonus - deductions, not clamped at 0."""

    def compute(self, *, base_salary: Decimal, bonus: Decimal, deductions: Decimal) -> PayrollAmounts:
        q = Decimal(MONEY_QUANT)
        base_salary = base_salary.quantize(q, rounding=ROUND_HALF_UP)
        bonus = bonus.quantize(q, rounding=ROUND_HALF_UP)
        deductions = deductions.quantize(q, rounding=ROUND_HALF_UP)
        return PayrollAmounts(
            base_salary=base_salary,
            bonus=bonus,
            deductions=deductions,
            net_pay=base_salary + bonus - deductions,
        )
