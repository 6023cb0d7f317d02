from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import PayrollAmounts


class NetPayCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, *, base_salary: Decimal, bonus: Decimal, deductions: Decimal) -> PayrollAmounts:
        raise NotImplementedError
