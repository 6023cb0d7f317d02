from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class DurationDecision:
    total_hours: float
    flagged: bool = False


class DurationPolicy(ABC):
    """Strategy Pattern: decide what to store for a check-in/check-out span."""

    @abstractmethod
    def decide(self, *, work_date: date, check_in: time, check_out: time) -> DurationDecision:
        raise NotImplementedError
