from __future__ import annotations

from datetime import date, time

from ...common.datetime_utils import span_seconds
from ...core.constants import HOURS_DECIMALS
from ...core.exceptions import ValidationError
from .base import DurationDecision, DurationPolicy


class RejectNegativePolicy(DurationPolicy):
    """Manual entry: the admin can fix the input, so a negative span is refused."""

    def decide(self, *, work_date: date, check_in: time, check_out: time) -> DurationDecision:
        hours = span_seconds(work_date, check_in, check_out) / 3600
        if hours < 0:
            raise ValidationError("check_out", "must not be earlier than check_in")
        return DurationDecision(total_hours=round(hours, HOURS_DECIMALS))
