from __future__ import annotations

import logging
from datetime import date, time

from ...common.datetime_utils import span_seconds
from ...core.constants import HOURS_DECIMALS
from .base import DurationDecision, DurationPolicy

logger = logging.getLogger(__name__)


class ClampNegativePolicy(DurationPolicy):
    """Self-service check-out: a negative span is stored as 0.0 hours and flagged.

    The observed times are kept so the record can be reviewed later.
    """

    def decide(self, *, work_date: date, check_in: time, check_out: time) -> DurationDecision:
        hours = span_seconds(work_date, check_in, check_out) / 3600
        if hours < 0:
            logger.warning(
                "check-out %s earlier than check-in %s on %s; storing 0 hours",
                check_out,
                check_in,
                work_date,
            )
            return DurationDecision(total_hours=0.0, flagged=True)
        return DurationDecision(total_hours=round(hours, HOURS_DECIMALS))
