from __future__ import annotations

from dataclasses import dataclass, field

from .strategies.base import DurationPolicy
from .strategies.clamp_strategy import ClampNegativePolicy
from .strategies.reject_strategy import RejectNegativePolicy


@dataclass
class DurationPolicyFactory:
    """Factory Pattern: pick the duration policy for each way a record gets its times."""

    checkout_policy: DurationPolicy = field(default_factory=ClampNegativePolicy)
    manual_policy: DurationPolicy = field(default_factory=RejectNegativePolicy)

    def for_checkout(self) -> DurationPolicy:
        return self.checkout_policy

    def for_manual_entry(self) -> DurationPolicy:
        return self.manual_policy
