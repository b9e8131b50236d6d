from __future__ import annotations

from dataclasses import dataclass

from ..core import constants
from ..core.enums import Tier, TierBasis


@dataclass(frozen=True)
class LaborThresholds:
    approaching_daily: float = constants.DAILY_APPROACHING_HOURS
    overtime_daily: float = constants.DAILY_OVERTIME_HOURS
    double_time_daily: float = constants.DAILY_DOUBLE_TIME_HOURS
    overtime_weekly: float = constants.WEEKLY_OVERTIME_HOURS
    overtime_multiplier: float = constants.OVERTIME_MULTIPLIER
    double_time_multiplier: float = constants.DOUBLE_TIME_MULTIPLIER


@dataclass(frozen=True)
class TierDecision:
    tier: Tier
    basis: TierBasis = TierBasis.NONE
    extra_hours: float = 0.0
    multiplier: float = 1.0
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "tier": self.tier.value,
            "basis": self.basis.value,
            "extra_hours": self.extra_hours,
            "multiplier": self.multiplier,
            "message": self.message,
        }
