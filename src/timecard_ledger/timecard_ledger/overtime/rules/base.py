from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import LaborThresholds, TierDecision


class TierRule(ABC):
    """Strategy Pattern: one labor-rule tier and the condition that selects it."""

    @abstractmethod
    def matches(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decide(self, *, daily_hours: float, week_to_date_hours: float, limits: LaborThresholds) -> TierDecision:
        raise NotImplementedError
