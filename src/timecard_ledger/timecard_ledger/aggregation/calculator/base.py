from __future__ import annotations

from abc import ABC, abstractmethod

from ...overtime.model import LaborThresholds
from ..model import HourBuckets


class BucketCalculator(ABC):
    """Calculator interface (Strategy Pattern for splitting worked hours)."""

    @abstractmethod
    def split_day(self, total_hours: float, limits: LaborThresholds) -> HourBuckets:
        raise NotImplementedError

    @abstractmethod
    def weekly_overtime(self, regular_hours: float, limits: LaborThresholds) -> float:
        raise NotImplementedError
