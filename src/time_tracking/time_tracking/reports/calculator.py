from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay estimates)."""

    @abstractmethod
    def estimated_pay(self, hours: float, hourly_pay: Optional[float]) -> Optional[float]:
        raise NotImplementedError


class HourlyPayCalculator(PayCalculator):
    """Standard rule: hours * rate, rounded to cents; None when no rate is set."""

    def estimated_pay(self, hours: float, hourly_pay: Optional[float]) -> Optional[float]:
        if hourly_pay is None:
            return None
        return round(max(hours, 0.0) * hourly_pay, 2)
