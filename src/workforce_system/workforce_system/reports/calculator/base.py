from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...checkins.model import CheckIn


@dataclass(frozen=True)
class OvertimeSplit:
    regular: float
    overtime: float


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def hours_worked(self, checkin: CheckIn) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime(self, total_hours: float, shift_count: int) -> OvertimeSplit:
        raise NotImplementedError
