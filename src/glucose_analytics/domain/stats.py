"""Domain models for derived glucose statistics."""

from dataclasses import dataclass
from datetime import date, timedelta

from glucose_analytics.domain.readings import MealEvent


@dataclass(frozen=True)
class DailyAverage:
    """Mean glucose for one local calendar day."""

    day: date
    mean: float
    sample_count: int


@dataclass(frozen=True)
class CorrelationPoint:
    """Carbohydrates of a meal against its mean post-meal glucose."""

    carbs_grams: float
    mean_post_meal_glucose: float
    label: str
    sample_count: int = 1


@dataclass(frozen=True)
class DelayWindow:
    """Closed offset range after a meal that counts as its response."""

    start: timedelta = timedelta(hours=1)
    end: timedelta = timedelta(hours=3)

    def __post_init__(self) -> None:
        if self.start > self.end:
            msg = f"Delay window start {self.start} is after end {self.end}"
            raise ValueError(msg)

    @classmethod
    def from_hours(cls, start_hours: float, end_hours: float) -> "DelayWindow":
        """Build a window from fractional hour offsets."""
        return cls(start=timedelta(hours=start_hours), end=timedelta(hours=end_hours))


@dataclass(frozen=True)
class Matched:
    """A meal with at least one post-meal reading."""

    meal: MealEvent
    point: CorrelationPoint


@dataclass(frozen=True)
class Unmatched:
    """A meal without any reading in its delay window."""

    meal: MealEvent


MealCorrelation = Matched | Unmatched
