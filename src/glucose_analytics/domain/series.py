"""Renderer-neutral chart series."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Generic, TypeVar

PointT = TypeVar("PointT")


class StatusCategory(StrEnum):
    """Display bucket for a reading's status."""

    CRITICAL = "critical"
    OUT_OF_RANGE = "out_of_range"
    NORMAL = "normal"


@dataclass(frozen=True)
class TrendPoint:
    """One reading on the glucose trend line."""

    timestamp: datetime
    value: float
    category: StatusCategory
    color: str


@dataclass(frozen=True)
class DailyAveragePoint:
    """One bar of the daily average chart."""

    day: date
    mean: float
    sample_count: int


@dataclass(frozen=True)
class CorrelationSeriesPoint:
    """One scatter point of carbs against post-meal glucose."""

    carbs_grams: float
    glucose: float
    label: str


@dataclass(frozen=True)
class CategoryBar:
    """One bar of a categorical distribution."""

    label: str
    value: float
    color: str


@dataclass(frozen=True)
class Series(Generic[PointT]):
    """A labelled, ordered list of points."""

    label: str
    points: list[PointT] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return whether there is nothing to render."""
        return not self.points
