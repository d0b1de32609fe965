"""Trailing time-window filtering."""

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import TypeVar

from glucose_analytics.domain.readings import GlucoseObservation, MealEvent

ItemT = TypeVar("ItemT")


def window_start(window_days: int, reference: datetime) -> datetime:
    """Return the inclusive lower bound of a trailing window.

    A window reaching past the earliest representable date is unbounded.
    """
    if window_days <= 0:
        msg = f"window_days must be positive, got {window_days}"
        raise ValueError(msg)
    try:
        return reference - timedelta(days=window_days)
    except OverflowError:
        return datetime.min.replace(tzinfo=reference.tzinfo)


def filter_window(
    items: Iterable[ItemT],
    window_days: int,
    reference: datetime,
    timestamp: Callable[[ItemT], datetime],
) -> list[ItemT]:
    """Keep items stamped at or after the window start.

    There is no upper bound, so records dated after ``reference`` are kept.
    """
    cutoff = window_start(window_days, reference)
    return [item for item in items if timestamp(item) >= cutoff]


def filter_observations(
    observations: Iterable[GlucoseObservation], window_days: int, reference: datetime
) -> list[GlucoseObservation]:
    """Restrict glucose readings to the trailing window."""
    return filter_window(
        observations, window_days, reference, lambda observation: observation.taken_at
    )


def filter_meals(
    meals: Iterable[MealEvent], window_days: int, reference: datetime
) -> list[MealEvent]:
    """Restrict meals to the trailing window."""
    return filter_window(meals, window_days, reference, lambda meal: meal.consumed_at)
