"""Daily glucose statistics."""

import logging
import math
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from glucose_analytics.domain.readings import GlucoseObservation
from glucose_analytics.domain.stats import DailyAverage

_logger = logging.getLogger(__name__)


def is_finite_number(value: object) -> bool:
    """Return whether a value is a real, finite number."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def is_valid_glucose(value: object) -> bool:
    """Return whether a glucose value can take part in aggregation."""
    return is_finite_number(value) and value > 0


def mean_of(values: list[float]) -> float:
    """Arithmetic mean that does not depend on the order of ``values``."""
    return math.fsum(values) / len(values)


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar day of a timestamp.

    Aware timestamps are converted to ``tz`` (the system zone when ``tz`` is
    None) first; naive ones are taken as already local.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def aggregate_daily(
    observations: Iterable[GlucoseObservation], tz: tzinfo | None = None
) -> list[DailyAverage]:
    """Group readings by local calendar day and average each day."""
    buckets: dict[date, list[float]] = {}
    for observation in observations:
        if not is_valid_glucose(observation.value):
            _logger.warning(
                "Skipping glucose reading with unusable value: %r", observation.value
            )
            continue
        buckets.setdefault(local_day(observation.taken_at, tz), []).append(
            float(observation.value)
        )

    return [
        DailyAverage(day=day, mean=mean_of(values), sample_count=len(values))
        for day, values in sorted(buckets.items())
    ]
