"""Meal to post-meal glucose correlation."""

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Iterable

from glucose_analytics.domain.readings import GlucoseObservation, MealEvent
from glucose_analytics.domain.stats import (
    CorrelationPoint,
    DelayWindow,
    Matched,
    MealCorrelation,
    Unmatched,
)
from glucose_analytics.services.stats import (
    is_finite_number,
    is_valid_glucose,
    mean_of,
)

_logger = logging.getLogger(__name__)

DEFAULT_DELAY_WINDOW = DelayWindow()


def correlate_meals(
    meals: Iterable[MealEvent],
    observations: Iterable[GlucoseObservation],
    window: DelayWindow = DEFAULT_DELAY_WINDOW,
) -> list[MealCorrelation]:
    """Match every meal against the readings taken inside its delay window.

    Readings are not consumed by a match, so one reading can count towards
    several meals whose windows overlap. Results follow the meal order; a meal
    whose carb count is unusable is reported as unmatched.
    """
    readings = sorted(
        (
            observation
            for observation in observations
            if is_valid_glucose(observation.value)
        ),
        key=lambda observation: observation.taken_at,
    )
    taken_at = [reading.taken_at for reading in readings]

    results: list[MealCorrelation] = []
    for meal in meals:
        if not is_finite_number(meal.carbs_grams) or meal.carbs_grams < 0:
            _logger.warning(
                "Meal %r has unusable carbs: %r", meal.name, meal.carbs_grams
            )
            results.append(Unmatched(meal=meal))
            continue
        lower = bisect_left(taken_at, meal.consumed_at + window.start)
        upper = bisect_right(taken_at, meal.consumed_at + window.end)
        values = [float(reading.value) for reading in readings[lower:upper]]
        if not values:
            results.append(Unmatched(meal=meal))
            continue
        results.append(
            Matched(
                meal=meal,
                point=CorrelationPoint(
                    carbs_grams=float(meal.carbs_grams),
                    mean_post_meal_glucose=mean_of(values),
                    label=meal.name,
                    sample_count=len(values),
                ),
            )
        )
    return results


def correlate(
    meals: Iterable[MealEvent],
    observations: Iterable[GlucoseObservation],
    window: DelayWindow = DEFAULT_DELAY_WINDOW,
) -> list[CorrelationPoint]:
    """Return one point per meal that has post-meal readings."""
    return [
        result.point
        for result in correlate_meals(meals, observations, window)
        if isinstance(result, Matched)
    ]
