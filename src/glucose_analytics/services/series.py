"""Chart series shaping for the dashboard views."""

from collections.abc import Iterable

from glucose_analytics.domain.readings import GlucoseObservation, GlucoseStatus
from glucose_analytics.domain.series import (
    CategoryBar,
    CorrelationSeriesPoint,
    DailyAveragePoint,
    Series,
    StatusCategory,
    TrendPoint,
)
from glucose_analytics.domain.stats import CorrelationPoint, DailyAverage
from glucose_analytics.domain.summary import DashboardSummary
from glucose_analytics.services.stats import is_valid_glucose

STATUS_CATEGORIES: dict[GlucoseStatus, StatusCategory] = {
    GlucoseStatus.NORMAL: StatusCategory.NORMAL,
    GlucoseStatus.HIGH: StatusCategory.OUT_OF_RANGE,
    GlucoseStatus.LOW: StatusCategory.OUT_OF_RANGE,
    GlucoseStatus.CRITICALLY_HIGH: StatusCategory.CRITICAL,
    GlucoseStatus.CRITICALLY_LOW: StatusCategory.CRITICAL,
}

CATEGORY_COLORS: dict[StatusCategory, str] = {
    StatusCategory.CRITICAL: "rgb(239, 68, 68)",
    StatusCategory.OUT_OF_RANGE: "rgb(234, 179, 8)",
    StatusCategory.NORMAL: "rgb(34, 197, 94)",
}

TREND_LABEL = "Glucose Reading (mg/dL)"
DAILY_AVERAGE_LABEL = "Daily Average (mg/dL)"
CORRELATION_LABEL = "Carbs vs Post-Meal Glucose"
TIME_IN_RANGE_LABEL = "Time in Range (%)"

# Display order of the time-in-range bars.
_TIME_IN_RANGE_BARS = (
    ("In Range", "normal", "rgb(34, 197, 94)"),
    ("High", "high", "rgb(234, 179, 8)"),
    ("Low", "low", "rgb(59, 130, 246)"),
    ("Critical", "critical", "rgb(239, 68, 68)"),
)


def category_for(status: GlucoseStatus) -> StatusCategory:
    """Return the display bucket for an upstream status."""
    return STATUS_CATEGORIES[status]


def shape_trend(observations: Iterable[GlucoseObservation]) -> Series[TrendPoint]:
    """Build the glucose trend line, oldest reading first.

    Readings without an upstream status cannot be styled and are left out.
    """
    points = []
    for observation in sorted(observations, key=lambda item: item.taken_at):
        if not is_valid_glucose(observation.value) or observation.status is None:
            continue
        category = category_for(observation.status)
        points.append(
            TrendPoint(
                timestamp=observation.taken_at,
                value=float(observation.value),
                category=category,
                color=CATEGORY_COLORS[category],
            )
        )
    return Series(label=TREND_LABEL, points=points)


def shape_daily_averages(
    averages: Iterable[DailyAverage],
) -> Series[DailyAveragePoint]:
    """Build the daily average bars."""
    return Series(
        label=DAILY_AVERAGE_LABEL,
        points=[
            DailyAveragePoint(
                day=average.day, mean=average.mean, sample_count=average.sample_count
            )
            for average in sorted(averages, key=lambda item: item.day)
        ],
    )


def shape_correlation(
    points: Iterable[CorrelationPoint],
) -> Series[CorrelationSeriesPoint]:
    """Build the carbs against post-meal glucose scatter."""
    return Series(
        label=CORRELATION_LABEL,
        points=[
            CorrelationSeriesPoint(
                carbs_grams=point.carbs_grams,
                glucose=point.mean_post_meal_glucose,
                label=point.label,
            )
            for point in points
        ],
    )


def shape_time_in_range(summary: DashboardSummary | None) -> Series[CategoryBar]:
    """Reshape the upstream time-in-range percentages into four bars."""
    if summary is None:
        return Series(label=TIME_IN_RANGE_LABEL)
    breakdown = summary.time_in_range
    return Series(
        label=TIME_IN_RANGE_LABEL,
        points=[
            CategoryBar(label=label, value=getattr(breakdown, attribute), color=color)
            for label, attribute, color in _TIME_IN_RANGE_BARS
        ],
    )
