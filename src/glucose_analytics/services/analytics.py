"""Dashboard views computed from raw readings and meals."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo

from glucose_analytics.domain.readings import GlucoseObservation, MealEvent
from glucose_analytics.domain.series import (
    CategoryBar,
    CorrelationSeriesPoint,
    DailyAveragePoint,
    Series,
    TrendPoint,
)
from glucose_analytics.domain.stats import DelayWindow, Matched, Unmatched
from glucose_analytics.domain.summary import DashboardSummary
from glucose_analytics.services.correlation import correlate_meals
from glucose_analytics.services.series import (
    shape_correlation,
    shape_daily_averages,
    shape_time_in_range,
    shape_trend,
)
from glucose_analytics.services.stats import aggregate_daily
from glucose_analytics.services.windowing import filter_meals, filter_observations


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class CorrelationView:
    """Correlation scatter plus the meals that had no post-meal readings."""

    series: Series[CorrelationSeriesPoint]
    unmatched_meals: list[MealEvent] = field(default_factory=list)

    @property
    def has_insufficient_data(self) -> bool:
        """Return whether any meal in the window lacked readings."""
        return bool(self.unmatched_meals)


@dataclass
class AnalyticsService:
    """Service for the windowed dashboard views."""

    timezone: tzinfo | None = None
    delay_window: DelayWindow = field(default_factory=DelayWindow)
    clock: Callable[[], datetime] = _utc_now

    def compute_trend_view(
        self,
        observations: Iterable[GlucoseObservation],
        window_days: int,
        reference: datetime | None = None,
    ) -> Series[TrendPoint]:
        """Return the glucose trend for the trailing window."""
        recent = filter_observations(
            observations, window_days, reference or self.clock()
        )
        return shape_trend(recent)

    def compute_daily_average_view(
        self,
        observations: Iterable[GlucoseObservation],
        window_days: int,
        reference: datetime | None = None,
    ) -> Series[DailyAveragePoint]:
        """Return daily averages for the trailing window."""
        recent = filter_observations(
            observations, window_days, reference or self.clock()
        )
        return shape_daily_averages(aggregate_daily(recent, self.timezone))

    def compute_correlation_view(
        self,
        meals: Iterable[MealEvent],
        observations: Iterable[GlucoseObservation],
        window_days: int,
        reference: datetime | None = None,
    ) -> CorrelationView:
        """Return carbs against post-meal glucose for meals in the window."""
        resolved_reference = reference or self.clock()
        results = correlate_meals(
            filter_meals(meals, window_days, resolved_reference),
            filter_observations(observations, window_days, resolved_reference),
            self.delay_window,
        )
        return CorrelationView(
            series=shape_correlation(
                result.point for result in results if isinstance(result, Matched)
            ),
            unmatched_meals=[
                result.meal for result in results if isinstance(result, Unmatched)
            ],
        )

    def compute_time_in_range_view(
        self, summary: DashboardSummary | None
    ) -> Series[CategoryBar]:
        """Return the upstream time-in-range breakdown as bars."""
        return shape_time_in_range(summary)
