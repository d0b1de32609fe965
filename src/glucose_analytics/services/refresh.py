"""Concurrent dashboard loading and refresh sequencing."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from glucose_analytics.adapters.analytics_gateway import AnalyticsGateway
from glucose_analytics.domain.readings import GlucoseObservation, MealEvent
from glucose_analytics.domain.series import (
    CategoryBar,
    DailyAveragePoint,
    Series,
    TrendPoint,
)
from glucose_analytics.domain.summary import DashboardSummary
from glucose_analytics.services.analytics import AnalyticsService, CorrelationView
from glucose_analytics.services.stats import is_valid_glucose
from glucose_analytics.services.windowing import filter_observations

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load analytics data"


class DashboardLoadError(Exception):
    """Raised when any upstream read of a refresh fails."""

    def __init__(self, failures: list[BaseException]) -> None:
        super().__init__(LOAD_ERROR_MESSAGE)
        self.failures = failures


@dataclass(frozen=True)
class DashboardData:
    """Raw upstream data from one successful fetch."""

    summary: DashboardSummary
    observations: list[GlucoseObservation]
    meals: list[MealEvent]


@dataclass(frozen=True)
class DashboardViews:
    """Every derived view for one time window."""

    window_days: int
    reference: datetime
    summary: DashboardSummary
    reading_count: int
    trend: Series[TrendPoint]
    daily_averages: Series[DailyAveragePoint]
    correlation: CorrelationView
    time_in_range: Series[CategoryBar]


@dataclass
class DashboardLoader:
    """Fetches the three upstream collections and derives the views."""

    gateway: AnalyticsGateway
    analytics_service: AnalyticsService
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def fetch(self) -> DashboardData:
        """Fetch summary, readings and meals concurrently, all or nothing."""
        results = await asyncio.gather(
            self._call_with_retry(self.gateway.get_dashboard_summary, action="summary"),
            self._call_with_retry(
                self.gateway.get_glucose_observations, action="readings"
            ),
            self._call_with_retry(self.gateway.get_meal_events, action="meals"),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            for failure in failures:
                _logger.error("Analytics fetch failed", exc_info=failure)
            raise DashboardLoadError(failures)
        summary, observations, meals = results
        return DashboardData(summary=summary, observations=observations, meals=meals)

    def build_views(self, data: DashboardData, window_days: int) -> DashboardViews:
        """Derive every view from one fetch against a single reference time."""
        service = self.analytics_service
        reference = service.clock()
        recent = filter_observations(data.observations, window_days, reference)
        return DashboardViews(
            window_days=window_days,
            reference=reference,
            summary=data.summary,
            reading_count=sum(1 for item in recent if is_valid_glucose(item.value)),
            trend=service.compute_trend_view(recent, window_days, reference),
            daily_averages=service.compute_daily_average_view(
                data.observations, window_days, reference
            ),
            correlation=service.compute_correlation_view(
                data.meals, data.observations, window_days, reference
            ),
            time_in_range=service.compute_time_in_range_view(data.summary),
        )

    async def load(self, window_days: int) -> DashboardViews:
        """Fetch and derive the views for a trailing window."""
        data = await self.fetch()
        return self.build_views(data, window_days)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[object]]", *, action: str
    ) -> object:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Analytics %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


@dataclass(frozen=True)
class RefreshApplied:
    """A refresh whose views are now current."""

    token: int
    views: DashboardViews


@dataclass(frozen=True)
class RefreshFailed:
    """A refresh that could not load; nothing from it is shown."""

    token: int
    window_days: int
    message: str = LOAD_ERROR_MESSAGE


RefreshOutcome = RefreshApplied | RefreshFailed


@dataclass
class RefreshCoordinator:
    """Applies only the most recently requested refresh.

    Every refresh takes a new token before fetching. When it settles, the
    result is applied only if no newer refresh has started in the meantime.
    """

    loader: DashboardLoader
    current: RefreshOutcome | None = None
    _latest_token: int = field(default=0, init=False, repr=False)

    @property
    def latest_token(self) -> int:
        """Return the token of the most recently started refresh."""
        return self._latest_token

    def next_token(self) -> int:
        """Start a new refresh and return its token."""
        self._latest_token += 1
        return self._latest_token

    def is_latest(self, token: int) -> bool:
        """Return whether a token belongs to the newest refresh."""
        return token == self._latest_token

    async def refresh(self, window_days: int) -> RefreshOutcome | None:
        """Load views for a window; return None when superseded."""
        token = self.next_token()
        try:
            views = await self.loader.load(window_days)
        except DashboardLoadError:
            outcome: RefreshOutcome = RefreshFailed(token=token, window_days=window_days)
        else:
            outcome = RefreshApplied(token=token, views=views)

        if not self.is_latest(token):
            _logger.info(
                "Discarding stale refresh %s (latest is %s)", token, self._latest_token
            )
            return None
        self.current = outcome
        return outcome
