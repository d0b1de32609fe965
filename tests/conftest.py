"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from glucose_analytics.adapters.analytics_gateway import AnalyticsGateway
from glucose_analytics.config import Settings
from glucose_analytics.containers import AppContainer
from glucose_analytics.domain.readings import (
    GlucoseObservation,
    GlucoseStatus,
    MealEvent,
)
from glucose_analytics.domain.summary import DashboardSummary, TimeInRangeBreakdown
from glucose_analytics.services.analytics import AnalyticsService
from glucose_analytics.services.refresh import DashboardLoader, RefreshCoordinator

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=UTC)


def reading(
    value: float,
    taken_at: datetime,
    status: GlucoseStatus | None = GlucoseStatus.NORMAL,
) -> GlucoseObservation:
    return GlucoseObservation(value=value, taken_at=taken_at, status=status)


def meal(carbs: float, consumed_at: datetime, name: str = "meal") -> MealEvent:
    return MealEvent(carbs_grams=carbs, consumed_at=consumed_at, name=name)


@dataclass
class FakeAnalyticsGateway(AnalyticsGateway):
    """Fake gateway serving in-memory collections."""

    summary: DashboardSummary = field(
        default_factory=lambda: DashboardSummary(
            health_score=82,
            average_glucose=118.5,
            time_in_range=TimeInRangeBreakdown(
                normal=72.5, high=15.0, low=10.0, critical=2.5
            ),
            insights={"glucose": "Stable week."},
        )
    )
    observations: list[GlucoseObservation] = field(default_factory=list)
    meals: list[MealEvent] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    gate: asyncio.Event | None = None

    async def get_dashboard_summary(self) -> DashboardSummary:
        await self._call("summary")
        return self.summary

    async def get_glucose_observations(self) -> list[GlucoseObservation]:
        await self._call("readings")
        return list(self.observations)

    async def get_meal_events(self) -> list[MealEvent]:
        await self._call("meals")
        return list(self.meals)

    async def _call(self, name: str) -> None:
        self.calls.append(name)
        if self.gate is not None:
            await self.gate.wait()
        if name in self.failing:
            raise ConnectionError(f"{name} unavailable")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        analytics_api_url="https://glucose.example.test",
        analytics_api_token="api-token",
        timezone="UTC",
    )


@pytest.fixture
def gateway() -> FakeAnalyticsGateway:
    return FakeAnalyticsGateway()


@pytest.fixture
def analytics_service() -> AnalyticsService:
    return AnalyticsService(timezone=UTC, clock=lambda: NOW)


@pytest.fixture
def loader(
    gateway: FakeAnalyticsGateway, analytics_service: AnalyticsService
) -> DashboardLoader:
    return DashboardLoader(
        gateway=gateway,
        analytics_service=analytics_service,
        retry_attempts=0,
        retry_delay_seconds=0,
    )


@pytest.fixture
def container(
    settings: Settings,
    gateway: FakeAnalyticsGateway,
    analytics_service: AnalyticsService,
    loader: DashboardLoader,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        gateway=gateway,
        analytics_service=analytics_service,
        dashboard_loader=loader,
        refresh_coordinator=RefreshCoordinator(loader),
        close_resources=close_resources,
    )
