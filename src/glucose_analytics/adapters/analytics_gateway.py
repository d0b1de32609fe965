"""Upstream analytics REST API client."""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Protocol

import httpx

from glucose_analytics.adapters.analytics_models import (
    parse_dashboard,
    parse_meals,
    parse_observations,
)
from glucose_analytics.domain.readings import GlucoseObservation, MealEvent
from glucose_analytics.domain.summary import DashboardSummary


class AnalyticsGateway(Protocol):
    """Interface for the service that owns readings, meals and the summary."""

    async def get_dashboard_summary(self) -> DashboardSummary:
        """Return the precomputed dashboard summary."""

    async def get_glucose_observations(self) -> list[GlucoseObservation]:
        """Return the full, unsorted glucose history."""

    async def get_meal_events(self) -> list[MealEvent]:
        """Return the full, unsorted meal history."""


@dataclass
class HttpxAnalyticsGateway(AnalyticsGateway):
    """HTTPX-backed analytics gateway using bearer token auth."""

    base_url: str
    api_token: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15
    timezone: tzinfo | None = None

    @classmethod
    def create(
        cls,
        base_url: str,
        api_token: str,
        timeout_seconds: float = 15,
        timezone: tzinfo | None = None,
    ) -> "HttpxAnalyticsGateway":
        """Create a gateway with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_token=api_token,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
            timezone=timezone,
        )

    async def get_dashboard_summary(self) -> DashboardSummary:
        """Fetch the dashboard summary."""
        return parse_dashboard(await self._get_json("/api/analytics/dashboard"))

    async def get_glucose_observations(self) -> list[GlucoseObservation]:
        """Fetch all glucose readings."""
        return parse_observations(await self._get_json("/api/glucose"), self.timezone)

    async def get_meal_events(self) -> list[MealEvent]:
        """Fetch all meals."""
        return parse_meals(await self._get_json("/api/meals"), self.timezone)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get_json(self, path: str) -> object:
        response = await self.http_client.get(
            f"{self.base_url}{path}",
            headers={"Authorization": f"Bearer {self.api_token}"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
