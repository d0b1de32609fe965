"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from glucose_analytics.adapters.analytics_gateway import (
    AnalyticsGateway,
    HttpxAnalyticsGateway,
)
from glucose_analytics.config import Settings, resolve_timezone
from glucose_analytics.domain.stats import DelayWindow
from glucose_analytics.services.analytics import AnalyticsService
from glucose_analytics.services.refresh import DashboardLoader, RefreshCoordinator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    gateway: AnalyticsGateway
    analytics_service: AnalyticsService
    dashboard_loader: DashboardLoader
    refresh_coordinator: RefreshCoordinator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = resolve_timezone(resolved_settings.timezone)
    gateway = HttpxAnalyticsGateway.create(
        base_url=resolved_settings.analytics_api_url,
        api_token=resolved_settings.analytics_api_token,
        timeout_seconds=resolved_settings.request_timeout_seconds,
        timezone=timezone,
    )
    analytics_service = AnalyticsService(
        timezone=timezone,
        delay_window=DelayWindow.from_hours(
            resolved_settings.post_meal_min_hours,
            resolved_settings.post_meal_max_hours,
        ),
    )
    dashboard_loader = DashboardLoader(
        gateway=gateway,
        analytics_service=analytics_service,
        retry_attempts=resolved_settings.fetch_retry_attempts,
        retry_delay_seconds=resolved_settings.fetch_retry_delay_seconds,
    )
    refresh_coordinator = RefreshCoordinator(dashboard_loader)

    async def close_resources() -> None:
        await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        gateway=gateway,
        analytics_service=analytics_service,
        dashboard_loader=dashboard_loader,
        refresh_coordinator=refresh_coordinator,
        close_resources=close_resources,
    )
