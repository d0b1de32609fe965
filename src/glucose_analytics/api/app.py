"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, status

from glucose_analytics.app_logging import configure_logging
from glucose_analytics.config import parse_window_options
from glucose_analytics.containers import AppContainer
from glucose_analytics.domain.readings import MealEvent
from glucose_analytics.domain.series import (
    CategoryBar,
    CorrelationSeriesPoint,
    DailyAveragePoint,
    Series,
    TrendPoint,
)
from glucose_analytics.domain.summary import DashboardSummary
from glucose_analytics.services.analytics import CorrelationView
from glucose_analytics.services.refresh import (
    LOAD_ERROR_MESSAGE,
    DashboardLoadError,
    DashboardViews,
    RefreshApplied,
    RefreshFailed,
    RefreshOutcome,
)
from glucose_analytics.services.stats import is_finite_number


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    window_options = parse_window_options(container.settings.window_options)
    default_window = container.settings.default_window_days

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/analytics/windows")
    async def analytics_windows() -> dict[str, object]:
        """Return the selectable trailing windows."""
        return {"options": list(window_options), "default": default_window}

    @app.get("/analytics")
    async def analytics(
        request: Request, days: int = Query(default=default_window, ge=1)
    ) -> dict[str, object]:
        """Load every dashboard view for the trailing window."""
        state_container: AppContainer = request.app.state.container
        try:
            views = await state_container.dashboard_loader.load(days)
        except DashboardLoadError as exc:
            logger.warning(
                "Analytics load failed", extra={"failures": len(exc.failures)}
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=LOAD_ERROR_MESSAGE
            ) from exc
        return _serialize_views(views)

    @app.post("/analytics/refresh")
    async def analytics_refresh(
        request: Request, days: int = Query(default=default_window, ge=1)
    ) -> dict[str, object]:
        """Run a sequenced refresh; only the newest request is applied."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.refresh_coordinator.refresh(days)
        if outcome is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Superseded by a newer refresh",
            )
        if isinstance(outcome, RefreshFailed):
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=outcome.message
            )
        return _serialize_outcome(outcome)

    @app.get("/analytics/current")
    async def analytics_current(request: Request) -> dict[str, object]:
        """Return the last applied refresh."""
        state_container: AppContainer = request.app.state.container
        current = state_container.refresh_coordinator.current
        if current is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_outcome(current)

    return app


def _serialize_outcome(outcome: RefreshOutcome) -> dict[str, object]:
    if isinstance(outcome, RefreshApplied):
        return {
            "token": outcome.token,
            "status": "ok",
            **_serialize_views(outcome.views),
        }
    return {
        "token": outcome.token,
        "status": "error",
        "window_days": outcome.window_days,
        "error": outcome.message,
    }


def _serialize_views(views: DashboardViews) -> dict[str, object]:
    return {
        "window_days": views.window_days,
        "reference": views.reference.isoformat(),
        "reading_count": views.reading_count,
        "summary": _serialize_summary(views.summary),
        "trend": _serialize_trend(views.trend),
        "daily_averages": _serialize_daily_averages(views.daily_averages),
        "correlation": _serialize_correlation(views.correlation),
        "time_in_range": _serialize_bars(views.time_in_range),
    }


def _serialize_summary(summary: DashboardSummary) -> dict[str, object]:
    return {
        "health_score": summary.health_score,
        "health_score_description": summary.health_score_description,
        "average_glucose": summary.average_glucose,
        "time_in_range_normal": summary.time_in_range.normal,
        "insights": summary.insights,
        "recommendations": summary.recommendations,
        "generated_at": summary.generated_at.isoformat()
        if summary.generated_at
        else None,
    }


def _serialize_trend(series: Series[TrendPoint]) -> dict[str, object]:
    return {
        "label": series.label,
        "empty": series.is_empty,
        "points": [
            {
                "x": point.timestamp.isoformat(),
                "y": point.value,
                "category": point.category.value,
                "color": point.color,
            }
            for point in series.points
        ],
    }


def _serialize_daily_averages(
    series: Series[DailyAveragePoint],
) -> dict[str, object]:
    return {
        "label": series.label,
        "empty": series.is_empty,
        "points": [
            {"x": point.day.isoformat(), "y": point.mean, "count": point.sample_count}
            for point in series.points
        ],
    }


def _serialize_correlation(view: CorrelationView) -> dict[str, object]:
    series: Series[CorrelationSeriesPoint] = view.series
    return {
        "label": series.label,
        "empty": series.is_empty,
        "points": [
            {"x": point.carbs_grams, "y": point.glucose, "label": point.label}
            for point in series.points
        ],
        "unmatched_meals": [_serialize_meal(meal) for meal in view.unmatched_meals],
        "insufficient_data": view.has_insufficient_data,
    }


def _serialize_meal(meal: MealEvent) -> dict[str, object]:
    return {
        "id": str(meal.id) if meal.id else None,
        "name": meal.name,
        "carbs_grams": meal.carbs_grams
        if is_finite_number(meal.carbs_grams)
        else None,
        "consumed_at": meal.consumed_at.isoformat(),
    }


def _serialize_bars(series: Series[CategoryBar]) -> dict[str, object]:
    return {
        "label": series.label,
        "empty": series.is_empty,
        "points": [
            {"label": bar.label, "value": bar.value, "color": bar.color}
            for bar in series.points
        ],
    }
