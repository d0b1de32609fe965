"""Pydantic models for the upstream analytics API payloads."""

import logging
from datetime import datetime, tzinfo
from typing import TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from glucose_analytics.domain.readings import (
    GlucoseObservation,
    GlucoseStatus,
    MealEvent,
    MealType,
    ReadingType,
)
from glucose_analytics.domain.summary import DashboardSummary, TimeInRangeBreakdown

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound="_Payload")


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GlucoseReadingPayload(_Payload):
    """Glucose reading as returned by ``GET /api/glucose``."""

    id: UUID | None = None
    reading_value: float = Field(alias="readingValue", gt=0, allow_inf_nan=False)
    taken_at: datetime = Field(alias="takenAt")
    status: GlucoseStatus | None = None
    reading_type: ReadingType | None = Field(default=None, alias="readingType")
    note: str | None = None
    in_range: bool | None = Field(default=None, alias="inRange")

    @field_validator("status", mode="before")
    @classmethod
    def _unknown_status(cls, value: object) -> object:
        # The value still counts towards averages; only the trend needs a status.
        if isinstance(value, str) and value not in GlucoseStatus.__members__:
            _logger.warning("Unknown glucose status %r, reading left unstyled", value)
            return None
        return value

    @field_validator("reading_type", mode="before")
    @classmethod
    def _unknown_reading_type(cls, value: object) -> object:
        if isinstance(value, str) and value not in ReadingType.__members__:
            return None
        return value

    def to_domain(self, tz: tzinfo | None = None) -> GlucoseObservation:
        """Convert to a domain observation with an aware timestamp."""
        return GlucoseObservation(
            value=self.reading_value,
            taken_at=_as_aware(self.taken_at, tz),
            status=self.status,
            reading_type=self.reading_type or ReadingType.OTHER,
            note=self.note,
            id=self.id,
            in_range=self.in_range,
        )


class MealPayload(_Payload):
    """Meal as returned by ``GET /api/meals``."""

    id: UUID | None = None
    description: str = ""
    carbs_grams: float = Field(alias="carbsGrams", ge=0, allow_inf_nan=False)
    consumed_at: datetime = Field(alias="consumedAt")
    meal_type: MealType | None = Field(default=None, alias="mealType")
    calories: float | None = None
    protein_grams: float | None = Field(default=None, alias="proteinGrams")
    fat_grams: float | None = Field(default=None, alias="fatGrams")
    notes: str | None = None

    @field_validator("meal_type", mode="before")
    @classmethod
    def _unknown_meal_type(cls, value: object) -> object:
        if isinstance(value, str) and value not in MealType.__members__:
            return None
        return value

    def to_domain(self, tz: tzinfo | None = None) -> MealEvent:
        """Convert to a domain meal with an aware timestamp."""
        return MealEvent(
            carbs_grams=self.carbs_grams,
            consumed_at=_as_aware(self.consumed_at, tz),
            name=self.description,
            id=self.id,
            meal_type=self.meal_type,
            calories=self.calories,
            protein_grams=self.protein_grams,
            fat_grams=self.fat_grams,
            notes=self.notes,
        )


class TimeInRangePayload(_Payload):
    """Time-in-range percentages keyed by category."""

    normal: float | None = None
    high: float | None = None
    low: float | None = None
    critical: float | None = None


class GlucoseSummaryPayload(_Payload):
    """Subset of the upstream glucose summary used as a fallback."""

    average_reading: float | None = Field(default=None, alias="averageReading")
    time_in_range_percentage: float | None = Field(
        default=None, alias="timeInRangePercentage"
    )
    time_high_percentage: float | None = Field(default=None, alias="timeHighPercentage")
    time_low_percentage: float | None = Field(default=None, alias="timeLowPercentage")


class DashboardPayload(_Payload):
    """Dashboard summary as returned by ``GET /api/analytics/dashboard``."""

    health_score: int | None = Field(default=None, alias="healthScore")
    health_score_description: str | None = Field(
        default=None, alias="healthScoreDescription"
    )
    average_glucose: float | None = Field(default=None, alias="averageGlucose")
    time_in_range: TimeInRangePayload | None = Field(default=None, alias="timeInRange")
    glucose_summary: GlucoseSummaryPayload | None = Field(
        default=None, alias="glucoseSummary"
    )
    insights: dict[str, str] | None = None
    recommendations: dict[str, str] | None = None
    generated_at: datetime | None = Field(default=None, alias="generatedAt")

    def to_domain(self) -> DashboardSummary:
        """Convert to the opaque dashboard summary."""
        glucose = self.glucose_summary or GlucoseSummaryPayload()
        if self.time_in_range is not None:
            breakdown = TimeInRangeBreakdown(
                normal=self.time_in_range.normal or 0.0,
                high=self.time_in_range.high or 0.0,
                low=self.time_in_range.low or 0.0,
                critical=self.time_in_range.critical or 0.0,
            )
        else:
            breakdown = TimeInRangeBreakdown(
                normal=glucose.time_in_range_percentage or 0.0,
                high=glucose.time_high_percentage or 0.0,
                low=glucose.time_low_percentage or 0.0,
            )
        average = self.average_glucose
        if average is None:
            average = glucose.average_reading
        return DashboardSummary(
            health_score=self.health_score,
            health_score_description=self.health_score_description,
            average_glucose=average,
            time_in_range=breakdown,
            insights=dict(self.insights or {}),
            recommendations=dict(self.recommendations or {}),
            generated_at=self.generated_at,
        )


def parse_dashboard(payload: object) -> DashboardSummary:
    """Parse the dashboard summary; an invalid summary fails the fetch."""
    return DashboardPayload.model_validate(payload).to_domain()


def parse_observations(
    payload: object, tz: tzinfo | None = None
) -> list[GlucoseObservation]:
    """Parse glucose readings, dropping malformed records."""
    return [
        record.to_domain(tz)
        for record in _parse_records(payload, GlucoseReadingPayload, "glucose reading")
    ]


def parse_meals(payload: object, tz: tzinfo | None = None) -> list[MealEvent]:
    """Parse meals, dropping malformed records."""
    return [
        record.to_domain(tz) for record in _parse_records(payload, MealPayload, "meal")
    ]


def _parse_records(
    payload: object, model: type[ModelT], kind: str
) -> list[ModelT]:
    if not isinstance(payload, list):
        msg = f"Expected a list of {kind}s, got {type(payload).__name__}"
        raise TypeError(msg)
    records = []
    for index, row in enumerate(payload):
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            _logger.warning(
                "Dropping malformed %s at index %s (%s errors)",
                kind,
                index,
                exc.error_count(),
            )
    return records


def _as_aware(moment: datetime, tz: tzinfo | None) -> datetime:
    """Attach the configured zone (or the system zone) to naive timestamps."""
    if moment.tzinfo is not None:
        return moment
    if tz is None:
        return moment.astimezone()
    return moment.replace(tzinfo=tz)
