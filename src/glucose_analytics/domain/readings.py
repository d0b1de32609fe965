"""Domain models for glucose readings and meals."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class GlucoseStatus(StrEnum):
    """Clinical status assigned to a reading by the upstream service."""

    NORMAL = "NORMAL"
    HIGH = "HIGH"
    LOW = "LOW"
    CRITICALLY_HIGH = "CRITICALLY_HIGH"
    CRITICALLY_LOW = "CRITICALLY_LOW"


class ReadingType(StrEnum):
    """Context in which a reading was taken."""

    FASTING = "FASTING"
    BEFORE_MEAL = "BEFORE_MEAL"
    AFTER_MEAL = "AFTER_MEAL"
    BEDTIME = "BEDTIME"
    RANDOM = "RANDOM"
    OTHER = "OTHER"


class MealType(StrEnum):
    """Meal slot reported with a meal."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    SNACK = "SNACK"
    OTHER = "OTHER"


@dataclass(frozen=True)
class GlucoseObservation:
    """A single glucose reading in mg/dL."""

    value: float
    taken_at: datetime
    status: GlucoseStatus | None = GlucoseStatus.NORMAL
    reading_type: ReadingType = ReadingType.OTHER
    note: str | None = None
    id: UUID | None = None
    in_range: bool | None = None


@dataclass(frozen=True)
class MealEvent:
    """A logged meal with its carbohydrate load."""

    carbs_grams: float
    consumed_at: datetime
    name: str
    id: UUID | None = None
    meal_type: MealType | None = None
    calories: float | None = None
    protein_grams: float | None = None
    fat_grams: float | None = None
    notes: str | None = None
