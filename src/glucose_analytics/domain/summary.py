"""Domain models for the upstream dashboard summary."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class TimeInRangeBreakdown:
    """Percentage of readings per range category."""

    normal: float = 0.0
    high: float = 0.0
    low: float = 0.0
    critical: float = 0.0


@dataclass(frozen=True)
class DashboardSummary:
    """Precomputed dashboard data, passed through unmodified."""

    health_score: int | None = None
    health_score_description: str | None = None
    average_glucose: float | None = None
    time_in_range: TimeInRangeBreakdown = field(default_factory=TimeInRangeBreakdown)
    insights: dict[str, str] = field(default_factory=dict)
    recommendations: dict[str, str] = field(default_factory=dict)
    generated_at: datetime | None = None
