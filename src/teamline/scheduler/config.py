"""Configuration classes for the timeline calculator."""

from enum import Enum

from pydantic import BaseModel, Field


class MultiDeveloperRule(str, Enum):
    """How the velocities of several assigned developers combine for one item."""

    SUM = "sum"  # Every developer contributes their (split) velocity
    PRIMARY = "primary"  # Only the first assigned developer drives completion


class TimelineConfig(BaseModel):
    """Configuration for the concurrency-aware timeline calculator."""

    # Relaxation loop cap; the last computed state is returned when reached
    max_iterations: int = Field(default=10, ge=1)

    # Velocity conversion: weekly_hours / working_days_per_week / hours_per_day
    hours_per_day: float = Field(default=8.0, gt=0)
    working_days_per_week: int = Field(default=5, ge=1, le=7)

    # Day offsets skip Saturday/Sunday when enabled
    skip_weekends: bool = True

    multi_developer_rule: MultiDeveloperRule = MultiDeveloperRule.SUM

    def daily_velocity(self, weekly_hours: float) -> float:
        """Convert a weekly capacity in hours to man-days per working day."""
        if weekly_hours <= 0:
            return 0.0
        return weekly_hours / self.working_days_per_week / self.hours_per_day
