"""In-game clock."""

from pydantic import BaseModel, Field

MINUTES_PER_DAY = 1440


class WorldTime(BaseModel):
    """A point in game time. The adventure starts on day 1 at 08:00."""

    day: int = Field(1, ge=1)
    hour: int = Field(8, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)

    @property
    def total_minutes(self) -> int:
        return self.day * MINUTES_PER_DAY + self.hour * 60 + self.minute
