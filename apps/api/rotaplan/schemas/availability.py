from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, time
from typing import Optional

from rotaplan.scheduling.patterns import Weekday

class AvailabilityDay(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    weekday: Weekday
    is_available: bool = True
    available_start: Optional[time] = time(9, 0)
    available_end: Optional[time] = time(17, 0)
    max_hours: Optional[float] = Field(default=8, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _window_order(self):
        if self.available_start and self.available_end and self.available_end <= self.available_start:
            raise ValueError("available_end must be after available_start")
        return self

class AvailabilityReplace(BaseModel):
    days: list[AvailabilityDay]
    effective_date: Optional[date] = None
