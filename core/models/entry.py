from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class DailyEntry(BaseModel):
    id: str
    date: dt.date
    calories: float
    gym_hours: float = 0
    weight: float | None = None      # None → not measured that day
    body_fat: float | None = None

    @property
    def has_measurement(self) -> bool:
        return self.weight is not None or self.body_fat is not None
