"""Datenmodell für einen Zeitslot im Wochenraster (Pydantic v2)."""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def to_minutes(hhmm: str) -> int:
    """Wandelt "HH:MM" in Minuten seit Mitternacht um."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_time(value: str) -> str:
    """Prüft eine 24h-Uhrzeit und gibt sie nullgepolstert zurück ("8:05" → "08:05")."""
    m = _TIME_RE.match(value.strip())
    if not m:
        raise ValueError(f"Uhrzeit '{value}' muss im Format HH:MM (24h) vorliegen")
    return f"{int(m.group(1)):02d}:{m.group(2)}"


class Location(BaseModel):
    """Raumangabe eines Zeitslots."""

    building_id: str
    room: str = Field(max_length=20)
    full_location: str = Field("", max_length=100)

    def __str__(self) -> str:
        return self.full_location or f"{self.building_id}-{self.room}"


class TimeSlot(BaseModel):
    """Ein Unterrichtsblock innerhalb eines Tages.

    Uhrzeiten werden nullgepolstert gespeichert, damit ein Stringvergleich
    der zeitlichen Reihenfolge entspricht.
    """

    start_time: str   # "HH:MM"
    end_time: str     # "HH:MM", strikt nach start_time
    location: Optional[Location] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_time(v)

    @model_validator(mode='after')
    def _check_order(self):
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Endzeit {self.end_time} muss nach Startzeit {self.start_time} liegen"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end_time)

    @property
    def start_hour(self) -> int:
        return int(self.start_time[:2])

    @property
    def duration_hours(self) -> float:
        """Dauer in Stunden."""
        return (self.end_minutes - self.start_minutes) / 60

    def overlaps(self, other: "TimeSlot") -> bool:
        """Halboffene Überschneidung; aneinanderstoßende Slots kollidieren nicht."""
        return self.start_time < other.end_time and self.end_time > other.start_time

    def __str__(self) -> str:
        return f"{self.start_time}–{self.end_time}"
