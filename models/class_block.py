"""Datenmodell für einen wöchentlich wiederkehrenden Kurstermin (Pydantic v2)."""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from models.enums import Weekday
from models.timeslot import TimeSlot


class DateRange(BaseModel):
    """Gültigkeitszeitraum eines Wochenmusters (Semesterfenster)."""

    start: datetime
    end: datetime

    @model_validator(mode='after')
    def _check_order(self):
        if self.end <= self.start:
            raise ValueError(
                f"Enddatum {self.end.isoformat()} muss nach Startdatum "
                f"{self.start.isoformat()} liegen"
            )
        return self

    def contains(self, d: Union[date, datetime]) -> bool:
        """True wenn das Kalenderdatum innerhalb des Zeitraums liegt (inklusive)."""
        day = d.date() if isinstance(d, datetime) else d
        return self.start.date() <= day <= self.end.date()


class ClassBlock(BaseModel):
    """Ein Kurs mit seinem Wochenmuster: Tage × Zeitslots.

    Jeder Zeitslot findet an jedem der angegebenen Tage statt.
    """

    course_nrc: str = Field(max_length=10)
    course_code: str = Field(max_length=15)
    course_name: str = Field(max_length=200)
    instructor: str = ""
    credits: int = Field(gt=0)
    days: list[Weekday]
    time_slots: list[TimeSlot]
    type: str = "theory"          # theory / lab / practice / seminar
    date_range: Optional[DateRange] = None   # None = ganzes Semester

    @field_validator("days")
    @classmethod
    def _normalize_days(cls, v: list[Weekday]) -> list[Weekday]:
        if not v:
            raise ValueError("Mindestens ein Wochentag erforderlich")
        # Menge in kanonischer Reihenfolge
        return [d for d in Weekday.ordered() if d in set(v)]

    @field_validator("time_slots")
    @classmethod
    def _require_slots(cls, v: list[TimeSlot]) -> list[TimeSlot]:
        if not v:
            raise ValueError("Mindestens ein Zeitslot erforderlich")
        return v

    def meets_on(self, day: Weekday) -> bool:
        return day in self.days

    def is_active_on(self, d: Union[date, datetime]) -> bool:
        """True wenn der Kurs an diesem Datum laut date_range gilt."""
        return self.date_range is None or self.date_range.contains(d)

    @property
    def earliest_slot(self) -> TimeSlot:
        return min(self.time_slots, key=lambda s: s.start_time)

    @property
    def label(self) -> str:
        return f"{self.course_code} ({self.course_nrc})"
