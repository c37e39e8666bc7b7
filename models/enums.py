"""Aufzählungstypen für Noten- und Stundenplandaten."""

from datetime import date
from enum import Enum


class Weekday(str, Enum):
    """Wochentag in kanonischer Reihenfolge (Montag zuerst).

    Die Enum-Reihenfolge ist die Wochenreihenfolge; Umrechnungen aus
    `date.weekday()` passieren ausschließlich in `from_date`.
    """

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def ordered(cls) -> list["Weekday"]:
        return list(cls)

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        """Wochentag eines Datums (funktioniert auch mit datetime)."""
        return cls.ordered()[d.weekday()]

    @property
    def index(self) -> int:
        """0=Montag … 6=Sonntag."""
        return Weekday.ordered().index(self)

    def shifted(self, days: int) -> "Weekday":
        """Wochentag `days` Tage später (mit Umbruch nach Sonntag)."""
        order = Weekday.ordered()
        return order[(self.index + days) % len(order)]


class EvaluationType(str, Enum):
    EXAM = "exam"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    PRESENTATION = "presentation"
    PARTICIPATION = "participation"
    LABORATORY = "laboratory"
    HOMEWORK = "homework"
    OTHER = "other"


class GradeStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class TargetStatus(str, Enum):
    """Einordnung einer Zielnote gegenüber dem aktuellen Stand."""

    ACHIEVED = "achieved"      # auch mit 0 auf dem Rest erreicht
    NEEDED = "needed"          # erreichbar, erfordert Ø zwischen 0 und Skalenmaximum
    IMPOSSIBLE = "impossible"  # selbst mit Höchstnote auf dem Rest nicht erreichbar


class ClassStatus(str, Enum):
    CURRENT = "current"
    UPCOMING = "upcoming"
