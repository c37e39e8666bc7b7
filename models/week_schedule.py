"""WeekSchedule: Wochenstundenplan eines Studierenden für ein Semester (Pydantic v2)."""

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from models.class_block import ClassBlock
from models.enums import Weekday

_PERIOD_RE = re.compile(r"^\d{4}-[12]$")


class WeekSchedule(BaseModel):
    """Alle Kurse eines Studierenden in einem Semester.

    Überschneidungsfreiheit wird beim Speichern NICHT erzwungen; sie wird bei
    Bedarf über `engine.schedule_temporal.has_conflict` bzw. den
    `ScheduleValidator` geprüft.
    """

    student_id: str
    period_id: str
    classes: list[ClassBlock] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None

    @field_validator("period_id")
    @classmethod
    def _check_period(cls, v: str) -> str:
        if not _PERIOD_RE.match(v):
            raise ValueError(
                f"Semester '{v}' muss das Format JJJJ-1 oder JJJJ-2 haben")
        return v

    # ─── Abfragen ───

    def classes_on(self, day: Weekday) -> list[ClassBlock]:
        """Alle Kurse, die an diesem Wochentag stattfinden (Eingabereihenfolge)."""
        return [c for c in self.classes if c.meets_on(day)]

    def active_on(self, d: Union[date, datetime]) -> "WeekSchedule":
        """Kopie, die nur die an diesem Datum gültigen Kurse enthält."""
        return self.model_copy(update={
            "classes": [c for c in self.classes if c.is_active_on(d)],
        })

    def get_class(self, course_nrc: str) -> Optional[ClassBlock]:
        return next((c for c in self.classes if c.course_nrc == course_nrc), None)

    def summary(self) -> str:
        """Kurze Übersicht über den Stundenplan."""
        total_credits = sum(c.credits for c in self.classes)
        used_days = [d for d in Weekday.ordered() if self.classes_on(d)]
        lines = [
            f"Studierende/r: {self.student_id}",
            f"Semester: {self.period_id}",
            f"Kurse: {len(self.classes)} ({total_credits} Credits)",
            f"Unterrichtstage: {', '.join(d.value for d in used_days)}" if used_days else "",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den Stundenplan als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "WeekSchedule":
        """Lädt einen Stundenplan aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
