"""Notenstand eines Kurses und Notenbuch eines Semesters (Pydantic v2)."""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config.defaults import MAX_TOTAL_WEIGHT
from models.enums import GradeStatus
from models.evaluation import Evaluation


class FinalGrade(BaseModel):
    """Abschlussnote eines Kurses inkl. Buchstabennote und Bestanden-Status."""

    numeric_grade: float
    letter_grade: str
    is_approved: bool
    status: GradeStatus
    gpa_points: float


class Absence(BaseModel):
    """Eine versäumte Sitzung; entschuldigte Fehlzeiten zählen als anwesend."""

    date: datetime
    reason: Optional[str] = Field(None, max_length=200)
    excused: bool = False


class Attendance(BaseModel):
    """Anwesenheit in einem Kurs (gezählte Sitzungen und Fehlzeiten)."""

    total_classes: int = Field(0, ge=0)
    attended_classes: int = Field(0, ge=0)
    absences: list[Absence] = []

    @model_validator(mode='after')
    def _check_counts(self):
        if self.attended_classes > self.total_classes:
            raise ValueError(
                f"Anwesende Sitzungen ({self.attended_classes}) übersteigen "
                f"die Gesamtzahl ({self.total_classes})"
            )
        return self


class CourseGradeState(BaseModel):
    """Abgeleiteter Notenstand eines Kurses.

    Wird bei jeder Score-Änderung vollständig neu berechnet (siehe
    `engine.grade_calculator.recompute`) und nie teilweise aktualisiert.
    """

    evaluations: list[Evaluation]
    current_grade: float         # 0.0–5.0, auf 2 Stellen gerundet
    completed_weight: float      # Summe der Gewichte bewerteter Leistungen
    remaining_weight: float      # total_weight − completed_weight
    total_weight: float          # Summe aller definierten Gewichte (≤ 100)
    completion_percentage: int   # Anteil bewerteter Leistungen (Anzahl)
    # Informativ: offene Leistungen mit dem aktuellen Schnitt angesetzt.
    # Entspricht bei Gewichtssumme 100 dem current_grade.
    projected_grade: float
    attendance_percentage: int = 0  # 0–100, 0 ohne gezählte Sitzungen
    final_grade: Optional[FinalGrade] = None

    @property
    def graded_evaluations(self) -> list[Evaluation]:
        return [e for e in self.evaluations if e.is_graded]

    @property
    def pending_evaluations(self) -> list[Evaluation]:
        return [e for e in self.evaluations if not e.is_graded]


class CourseGradeRecord(BaseModel):
    """Gespeicherter Notensatz: ein Studierender, ein Kurs, ein Semester."""

    course_code: str = Field(max_length=15)
    course_name: str = Field(max_length=200)
    course_nrc: Optional[str] = None
    instructor: str = ""
    credits: int = Field(ge=1, le=10)
    evaluations: list[Evaluation] = []
    attendance: Attendance = Field(default_factory=Attendance)
    # Obergrenze hängt von grading.scale_max ab und wird in finalize() geprüft
    final_numeric_grade: Optional[float] = Field(None, ge=0.0)

    @field_validator("course_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode='after')
    def _check_weights(self):
        total = sum(e.weight for e in self.evaluations)
        if total > MAX_TOTAL_WEIGHT + 1e-9:
            raise ValueError(
                f"Kurs {self.course_code}: Gewichtssumme {total:g}% "
                f"überschreitet {MAX_TOTAL_WEIGHT:g}%"
            )
        ids = [e.id for e in self.evaluations]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Kurs {self.course_code}: doppelte Bewertungs-IDs")
        return self


_PERIOD_RE = re.compile(r"^\d{4}-[12]$")


class TermGrades(BaseModel):
    """Notenbuch eines Studierenden für ein Semester."""

    student_id: str
    period_id: str           # "2024-1" / "2024-2"
    courses: list[CourseGradeRecord] = []

    @field_validator("period_id")
    @classmethod
    def _check_period(cls, v: str) -> str:
        if not _PERIOD_RE.match(v):
            raise ValueError(
                f"Semester '{v}' muss das Format JJJJ-1 oder JJJJ-2 haben")
        return v

    def get_course(self, course_code: str) -> Optional[CourseGradeRecord]:
        code = course_code.strip().upper()
        return next((c for c in self.courses if c.course_code == code), None)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert das Notenbuch als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "TermGrades":
        """Lädt ein Notenbuch aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
