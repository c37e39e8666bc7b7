"""Gewichtete Notenberechnung auf der Skala 0–5.

Reine Funktionen ohne Zustand: Aus einer Liste von Bewertungen werden
aktueller Schnitt, bewertetes/offenes Gewicht und Fortschritt abgeleitet;
aus einer Abschlussnote Buchstabennote und Bestanden-Status.
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from config.defaults import MAX_TOTAL_WEIGHT, default_grading
from config.schema import GradingConfig
from engine.errors import InvalidInputError
from models.course_grade import (
    Absence,
    Attendance,
    CourseGradeRecord,
    CourseGradeState,
    FinalGrade,
)
from models.enums import GradeStatus
from models.evaluation import Evaluation

logger = logging.getLogger(__name__)

# Toleranz für Float-Summen wie 33.3 + 33.3 + 33.4
_WEIGHT_EPSILON = 1e-9


class GradeComputation(BaseModel):
    """Ergebnis von `compute()`."""

    current_grade: float
    completed_weight: float
    remaining_weight: float
    total_weight: float
    completion_percentage: int


def round_half_up(value: float, places: int = 2) -> float:
    """Kaufmännisches Runden (0.125 → 0.13), unabhängig von Float-Artefakten."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def check_total_weight(evaluations: Iterable[Evaluation]) -> float:
    """Summe aller Gewichte; > 100 % wird abgelehnt statt normalisiert."""
    total = sum(e.weight for e in evaluations)
    if total > MAX_TOTAL_WEIGHT + _WEIGHT_EPSILON:
        raise InvalidInputError(
            f"Gewichtssumme {total:g}% überschreitet {MAX_TOTAL_WEIGHT:g}%"
        )
    return total


def compute(
    evaluations: Sequence[Evaluation],
    grading: Optional[GradingConfig] = None,
) -> GradeComputation:
    """Berechnet den aktuellen gewichteten Schnitt.

    Nur bewertete Leistungen (`is_submitted` und Score vorhanden) zählen.
    Jeder Score wird auf 0..scale_max normiert und mit seinem Gewicht
    gewichtet; ohne bewertete Leistungen ist der Schnitt 0.
    """
    grading = grading or default_grading()
    total_weight = check_total_weight(evaluations)

    graded = [e for e in evaluations if e.is_graded]
    completed_weight = sum(e.weight for e in graded)
    if completed_weight > 0:
        weighted_sum = sum(e.normalized_score(grading.scale_max) * e.weight for e in graded)
        current = round_half_up(weighted_sum / completed_weight, 2)
    else:
        current = 0.0

    if evaluations:
        completion = int(round_half_up(len(graded) / len(evaluations) * 100, 0))
    else:
        completion = 0

    logger.debug(
        f"compute: {len(graded)}/{len(evaluations)} bewertet, "
        f"Gewicht {completed_weight:g}/{total_weight:g} → {current:.2f}"
    )
    return GradeComputation(
        current_grade=current,
        completed_weight=completed_weight,
        remaining_weight=total_weight - completed_weight,
        total_weight=total_weight,
        completion_percentage=completion,
    )


def letter_grade(numeric_grade: float, grading: Optional[GradingConfig] = None) -> str:
    """Buchstabennote; geschlossene Untergrenzen, höchstes Band gewinnt."""
    grading = grading or default_grading()
    for band in grading.letter_bands:
        if numeric_grade >= band.min_grade:
            return band.letter
    return grading.fallback_letter


def finalize(numeric_grade: float, grading: Optional[GradingConfig] = None) -> FinalGrade:
    """Abschlussnote festschreiben: Buchstabe, bestanden (≥ passing_grade), Status."""
    grading = grading or default_grading()
    if not 0.0 <= numeric_grade <= grading.scale_max:
        raise InvalidInputError(
            f"Abschlussnote {numeric_grade} liegt außerhalb von 0–{grading.scale_max:g}"
        )
    approved = numeric_grade >= grading.passing_grade
    return FinalGrade(
        numeric_grade=numeric_grade,
        letter_grade=letter_grade(numeric_grade, grading),
        is_approved=approved,
        status=GradeStatus.COMPLETED if approved else GradeStatus.FAILED,
        gpa_points=numeric_grade,
    )


def projected_grade(
    evaluations: Sequence[Evaluation],
    current_grade: float,
    grading: Optional[GradingConfig] = None,
) -> float:
    """Projektion, bei der jede offene Leistung mit dem aktuellen Schnitt zählt.

    Nur informativ: Bei einer Gewichtssumme von 100 ergibt sich rechnerisch
    wieder `current_grade`. Für "was brauche ich noch" siehe
    `engine.target_projection.required_average`.
    """
    grading = grading or default_grading()
    total_weight = sum(e.weight for e in evaluations)
    if total_weight <= 0:
        return 0.0
    projected_sum = 0.0
    for e in evaluations:
        if e.is_graded:
            projected_sum += e.normalized_score(grading.scale_max) * e.weight
        else:
            projected_sum += current_grade * e.weight
    return round_half_up(projected_sum / total_weight, 2)


def attendance_percentage(attendance: Optional[Attendance]) -> int:
    """Anwesenheitsquote in Prozent, kaufmännisch gerundet; 0 ohne Sitzungen."""
    if attendance is None or attendance.total_classes == 0:
        return 0
    ratio = attendance.attended_classes / attendance.total_classes * 100
    return int(round_half_up(ratio, 0))


def add_absence(
    attendance: Attendance,
    date: datetime,
    reason: Optional[str] = None,
    excused: bool = False,
) -> Attendance:
    """Trägt eine Fehlzeit ein und gibt die neue Anwesenheit zurück.

    Jede Fehlzeit erhöht die Zahl der Sitzungen. Entschuldigte Fehlzeiten
    zählen als anwesend, nur unentschuldigte senken die Quote. Die
    übergebene Anwesenheit bleibt unverändert.
    """
    absence = Absence(date=date, reason=reason, excused=excused)
    return Attendance(
        total_classes=attendance.total_classes + 1,
        attended_classes=attendance.attended_classes + (1 if excused else 0),
        absences=[*attendance.absences, absence],
    )


def recompute(
    evaluations: Sequence[Evaluation],
    final_numeric_grade: Optional[float] = None,
    grading: Optional[GradingConfig] = None,
    attendance: Optional[Attendance] = None,
) -> CourseGradeState:
    """Vollständige Neuberechnung des Kurs-Notenstands.

    Wird vom Aufrufer nach jeder Änderung an einer Bewertung oder an der
    Anwesenheit aufgerufen.
    """
    grading = grading or default_grading()
    result = compute(evaluations, grading)
    final = finalize(final_numeric_grade, grading) if final_numeric_grade is not None else None
    return CourseGradeState(
        evaluations=list(evaluations),
        current_grade=result.current_grade,
        completed_weight=result.completed_weight,
        remaining_weight=result.remaining_weight,
        total_weight=result.total_weight,
        completion_percentage=result.completion_percentage,
        projected_grade=projected_grade(evaluations, result.current_grade, grading),
        attendance_percentage=attendance_percentage(attendance),
        final_grade=final,
    )


def recompute_record(
    record: CourseGradeRecord,
    grading: Optional[GradingConfig] = None,
) -> CourseGradeState:
    """`recompute()` für einen gespeicherten Notensatz."""
    return recompute(record.evaluations, record.final_numeric_grade, grading,
                     record.attendance)


def weighted_gpa(records: Iterable[CourseGradeRecord]) -> float:
    """Credit-gewichteter Schnitt aller Kurse mit Abschlussnote.

    Kurse ohne Abschlussnote werden ignoriert; ohne Abschlussnoten ist das
    Ergebnis 0.
    """
    total_points = 0.0
    total_credits = 0
    for r in records:
        if r.final_numeric_grade is None:
            continue
        total_points += r.final_numeric_grade * r.credits
        total_credits += r.credits
    if total_credits == 0:
        return 0.0
    return round_half_up(total_points / total_credits, 2)
