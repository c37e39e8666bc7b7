"""Berechnungs-Engine: Notenstand, Zielprojektion, Stundenplan-Zeitlogik, Wochenkennzahlen."""

from .errors import InvalidInputError
from .grade_calculator import (
    GradeComputation,
    compute,
    finalize,
    letter_grade,
    projected_grade,
    recompute,
    recompute_record,
    weighted_gpa,
)
from .target_projection import (
    SimulationResult,
    TargetProjection,
    required_average,
    simulate,
    target_cards,
)
from .schedule_temporal import (
    NextClass,
    current_class,
    has_conflict,
    next_class,
)
from .weekly_metrics import WeeklySummary, summarize

__all__ = [
    "InvalidInputError",
    "GradeComputation",
    "compute",
    "finalize",
    "letter_grade",
    "projected_grade",
    "recompute",
    "recompute_record",
    "weighted_gpa",
    "SimulationResult",
    "TargetProjection",
    "required_average",
    "simulate",
    "target_cards",
    "NextClass",
    "current_class",
    "has_conflict",
    "next_class",
    "WeeklySummary",
    "summarize",
]
