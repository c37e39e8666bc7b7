"""Zielnoten-Projektion: Welcher Schnitt wird auf dem offenen Gewicht benötigt?

Grundlage für die festen Zielkarten (3.0 / 4.0 / 5.0) und den interaktiven
Simulator, der hypothetische Scores für offene Bewertungen einsetzt.
"""

import logging
from typing import Mapping, Optional, Sequence

from pydantic import BaseModel

from config.defaults import default_grading
from config.schema import GradingConfig
from engine.errors import InvalidInputError
from engine.grade_calculator import GradeComputation, compute, letter_grade
from models.enums import TargetStatus
from models.evaluation import Evaluation

logger = logging.getLogger(__name__)


class TargetProjection(BaseModel):
    """Benötigter Schnitt für eine Zielnote."""

    target: float
    needed_average: float   # auf 0..scale_max begrenzt
    status: TargetStatus


class SimulationResult(BaseModel):
    """Ergebnis eines Was-wäre-wenn-Durchlaufs."""

    computation: GradeComputation      # Stand mit eingesetzten Scores
    simulated_grade: float             # = computation.current_grade
    letter_grade: str
    is_approved: bool
    is_complete: bool                  # kein offenes Gewicht mehr
    projections: list[TargetProjection]


def required_average(
    current_grade: float,
    completed_weight: float,
    remaining_weight: float,
    target: float,
    scale_max: float = 5.0,
) -> TargetProjection:
    """Benötigter Schnitt auf dem offenen Gewicht, um `target` zu erreichen.

    Gerechnet in Note·Gewicht-Einheiten:
      banked = current · completed
      needed = (target · (completed + remaining) − banked) / remaining

    Ungeklemmt ≤ 0 → achieved, > scale_max → impossible, sonst needed.
    Ohne offenes Gewicht entscheidet allein der aktuelle Schnitt.
    """
    if remaining_weight <= 0:
        status = TargetStatus.ACHIEVED if current_grade >= target else TargetStatus.IMPOSSIBLE
        return TargetProjection(target=target, needed_average=0.0, status=status)

    banked_points = current_grade * completed_weight
    target_points = target * (completed_weight + remaining_weight)
    needed = (target_points - banked_points) / remaining_weight

    if needed <= 0:
        status = TargetStatus.ACHIEVED
    elif needed > scale_max:
        status = TargetStatus.IMPOSSIBLE
    else:
        status = TargetStatus.NEEDED

    return TargetProjection(
        target=target,
        needed_average=min(scale_max, max(0.0, needed)),
        status=status,
    )


def target_cards(
    computation: GradeComputation,
    targets: Optional[Sequence[float]] = None,
    grading: Optional[GradingConfig] = None,
) -> list[TargetProjection]:
    """Projektionen für mehrere Zielnoten (Standard: aus der Notenskala)."""
    grading = grading or default_grading()
    if targets is None:
        targets = grading.standard_targets
    return [
        required_average(
            computation.current_grade,
            computation.completed_weight,
            computation.remaining_weight,
            t,
            scale_max=grading.scale_max,
        )
        for t in targets
    ]


def apply_hypothetical_scores(
    evaluations: Sequence[Evaluation],
    hypothetical_scores: Mapping[str, float],
) -> list[Evaluation]:
    """Setzt Roh-Scores für offene Bewertungen ein (neue Objekte, Eingabe bleibt unverändert)."""
    by_id = {e.id: e for e in evaluations}
    for eval_id, score in hypothetical_scores.items():
        evaluation = by_id.get(eval_id)
        if evaluation is None:
            raise InvalidInputError(f"Unbekannte Bewertung '{eval_id}'")
        if evaluation.is_graded:
            raise InvalidInputError(
                f"Bewertung '{eval_id}' ist bereits bewertet und kann nicht simuliert werden"
            )
        if not 0.0 <= score <= evaluation.max_score:
            raise InvalidInputError(
                f"Simulierter Score {score:g} für '{eval_id}' liegt außerhalb "
                f"von 0–{evaluation.max_score:g}"
            )

    result = []
    for e in evaluations:
        if e.id in hypothetical_scores:
            e = e.model_copy(update={
                "score": float(hypothetical_scores[e.id]),
                "is_submitted": True,
            })
        result.append(e)
    return result


def simulate(
    evaluations: Sequence[Evaluation],
    hypothetical_scores: Mapping[str, float],
    targets: Optional[Sequence[float]] = None,
    grading: Optional[GradingConfig] = None,
) -> SimulationResult:
    """Was-wäre-wenn: hypothetische Scores einsetzen und neu berechnen."""
    grading = grading or default_grading()
    simulated = apply_hypothetical_scores(evaluations, hypothetical_scores)
    computation = compute(simulated, grading)
    logger.debug(
        f"simulate: {len(hypothetical_scores)} Scores eingesetzt → "
        f"{computation.current_grade:.2f}"
    )
    return SimulationResult(
        computation=computation,
        simulated_grade=computation.current_grade,
        letter_grade=letter_grade(computation.current_grade, grading),
        is_approved=computation.current_grade >= grading.passing_grade,
        is_complete=computation.remaining_weight <= 0,
        projections=target_cards(computation, targets, grading),
    )
