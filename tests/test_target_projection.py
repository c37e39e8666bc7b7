"""Tests für die Zielnoten-Projektion und den Notensimulator."""

import pytest

from engine.errors import InvalidInputError
from engine.grade_calculator import compute
from engine.target_projection import (
    apply_hypothetical_scores,
    required_average,
    simulate,
    target_cards,
)
from models.enums import TargetStatus
from models.evaluation import Evaluation


def _ev(eval_id: str, weight: float, score=None, max_score: float = 5.0) -> Evaluation:
    return Evaluation(id=eval_id, name=eval_id, weight=weight,
                      max_score=max_score, score=score)


# ─── REQUIRED_AVERAGE ─────────────────────────────────────────────────────────

class TestRequiredAverage:
    def test_worked_example(self):
        """Stand 4.5 auf 30 %, Ziel 3.0 → (300 − 135) / 70 ≈ 2.357, needed."""
        p = required_average(4.5, 30, 70, 3.0)
        assert p.needed_average == pytest.approx(165 / 70)
        assert p.status == TargetStatus.NEEDED

    def test_from_evaluations(self):
        """90/100 bei 30 % und offene 70 % ergeben den Stand 4.5."""
        comp = compute([
            _ev("a", 30, 90, max_score=100),
            Evaluation(id="b", name="b", weight=70, max_score=5, is_submitted=False),
        ])
        assert comp.completed_weight == pytest.approx(30)
        assert comp.current_grade == pytest.approx(4.5)

    def test_achieved(self):
        """Bereits gesicherte Punkte reichen → achieved, benötigt 0."""
        p = required_average(5.0, 80, 20, 4.0)
        assert p.status == TargetStatus.ACHIEVED
        assert p.needed_average == 0.0

    def test_impossible_is_clamped(self):
        """Benötigt > 5 → impossible, Wert auf 5 begrenzt."""
        p = required_average(1.0, 80, 20, 4.0)
        assert p.status == TargetStatus.IMPOSSIBLE
        assert p.needed_average == pytest.approx(5.0)

    def test_exactly_scale_max_is_needed(self):
        """Genau 5.0 benötigt ist noch erreichbar."""
        # (5 · 100 − 5 · 50) / 50 = 5
        p = required_average(5.0, 50, 50, 5.0)
        assert p.status == TargetStatus.NEEDED
        assert p.needed_average == pytest.approx(5.0)

    def test_no_remaining_weight_achieved(self):
        """Ohne offenes Gewicht entscheidet der aktuelle Schnitt."""
        assert required_average(3.2, 100, 0, 3.0).status == TargetStatus.ACHIEVED
        assert required_average(2.8, 100, 0, 3.0).status == TargetStatus.IMPOSSIBLE

    def test_nothing_graded_yet(self):
        """Nichts bewertet → benötigter Schnitt ist die Zielnote."""
        p = required_average(0.0, 0, 100, 3.0)
        assert p.needed_average == pytest.approx(3.0)
        assert p.status == TargetStatus.NEEDED

    def test_monotonic_in_target(self):
        """Höhere Zielnote verlangt nie weniger."""
        values = [required_average(3.4, 45, 55, t).needed_average
                  for t in (0.0, 1.0, 2.0, 3.0, 3.5, 4.0, 4.5, 5.0)]
        assert values == sorted(values)

    def test_needed_always_within_scale(self):
        for target in (0.0, 2.5, 5.0):
            for current in (0.0, 2.5, 5.0):
                p = required_average(current, 40, 60, target)
                assert 0.0 <= p.needed_average <= 5.0


class TestTargetCards:
    def test_default_targets(self):
        """Standard-Zielkarten 3.0 / 4.0 / 5.0 in dieser Reihenfolge."""
        comp = compute([_ev("a", 50, 4.0), _ev("b", 50)])
        cards = target_cards(comp)
        assert [c.target for c in cards] == [3.0, 4.0, 5.0]
        assert cards[0].needed_average == pytest.approx(2.0)
        assert cards[1].needed_average == pytest.approx(4.0)
        assert cards[2].status == TargetStatus.IMPOSSIBLE

    def test_custom_targets(self):
        comp = compute([_ev("a", 50, 4.0), _ev("b", 50)])
        cards = target_cards(comp, [3.5])
        assert len(cards) == 1
        assert cards[0].needed_average == pytest.approx(3.0)


# ─── SIMULATOR ────────────────────────────────────────────────────────────────

class TestSimulate:
    @pytest.fixture
    def evaluations(self) -> list[Evaluation]:
        return [
            _ev("p1", 30, 4.0),
            _ev("p2", 30, 70, max_score=100),
            _ev("final", 40, max_score=100),
        ]

    def test_simulated_grade(self, evaluations):
        """Finale 80/100 → (4.0·30 + 3.5·30 + 4.0·40) / 100 = 3.85."""
        result = simulate(evaluations, {"final": 80})
        assert result.simulated_grade == pytest.approx(3.85)
        assert result.letter_grade == "B+"
        assert result.is_approved is True
        assert result.is_complete is True

    def test_partial_simulation_keeps_projection(self, evaluations):
        """Ohne eingesetzte Scores bleibt offenes Gewicht für die Zielkarten."""
        result = simulate(evaluations, {})
        assert result.is_complete is False
        assert result.computation.remaining_weight == pytest.approx(40)
        assert len(result.projections) == 3

    def test_input_not_mutated(self, evaluations):
        simulate(evaluations, {"final": 50})
        assert evaluations[2].score is None
        assert evaluations[2].is_graded is False

    def test_unknown_id_rejected(self, evaluations):
        with pytest.raises(InvalidInputError):
            simulate(evaluations, {"nope": 3.0})

    def test_graded_id_rejected(self, evaluations):
        """Bereits bewertete Leistungen können nicht simuliert werden."""
        with pytest.raises(InvalidInputError):
            simulate(evaluations, {"p1": 5.0})

    def test_score_above_max_rejected(self, evaluations):
        with pytest.raises(InvalidInputError):
            simulate(evaluations, {"final": 101})

    def test_negative_score_rejected(self, evaluations):
        with pytest.raises(InvalidInputError):
            apply_hypothetical_scores(evaluations, {"final": -1})
