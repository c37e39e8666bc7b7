"""Datenmodell für eine einzelne Bewertung innerhalb eines Kurses (Pydantic v2)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.enums import EvaluationType


class Evaluation(BaseModel):
    """Eine bewertbare Leistung (Prüfung, Quiz, Abgabe, ...).

    `weight` ist in Prozentpunkten angegeben, `score` auf der eigenen Skala
    der Bewertung (0..max_score). Ohne explizites `is_submitted` gilt eine
    Bewertung als abgegeben, sobald ein Score vorliegt.
    """

    id: str
    name: str = Field(max_length=100)
    type: EvaluationType = EvaluationType.OTHER
    weight: float = Field(ge=0.0, le=100.0)        # Prozentpunkte
    max_score: float = Field(gt=0.0)                # Skala des Roh-Scores
    score: Optional[float] = Field(None, ge=0.0)    # nur wenn bewertet
    is_submitted: Optional[bool] = None
    date: Optional[datetime] = None
    feedback: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode='after')
    def _check_score(self):
        if self.score is not None and self.score > self.max_score:
            raise ValueError(
                f"Bewertung '{self.id}': Score {self.score} überschreitet "
                f"Maximalpunktzahl {self.max_score}"
            )
        if self.is_submitted is None:
            object.__setattr__(self, "is_submitted", self.score is not None)
        return self

    @property
    def is_graded(self) -> bool:
        """True wenn abgegeben und bewertet."""
        return bool(self.is_submitted) and self.score is not None

    def normalized_score(self, scale_max: float = 5.0) -> float:
        """Score auf die Notenskala 0..scale_max umgerechnet."""
        if self.score is None:
            raise ValueError(f"Bewertung '{self.id}' hat noch keinen Score")
        return (self.score / self.max_score) * scale_max
