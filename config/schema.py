from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional


# ─── NOTENSKALA ───

class LetterBand(BaseModel):
    """Eine Buchstabennote mit ihrer (geschlossenen) Untergrenze."""
    # Mindestnote, ab der die Buchstabennote gilt (z.B. 4.6 → "A+")
    min_grade: float = Field(ge=0.0)
    # Buchstabennote, z.B. "A+", "B", "F"
    letter: str


class GradingConfig(BaseModel):
    """Notenskala, Bestehensgrenze und Buchstabennoten.

    Bänder werden von oben nach unten geprüft; das höchste zutreffende Band
    gewinnt. Noten unter dem niedrigsten Band erhalten `fallback_letter`.
    """
    # Obergrenze der Notenskala (Untergrenze ist immer 0)
    scale_max: float = Field(5.0, gt=0.0,
        description="Obergrenze der Notenskala")
    # Ab dieser Note gilt ein Kurs als bestanden
    passing_grade: float = Field(3.0, ge=0.0,
        description="Bestehensgrenze")
    # Buchstabennoten, absteigend sortiert
    letter_bands: list[LetterBand] = Field(
        description="Buchstabennoten (absteigend)")
    # Buchstabe für alles unterhalb des letzten Bandes
    fallback_letter: str = Field("F",
        description="Buchstabe unterhalb aller Bänder")
    # Zielnoten für die "Was brauche ich noch?"-Karten
    standard_targets: list[float] = Field(
        default=[3.0, 4.0, 5.0],
        description="Zielnoten für die Projektion")

    @model_validator(mode='after')
    def validate_scale(self):
        """Bänder müssen streng absteigend und innerhalb der Skala liegen."""
        if self.passing_grade > self.scale_max:
            raise ValueError(
                f"Bestehensgrenze {self.passing_grade} liegt über der Skala "
                f"(max. {self.scale_max})")
        previous = None
        for band in self.letter_bands:
            if band.min_grade > self.scale_max:
                raise ValueError(
                    f"Band '{band.letter}' ({band.min_grade}) liegt über der Skala")
            if previous is not None and band.min_grade >= previous:
                raise ValueError(
                    f"Bänder nicht absteigend sortiert: '{band.letter}' "
                    f"({band.min_grade}) nach {previous}")
            previous = band.min_grade
        for target in self.standard_targets:
            if not 0.0 <= target <= self.scale_max:
                raise ValueError(
                    f"Zielnote {target} liegt außerhalb von 0–{self.scale_max}")
        return self


# ─── TAGESZEITEN ───

class TimeBucket(BaseModel):
    """Ein Tageszeit-Fenster [start_hour, end_hour) für die Verteilung."""
    # Schlüssel im Ergebnis, z.B. "morning"
    name: str
    # Erste Stunde (inklusive)
    start_hour: int = Field(ge=0, le=23)
    # Letzte Stunde (exklusive)
    end_hour: int = Field(ge=1, le=24)

    @model_validator(mode='after')
    def validate_range(self):
        if self.end_hour <= self.start_hour:
            raise ValueError(
                f"Tageszeit '{self.name}': end_hour ({self.end_hour}) muss nach "
                f"start_hour ({self.start_hour}) liegen")
        return self

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


# ─── KALENDER-EXPORT ───

class CalendarConfig(BaseModel):
    """Einstellungen für den iCalendar-Export."""
    # Anzeigename des Kalenders
    calendar_name: str = Field("Horario Universitario",
        description="Anzeigename des Kalenders")
    # Zeitzone (IANA), wird als X-WR-TIMEZONE ausgegeben
    timezone: str = Field("America/Bogota",
        description="Zeitzone (IANA-Name)")
    # Anzahl Wochen, für die Termine erzeugt werden
    weeks: int = Field(16, ge=1, le=52,
        description="Wochen ab Startdatum")
    # PRODID-Zeile des Kalenders
    prod_id: str = Field("-//Studienplaner//Student Schedule//ES")
    # Domain-Suffix für Termin-UIDs
    uid_domain: str = Field("studienplaner.local")


# ─── GESAMT-CONFIG ───

class PortalConfig(BaseModel):
    """Gesamtkonfiguration des Studienplaners."""
    # Name der Hochschule
    institution_name: str = Field("Universidad Ejemplo",
        description="Name der Hochschule")
    # Notenskala und Buchstabennoten
    grading: GradingConfig
    # Tageszeiten für die Wochenverteilung
    time_buckets: list[TimeBucket] = Field(
        description="Tageszeit-Fenster (dürfen sich nicht überschneiden)")
    # iCalendar-Export
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    # Verzeichnis für Stundenplan- und Notendateien
    data_dir: str = Field("output",
        description="Verzeichnis für JSON-Datensätze")
    # Log-Level der CLI (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "WARNING", description="Log-Level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_buckets(self):
        """Tageszeit-Fenster dürfen sich nicht überschneiden."""
        ordered = sorted(self.time_buckets, key=lambda b: b.start_hour)
        for prev, cur in zip(ordered, ordered[1:]):
            if cur.start_hour < prev.end_hour:
                raise ValueError(
                    f"Tageszeiten '{prev.name}' und '{cur.name}' überschneiden sich")
        names = [b.name for b in self.time_buckets]
        if len(names) != len(set(names)):
            raise ValueError("Tageszeit-Namen müssen eindeutig sein")
        return self
