from config.schema import (
    CalendarConfig,
    GradingConfig,
    LetterBand,
    PortalConfig,
    TimeBucket,
)

# Kanonische Wochenreihenfolge (Montag zuerst)
WEEKDAY_NAMES: list[str] = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]

# Kurzbezeichnungen für Tabellen
DAY_LABELS: dict[str, str] = {
    "monday": "Mo",
    "tuesday": "Di",
    "wednesday": "Mi",
    "thursday": "Do",
    "friday": "Fr",
    "saturday": "Sa",
    "sunday": "So",
}

GRADE_SCALE_MAX = 5.0
PASSING_GRADE = 3.0
MAX_TOTAL_WEIGHT = 100.0

# Geschlossene Untergrenzen, höchstes zutreffendes Band gewinnt
LETTER_GRADE_BANDS: list[tuple[float, str]] = [
    (4.6, "A+"),
    (4.0, "A"),
    (3.5, "B+"),
    (3.0, "B"),
    (2.5, "C+"),
    (2.0, "C"),
    (1.5, "D+"),
    (1.0, "D"),
]

STANDARD_TARGETS: list[float] = [3.0, 4.0, 5.0]

# [start, end) in vollen Stunden
TIME_OF_DAY_BUCKETS: dict[str, tuple[int, int]] = {
    "morning": (6, 12),
    "afternoon": (12, 18),
    "evening": (18, 22),
}


def default_grading() -> GradingConfig:
    """Standard-Notenskala 0–5 mit Bestehensgrenze 3.0.

    Buchstabennoten:
      ≥ 4.6  A+     ≥ 3.0  B      ≥ 1.5  D+
      ≥ 4.0  A      ≥ 2.5  C+     ≥ 1.0  D
      ≥ 3.5  B+     ≥ 2.0  C      sonst  F
    """
    return GradingConfig(
        scale_max=GRADE_SCALE_MAX,
        passing_grade=PASSING_GRADE,
        letter_bands=[
            LetterBand(min_grade=g, letter=letter)
            for g, letter in LETTER_GRADE_BANDS
        ],
        fallback_letter="F",
        standard_targets=list(STANDARD_TARGETS),
    )


def default_time_buckets() -> list[TimeBucket]:
    """Vormittag 6–12, Nachmittag 12–18, Abend 18–22 Uhr."""
    return [
        TimeBucket(name=name, start_hour=start, end_hour=end)
        for name, (start, end) in TIME_OF_DAY_BUCKETS.items()
    ]


def default_portal_config() -> PortalConfig:
    """Vollständige Standard-Konfiguration."""
    return PortalConfig(
        institution_name="Universidad Ejemplo",
        grading=default_grading(),
        time_buckets=default_time_buckets(),
        calendar=CalendarConfig(),
    )
