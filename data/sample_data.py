"""Beispieldaten-Generator für den Studienplaner.

Erzeugt einen überschneidungsfreien Wochenstundenplan und ein passendes
Notenbuch mit teilweise bewerteten Leistungen, reproduzierbar über den Seed.

Eigenschaften der erzeugten Daten:
  1. Keine zwei Kurse überschneiden sich (Prüfung über `has_conflict`)
  2. Gewichte jedes Kurses summieren sich auf genau 100 %
  3. Ein Teil der Kurse ist abgeschlossen (Abschlussnote gesetzt)
  4. Scores liegen auf kursüblichen Skalen (0–5, 0–10 oder 0–100)
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from config.schema import PortalConfig
from config.defaults import default_portal_config
from engine.grade_calculator import add_absence, compute
from engine.schedule_temporal import has_conflict
from models.class_block import ClassBlock, DateRange
from models.course_grade import Attendance, CourseGradeRecord, TermGrades
from models.enums import EvaluationType, Weekday
from models.evaluation import Evaluation
from models.timeslot import Location, TimeSlot
from models.week_schedule import WeekSchedule

logger = logging.getLogger(__name__)

# ─── Kurskatalog ──────────────────────────────────────────────────────────────
# (Kürzel, Name, Credits)

_COURSE_CATALOG: list[tuple[str, str, int]] = [
    ("MAT101", "Cálculo Diferencial", 4),
    ("MAT102", "Álgebra Lineal", 3),
    ("FIS101", "Física Mecánica", 4),
    ("INF110", "Programación I", 3),
    ("INF210", "Estructuras de Datos", 3),
    ("HUM100", "Comunicación Escrita", 2),
    ("ECO101", "Microeconomía", 3),
    ("QUI101", "Química General", 3),
    ("EST201", "Probabilidad y Estadística", 3),
    ("ING150", "Inglés III", 2),
]

_INSTRUCTORS = [
    "Ana Rodríguez", "Carlos Gómez", "Diana Martínez", "Felipe Torres",
    "Laura Castro", "Miguel Herrera", "Natalia Ríos", "Jorge Vargas",
]

_BUILDINGS = ["A", "B", "C", "LAB"]

# Übliche Tagesmuster
_DAY_PATTERNS: list[list[Weekday]] = [
    [Weekday.MONDAY, Weekday.WEDNESDAY],
    [Weekday.TUESDAY, Weekday.THURSDAY],
    [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY],
    [Weekday.FRIDAY],
    [Weekday.SATURDAY],
    [Weekday.WEDNESDAY],
]

# Startzeiten mit Dauer in Minuten
_TIME_GRID: list[tuple[str, int]] = [
    ("07:00", 120),
    ("08:00", 90),
    ("09:00", 120),
    ("11:00", 90),
    ("14:00", 120),
    ("16:00", 90),
    ("18:30", 120),
]

# Bewertungspläne: (Name, Typ, Gewicht); Summe jeweils 100
_EVALUATION_PLANS: list[list[tuple[str, EvaluationType, float]]] = [
    [
        ("Parcial 1", EvaluationType.EXAM, 25.0),
        ("Parcial 2", EvaluationType.EXAM, 25.0),
        ("Quices", EvaluationType.QUIZ, 20.0),
        ("Examen final", EvaluationType.EXAM, 30.0),
    ],
    [
        ("Taller 1", EvaluationType.ASSIGNMENT, 15.0),
        ("Taller 2", EvaluationType.ASSIGNMENT, 15.0),
        ("Proyecto", EvaluationType.PROJECT, 40.0),
        ("Sustentación", EvaluationType.PRESENTATION, 30.0),
    ],
    [
        ("Laboratorio 1", EvaluationType.LABORATORY, 20.0),
        ("Laboratorio 2", EvaluationType.LABORATORY, 20.0),
        ("Parcial", EvaluationType.EXAM, 30.0),
        ("Final", EvaluationType.EXAM, 30.0),
    ],
    [
        ("Tareas", EvaluationType.HOMEWORK, 33.3),
        ("Participación", EvaluationType.PARTICIPATION, 33.3),
        ("Ensayo final", EvaluationType.ASSIGNMENT, 33.4),
    ],
]

_SCORE_SCALES = [5.0, 10.0, 100.0]


class SampleDataGenerator:
    """Erzeugt Stundenplan und Notenbuch für einen Beispiel-Studierenden."""

    def __init__(
        self,
        config: Optional[PortalConfig] = None,
        seed: int = 42,
        student_id: str = "000123456",
        period_id: str = "2024-1",
        num_courses: int = 6,
    ) -> None:
        self.config = config or default_portal_config()
        self.rng = random.Random(seed)
        self.seed = seed
        self.student_id = student_id
        self.period_id = period_id
        self.num_courses = min(num_courses, len(_COURSE_CATALOG))

    # ─── Stundenplan ──────────────────────────────────────────────────────────

    def _semester_window(self) -> DateRange:
        year = int(self.period_id[:4])
        start = datetime(year, 2, 1) if self.period_id.endswith("-1") else datetime(year, 8, 1)
        return DateRange(start=start, end=start + timedelta(weeks=self.config.calendar.weeks))

    def _make_slot(self, start: str, duration: int) -> TimeSlot:
        hours, minutes = map(int, start.split(":"))
        end_total = hours * 60 + minutes + duration
        building = self.rng.choice(_BUILDINGS)
        room = f"{self.rng.randint(1, 4)}{self.rng.randint(1, 20):02d}"
        return TimeSlot(
            start_time=start,
            end_time=f"{end_total // 60:02d}:{end_total % 60:02d}",
            location=Location(
                building_id=building,
                room=room,
                full_location=f"Edificio {building} - Salón {room}",
            ),
        )

    def _generate_classes(self) -> list[ClassBlock]:
        """Wählt Kurse aus dem Katalog und platziert sie ohne Überschneidung."""
        courses = self.rng.sample(_COURSE_CATALOG, self.num_courses)
        window = self._semester_window()
        blocks: list[ClassBlock] = []
        for i, (code, name, credits) in enumerate(courses):
            options = [
                (days, start, duration)
                for days in _DAY_PATTERNS
                for start, duration in _TIME_GRID
            ]
            self.rng.shuffle(options)
            for days, start, duration in options:
                candidate = ClassBlock(
                    course_nrc=str(10000 + self.rng.randint(0, 89999)),
                    course_code=code,
                    course_name=name,
                    instructor=self.rng.choice(_INSTRUCTORS),
                    credits=credits,
                    days=days,
                    time_slots=[self._make_slot(start, duration)],
                    type="lab" if code.startswith(("FIS", "QUI")) else "theory",
                    date_range=window,
                )
                if not has_conflict(blocks, candidate):
                    blocks.append(candidate)
                    break
            else:
                logger.info(f"Kein freier Termin für {code}, Kurs wird ausgelassen")
        return blocks

    def generate_schedule(self) -> WeekSchedule:
        """Erzeugt einen überschneidungsfreien Wochenstundenplan."""
        schedule = WeekSchedule(
            student_id=self.student_id,
            period_id=self.period_id,
            classes=self._generate_classes(),
        )
        logger.info(
            f"Stundenplan erzeugt: {len(schedule.classes)} Kurse (Seed {self.seed})"
        )
        return schedule

    # ─── Notenbuch ────────────────────────────────────────────────────────────

    def _generate_evaluations(
        self,
        code: str,
        plan: list[tuple[str, EvaluationType, float]],
        graded_count: int,
    ) -> list[Evaluation]:
        scale = self.rng.choice(_SCORE_SCALES)
        window = self._semester_window()
        evaluations = []
        for idx, (name, eval_type, weight) in enumerate(plan):
            graded = idx < graded_count
            score = None
            if graded:
                # Leicht rechtsschiefe Verteilung um 70 % der Maximalpunktzahl
                ratio = min(1.0, max(0.0, self.rng.gauss(0.7, 0.15)))
                score = round(ratio * scale, 1)
            evaluations.append(Evaluation(
                id=f"{code.lower()}-{idx + 1}",
                name=name,
                type=eval_type,
                weight=weight,
                max_score=scale,
                score=score,
                date=window.start + timedelta(weeks=4 * (idx + 1)),
            ))
        return evaluations

    def _generate_attendance(self, block: ClassBlock) -> Attendance:
        """Besuchte Sitzungen der ersten Wochen plus einige Fehlzeiten."""
        window = self._semester_window()
        weeks = self.rng.randint(4, 10)
        total = weeks * len(block.days)
        attendance = Attendance(total_classes=total,
                                attended_classes=total - self.rng.randint(0, 2))
        for _ in range(self.rng.randint(0, 3)):
            attendance = add_absence(
                attendance,
                window.start + timedelta(days=self.rng.randint(0, weeks * 7)),
                reason=self.rng.choice([None, "Krankheit", "Arzttermin"]),
                excused=self.rng.random() < 0.4,
            )
        return attendance

    def generate_grades(self, schedule: WeekSchedule) -> TermGrades:
        """Erzeugt das Notenbuch zu den Kursen des Stundenplans.

        Etwa ein Drittel der Kurse ist vollständig bewertet und erhält die
        berechnete Note als Abschlussnote; die übrigen sind teilweise bewertet.
        """
        courses = []
        for block in schedule.classes:
            plan = self.rng.choice(_EVALUATION_PLANS)
            finished = self.rng.random() < 0.35
            graded_count = len(plan) if finished else self.rng.randint(0, len(plan) - 1)
            evaluations = self._generate_evaluations(block.course_code, plan, graded_count)
            final = None
            if finished:
                final = compute(evaluations, self.config.grading).current_grade
            courses.append(CourseGradeRecord(
                course_code=block.course_code,
                course_name=block.course_name,
                course_nrc=block.course_nrc,
                instructor=block.instructor,
                credits=block.credits,
                evaluations=evaluations,
                attendance=self._generate_attendance(block),
                final_numeric_grade=final,
            ))
        logger.info(f"Notenbuch erzeugt: {len(courses)} Kurse")
        return TermGrades(
            student_id=self.student_id,
            period_id=self.period_id,
            courses=courses,
        )

    def generate(self) -> tuple[WeekSchedule, TermGrades]:
        """Erzeugt Stundenplan und Notenbuch in einem Durchlauf."""
        schedule = self.generate_schedule()
        return schedule, self.generate_grades(schedule)

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, schedule: WeekSchedule, grades: TermGrades) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Beispieldaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        used_days = [d for d in Weekday.ordered() if schedule.classes_on(d)]
        finished = sum(1 for c in grades.courses if c.final_numeric_grade is not None)
        evaluations = [e for c in grades.courses for e in c.evaluations]
        graded = sum(1 for e in evaluations if e.is_graded)

        table.add_row("Kurse", str(len(schedule.classes)),
                      f"{sum(c.credits for c in schedule.classes)} Credits")
        table.add_row("Unterrichtstage", str(len(used_days)),
                      ", ".join(d.value for d in used_days))
        table.add_row("Bewertungen", str(len(evaluations)),
                      f"{graded} bewertet, {len(evaluations) - graded} offen")
        table.add_row("Abgeschlossen", str(finished),
                      f"{len(grades.courses) - finished} laufend")

        console.print(table)
