"""Notenbericht für ein Semester.

Berechnet pro Kurs den Notenstand und die Zielkarten und fasst das
Semester zusammen (Schnitt, bestandene / offene Kurse, Credits).
"""

from typing import Optional, Sequence

from pydantic import BaseModel

from config.defaults import default_grading
from config.schema import GradingConfig
from engine.grade_calculator import (
    GradeComputation,
    recompute_record,
    weighted_gpa,
)
from engine.target_projection import TargetProjection, target_cards
from models.course_grade import CourseGradeState, TermGrades
from models.enums import GradeStatus, TargetStatus


# ─── Berichts-Modelle ─────────────────────────────────────────────────────────

class CourseGradeReport(BaseModel):
    """Notenstand und Zielkarten eines Kurses."""

    course_code: str
    course_name: str
    credits: int
    state: CourseGradeState
    projections: list[TargetProjection]

    @property
    def status(self) -> GradeStatus:
        if self.state.final_grade is None:
            return GradeStatus.IN_PROGRESS
        return self.state.final_grade.status


class TermGradeReport(BaseModel):
    """Zusammenfassung eines Semesters."""

    student_id: str
    period_id: str
    courses: list[CourseGradeReport]
    term_gpa: float
    total_credits: int
    completed_credits: int       # Credits bestandener Kurse
    in_progress_credits: int
    approved_courses: int
    failed_courses: int
    pending_courses: int


# ─── Builder ──────────────────────────────────────────────────────────────────

class GradeReportBuilder:
    """Erstellt Kurs- und Semesterberichte aus einem Notenbuch."""

    def __init__(self, grading: Optional[GradingConfig] = None) -> None:
        self.grading = grading or default_grading()

    def build(
        self, term: TermGrades, targets: Optional[Sequence[float]] = None
    ) -> TermGradeReport:
        """Hauptmethode: berechnet alle Kurse und die Semester-Kennzahlen."""
        courses = []
        for record in term.courses:
            state = recompute_record(record, self.grading)
            computation = GradeComputation(
                current_grade=state.current_grade,
                completed_weight=state.completed_weight,
                remaining_weight=state.remaining_weight,
                total_weight=state.total_weight,
                completion_percentage=state.completion_percentage,
            )
            courses.append(CourseGradeReport(
                course_code=record.course_code,
                course_name=record.course_name,
                credits=record.credits,
                state=state,
                projections=target_cards(computation, targets, self.grading),
            ))

        approved = [c for c in courses if c.status == GradeStatus.COMPLETED]
        failed = [c for c in courses if c.status == GradeStatus.FAILED]
        pending = [c for c in courses if c.status == GradeStatus.IN_PROGRESS]

        return TermGradeReport(
            student_id=term.student_id,
            period_id=term.period_id,
            courses=courses,
            term_gpa=weighted_gpa(term.courses),
            total_credits=sum(c.credits for c in courses),
            completed_credits=sum(c.credits for c in approved),
            in_progress_credits=sum(c.credits for c in pending),
            approved_courses=len(approved),
            failed_courses=len(failed),
            pending_courses=len(pending),
        )

    def print_rich(self, report: TermGradeReport) -> None:
        """Gibt den Notenbericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        console.print(Panel(
            f"Semester: [bold]{report.period_id}[/bold] | "
            f"Studierende/r: {report.student_id}\n"
            f"Semesterschnitt: [bold]{report.term_gpa:.2f}[/bold] | "
            f"Credits: {report.completed_credits}/{report.total_credits} bestanden, "
            f"{report.in_progress_credits} laufend\n"
            f"Kurse: [green]{report.approved_courses} bestanden[/green] | "
            f"[red]{report.failed_courses} nicht bestanden[/red] | "
            f"{report.pending_courses} laufend",
            title="Notenbericht – Übersicht",
            border_style="cyan",
        ))

        table = Table(title="Kurse", box=box.ROUNDED)
        table.add_column("Kurs", width=10)
        table.add_column("Name", width=28)
        table.add_column("Cr.", justify="right", width=4)
        table.add_column("Aktuell", justify="right", width=8)
        table.add_column("Bewertet", justify="right", width=9)
        table.add_column("Anw.", justify="right", width=5)
        targets = (
            [p.target for p in report.courses[0].projections]
            if report.courses else self.grading.standard_targets
        )
        for t in targets:
            table.add_column(f"für {t:.1f}", justify="right", width=9)
        table.add_column("Note", width=6)

        for c in report.courses:
            grade_color = "green" if c.state.current_grade >= self.grading.passing_grade else "red"
            cells = [
                c.course_code,
                c.course_name,
                str(c.credits),
                f"[{grade_color}]{c.state.current_grade:.2f}[/{grade_color}]",
                f"{c.state.completed_weight:g}%",
                f"{c.state.attendance_percentage}%",
            ]
            by_target = {p.target: p for p in c.projections}
            for t in targets:
                p = by_target.get(t)
                cells.append(format_projection(p) if p else "—")
            final = c.state.final_grade
            cells.append(final.letter_grade if final else "—")
            table.add_row(*cells)
        console.print(table)


def format_projection(p: TargetProjection) -> str:
    """Kurztext einer Zielkarte für Tabellen."""
    if p.status == TargetStatus.ACHIEVED:
        return "[green]✓[/green]"
    if p.status == TargetStatus.IMPOSSIBLE:
        return "[red]✗[/red]"
    return f"{p.needed_average:.2f}"
