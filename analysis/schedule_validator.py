"""Prüfung eines Wochenstundenplans auf Überschneidungen.

Überschneidungsfreiheit wird beim Speichern nicht erzwungen; dieser
Validator prüft sie bei Bedarf für den ganzen Plan oder für einen neuen Kurs.
"""

import logging
from collections import defaultdict
from itertools import combinations
from typing import Literal

from pydantic import BaseModel

from engine.schedule_temporal import blocks_conflict, conflicting_blocks
from models.class_block import ClassBlock
from models.week_schedule import WeekSchedule

logger = logging.getLogger(__name__)


class ValidationViolation(BaseModel):
    """Eine einzelne Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "time_conflict"
    description: str
    entity: str          # course_nrc


class ValidationReport(BaseModel):
    """Ergebnis der Stundenplan-Prüfung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ KONFLIKTFREI[/bold green]"
            if self.is_valid
            else "[bold red]✗ ÜBERSCHNEIDUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Stundenplan-Prüfung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=18)
        table.add_column("Kurs", width=10)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


def _describe_overlap(a: ClassBlock, b: ClassBlock) -> str:
    shared = [d.value for d in a.days if d in b.days]
    pairs = [
        f"{sa}/{sb}"
        for sa in a.time_slots
        for sb in b.time_slots
        if sa.overlaps(sb)
    ]
    return (
        f"{a.label} und {b.label} überschneiden sich "
        f"({', '.join(shared)}: {', '.join(pairs)})."
    )


class ScheduleValidator:
    """Prüft einen WeekSchedule bzw. einen neuen Kurs gegen den Plan."""

    def validate(self, schedule: WeekSchedule) -> ValidationReport:
        """Führt alle Prüfungen durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        violations.extend(self._check_time_conflicts(schedule))
        violations.extend(self._check_duplicate_courses(schedule))

        has_errors = any(v.severity == "error" for v in violations)
        if has_errors:
            logger.warning(
                f"Stundenplan {schedule.student_id}/{schedule.period_id}: "
                f"{sum(v.severity == 'error' for v in violations)} Überschneidung(en)"
            )
        return ValidationReport(violations=violations, is_valid=not has_errors)

    def validate_candidate(
        self, schedule: WeekSchedule, candidate: ClassBlock
    ) -> ValidationReport:
        """Prüft einen neuen Kurs gegen den bestehenden Plan (vor dem Speichern)."""
        violations = [
            ValidationViolation(
                severity="error",
                constraint="time_conflict",
                entity=candidate.course_nrc,
                description=_describe_overlap(candidate, existing),
            )
            for existing in conflicting_blocks(schedule.classes, candidate)
        ]
        if schedule.get_class(candidate.course_nrc) is not None:
            violations.append(ValidationViolation(
                severity="warning",
                constraint="duplicate_course",
                entity=candidate.course_nrc,
                description=f"NRC {candidate.course_nrc} ist bereits im Plan enthalten.",
            ))
        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_time_conflicts(self, schedule: WeekSchedule) -> list[ValidationViolation]:
        """Kein Tag darf zwei Kurse mit überlappenden Zeitslots haben."""
        violations: list[ValidationViolation] = []
        for a, b in combinations(schedule.classes, 2):
            if blocks_conflict(a, b):
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="time_conflict",
                    entity=a.course_nrc,
                    description=_describe_overlap(a, b),
                ))
        return violations

    def _check_duplicate_courses(self, schedule: WeekSchedule) -> list[ValidationViolation]:
        """Jede NRC sollte nur einmal im Plan stehen."""
        by_nrc: dict[str, int] = defaultdict(int)
        for block in schedule.classes:
            by_nrc[block.course_nrc] += 1
        return [
            ValidationViolation(
                severity="warning",
                constraint="duplicate_course",
                entity=nrc,
                description=f"NRC {nrc} ist {count}× im Plan enthalten.",
            )
            for nrc, count in by_nrc.items()
            if count > 1
        ]
