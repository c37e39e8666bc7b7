"""Studienplaner — Haupt-CLI.

Verwendung:
  python main.py config init              Standard-Konfiguration anlegen
  python main.py config show              Konfiguration anzeigen
  python main.py config edit              Konfiguration bearbeiten
  python main.py generate                 Beispiel-Stundenplan + Notenbuch erzeugen
  python main.py grades                   Notenbericht mit Zielkarten
  python main.py simulate <KURS> -s ID=X  Was-wäre-wenn für offene Bewertungen
  python main.py next-class               Nächster (und laufender) Kurs
  python main.py week                     Wochenansicht
  python main.py summary                  Wochenkennzahlen
  python main.py conflicts                Überschneidungen prüfen
  python main.py export-ical              Stundenplan als .ics exportieren
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.markup import escape

console = Console()

SCHEDULE_FILE = "schedule.json"
GRADES_FILE = "grades.json"

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _load_config_or_abort():
    """Lädt die Konfiguration (oder die Standardwerte) oder bricht ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    root = click.get_current_context().find_root()
    if not root.params.get("verbose"):
        logging.getLogger().setLevel(config.log_level)
    return mgr, config


def _data_path(config, explicit: Optional[str], filename: str) -> Path:
    return Path(explicit) if explicit else Path(config.data_dir) / filename


def _load_schedule_or_abort(path: Path):
    from models.week_schedule import WeekSchedule
    try:
        return WeekSchedule.load_json(path)
    except FileNotFoundError as e:
        console.print(
            f"[red]{escape(str(e))}[/red]\n"
            "Verwenden Sie [bold]python main.py generate[/bold] für Beispieldaten."
        )
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Stundenplan ungültig: {path}[/red]\n{escape(str(e))}")
        sys.exit(1)


def _load_grades_or_abort(path: Path):
    from models.course_grade import TermGrades
    try:
        return TermGrades.load_json(path)
    except FileNotFoundError as e:
        console.print(
            f"[red]{escape(str(e))}[/red]\n"
            "Verwenden Sie [bold]python main.py generate[/bold] für Beispieldaten."
        )
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Notenbuch ungültig: {path}[/red]\n{escape(str(e))}")
        sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen, anlegen oder bearbeiten."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration ohne Rückfrage überschreiben.")
def config_init(force: bool):
    """Legt die Standard-Konfiguration als YAML an."""
    from config.manager import ConfigManager
    from config.defaults import default_portal_config

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Überschreiben?", default=False):
            return
    mgr.save(default_portal_config())


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()
    gc = config.grading

    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  "
        f"Skala 0–{gc.scale_max:g}  |  bestanden ab {gc.passing_grade:g}",
        title="Konfiguration",
        border_style="cyan",
    ))

    table = Table(title="Buchstabennoten", box=box.ROUNDED)
    table.add_column("ab Note", justify="right")
    table.add_column("Buchstabe")
    for band in gc.letter_bands:
        table.add_row(f"{band.min_grade:.1f}", band.letter)
    table.add_row("darunter", gc.fallback_letter)
    console.print(table)

    table2 = Table(title="Tageszeiten", box=box.ROUNDED)
    table2.add_column("Name")
    table2.add_column("von", justify="right")
    table2.add_column("bis", justify="right")
    for b in config.time_buckets:
        table2.add_row(b.name, f"{b.start_hour}:00", f"{b.end_hour}:00")
    console.print(table2)

    cc = config.calendar
    console.print(
        f"\n[bold]Zielnoten:[/bold] {', '.join(f'{t:g}' for t in gc.standard_targets)}"
        f"\n[bold]Kalender:[/bold] {cc.calendar_name} | {cc.timezone} | {cc.weeks} Wochen"
        f"\n[bold]Daten:[/bold] {config.data_dir}"
    )


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config_or_abort()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--output-dir", default=None,
              help="Zielverzeichnis (Standard: data_dir aus der Config).")
@click.option("--courses", default=6, show_default=True, help="Anzahl Kurse.")
def cmd_generate(seed: int, output_dir: Optional[str], courses: int):
    """Erzeugt einen Beispiel-Stundenplan und ein passendes Notenbuch."""
    mgr, config = _load_config_or_abort()
    from data.sample_data import SampleDataGenerator

    console.print("[bold]Beispieldaten werden generiert...[/bold]")
    gen = SampleDataGenerator(config, seed=seed, num_courses=courses)
    schedule, grades = gen.generate()
    gen.print_summary(schedule, grades)

    out_dir = Path(output_dir or config.data_dir)
    schedule.save_json(out_dir / SCHEDULE_FILE)
    grades.save_json(out_dir / GRADES_FILE)
    console.print(f"[green]✓[/green] Stundenplan gespeichert: {out_dir / SCHEDULE_FILE}")
    console.print(f"[green]✓[/green] Notenbuch gespeichert: {out_dir / GRADES_FILE}")


# ─── GRADES ───────────────────────────────────────────────────────────────────

@click.command("grades")
@click.option("--grades", "grades_path", default=None, help="Pfad zum Notenbuch (JSON).")
@click.option("--target", "targets", multiple=True, type=float,
              help="Zielnote (mehrfach möglich, Standard aus der Config).")
def cmd_grades(grades_path: Optional[str], targets: tuple[float, ...]):
    """Notenbericht: Stand, Buchstabennote und Zielkarten je Kurs."""
    mgr, config = _load_config_or_abort()
    from analysis.grade_report import GradeReportBuilder

    term = _load_grades_or_abort(_data_path(config, grades_path, GRADES_FILE))
    builder = GradeReportBuilder(config.grading)
    try:
        report = builder.build(term, list(targets) or None)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    builder.print_rich(report)


# ─── SIMULATE ─────────────────────────────────────────────────────────────────

def _parse_scores(ctx, param, values) -> dict[str, float]:
    scores: dict[str, float] = {}
    for raw in values:
        eval_id, sep, value = raw.partition("=")
        if not sep or not eval_id:
            raise click.BadParameter(f"'{raw}' muss die Form ID=WERT haben")
        try:
            scores[eval_id.strip()] = float(value)
        except ValueError:
            raise click.BadParameter(f"'{value}' ist keine Zahl")
    return scores


@click.command("simulate")
@click.argument("course_code")
@click.option("--score", "-s", "scores", multiple=True, callback=_parse_scores,
              help="Hypothetischer Roh-Score für eine offene Bewertung: ID=WERT.")
@click.option("--grades", "grades_path", default=None, help="Pfad zum Notenbuch (JSON).")
@click.option("--target", "targets", multiple=True, type=float,
              help="Zielnote (mehrfach möglich).")
def cmd_simulate(course_code: str, scores: dict[str, float],
                 grades_path: Optional[str], targets: tuple[float, ...]):
    """Was-wäre-wenn: setzt Scores für offene Bewertungen ein."""
    mgr, config = _load_config_or_abort()
    from analysis.grade_report import format_projection
    from engine.target_projection import simulate

    term = _load_grades_or_abort(_data_path(config, grades_path, GRADES_FILE))
    record = term.get_course(course_code)
    if record is None:
        console.print(f"[red]Kurs '{course_code}' nicht im Notenbuch.[/red]")
        sys.exit(1)

    try:
        result = simulate(record.evaluations, scores, list(targets) or None, config.grading)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(title=f"{record.course_code} – {record.course_name}", box=box.ROUNDED)
    table.add_column("Bewertung")
    table.add_column("Gewicht", justify="right")
    table.add_column("Score", justify="right")
    for e in record.evaluations:
        if e.id in scores:
            score = f"[cyan]{scores[e.id]:g}/{e.max_score:g} (sim.)[/cyan]"
        elif e.is_graded:
            score = f"{e.score:g}/{e.max_score:g}"
        else:
            score = "[dim]offen[/dim]"
        table.add_row(f"{e.id}  {e.name}", f"{e.weight:g}%", score)
    console.print(table)

    color = "green" if result.is_approved else "red"
    console.print(
        f"Simulierte Note: [bold {color}]{result.simulated_grade:.2f}[/bold {color}] "
        f"({result.letter_grade})  |  Fortschritt {result.computation.completion_percentage}%"
    )
    if not result.is_complete:
        for p in result.projections:
            console.print(f"  Ziel {p.target:.1f}: {format_projection(p)}")


# ─── NEXT-CLASS ───────────────────────────────────────────────────────────────

@click.command("next-class")
@click.option("--schedule", "schedule_path", default=None, help="Pfad zum Stundenplan (JSON).")
@click.option("--at", "at", default=None,
              help="Zeitpunkt (ISO, z.B. 2024-03-06T09:00), Standard: jetzt.")
def cmd_next_class(schedule_path: Optional[str], at: Optional[str]):
    """Zeigt den laufenden und den nächsten Kurs."""
    mgr, config = _load_config_or_abort()
    from engine.schedule_temporal import current_class, next_class
    from export.helpers import day_label, format_minutes, format_time_range

    schedule = _load_schedule_or_abort(_data_path(config, schedule_path, SCHEDULE_FILE))
    if at:
        try:
            now = datetime.fromisoformat(at)
        except ValueError:
            console.print(f"[red]Ungültiger Zeitpunkt: {at}[/red]")
            sys.exit(1)
    else:
        now = datetime.now(ZoneInfo(config.calendar.timezone))

    active = schedule.active_on(now)
    running = current_class(active, now)
    if running is not None:
        console.print(
            f"[bold green]Läuft gerade:[/bold green] {running.class_block.course_code} "
            f"{running.class_block.course_name}  {format_time_range(running.time_slot)}"
        )

    upcoming = next_class(active, now)
    if upcoming is None:
        console.print("[dim]Keine Kurse im Stundenplan.[/dim]")
        return
    when = "heute" if upcoming.is_today else day_label(upcoming.day)
    console.print(
        f"[bold]Nächster Kurs:[/bold] {upcoming.class_block.course_code} "
        f"{upcoming.class_block.course_name}  {when} "
        f"{format_time_range(upcoming.time_slot)}  "
        f"[dim](in {format_minutes(upcoming.minutes_until_start)})[/dim]"
    )


# ─── WEEK ─────────────────────────────────────────────────────────────────────

@click.command("week")
@click.option("--schedule", "schedule_path", default=None, help="Pfad zum Stundenplan (JSON).")
def cmd_week(schedule_path: Optional[str]):
    """Wochenansicht Montag bis Sonntag, nach Startzeit sortiert."""
    mgr, config = _load_config_or_abort()
    from engine.schedule_temporal import weekly_view
    from export.helpers import day_label

    schedule = _load_schedule_or_abort(_data_path(config, schedule_path, SCHEDULE_FILE))
    table = Table(title=f"Stundenplan {schedule.period_id}", box=box.ROUNDED)
    table.add_column("Tag", style="bold")
    table.add_column("Zeit")
    table.add_column("Kurs")
    table.add_column("Raum")
    for day, entries in weekly_view(schedule).items():
        for block, slot in entries:
            table.add_row(
                day_label(day),
                str(slot),
                f"{block.course_code} {block.course_name}",
                str(slot.location) if slot.location else "",
            )
    console.print(table)


# ─── SUMMARY ──────────────────────────────────────────────────────────────────

@click.command("summary")
@click.option("--schedule", "schedule_path", default=None, help="Pfad zum Stundenplan (JSON).")
def cmd_summary(schedule_path: Optional[str]):
    """Wochenkennzahlen: Credits, Wochenstunden, Tagesverteilung."""
    mgr, config = _load_config_or_abort()
    from engine.weekly_metrics import summarize
    from export.helpers import day_label

    schedule = _load_schedule_or_abort(_data_path(config, schedule_path, SCHEDULE_FILE))
    s = summarize(schedule, config.time_buckets)

    lines = [
        f"Kurse: {s.total_courses}  |  Credits: {s.total_credits}",
        f"Wochenstunden: {s.weekly_hours:.1f}",
        f"Ø Kurse pro Unterrichtstag: {s.average_classes_per_day:.2f}",
        f"Vollster Tag: {day_label(s.busiest_day)}  |  Leerster Tag: {day_label(s.lightest_day)}",
    ]
    console.print(Panel("\n".join(lines), title="Wochenübersicht", border_style="cyan"))

    table = Table(box=box.SIMPLE)
    table.add_column("Tageszeit")
    table.add_column("Slots", justify="right")
    for name, count in s.time_distribution.items():
        table.add_row(name, str(count))
    console.print(table)


# ─── CONFLICTS ────────────────────────────────────────────────────────────────

@click.command("conflicts")
@click.option("--schedule", "schedule_path", default=None, help="Pfad zum Stundenplan (JSON).")
@click.option("--candidate", default=None, type=click.Path(exists=True, path_type=Path),
              help="JSON-Datei mit einem neuen Kurs, der gegen den Plan geprüft wird.")
def cmd_conflicts(schedule_path: Optional[str], candidate: Optional[Path]):
    """Prüft den Stundenplan (oder einen neuen Kurs) auf Überschneidungen."""
    mgr, config = _load_config_or_abort()
    from analysis.schedule_validator import ScheduleValidator
    from models.class_block import ClassBlock

    schedule = _load_schedule_or_abort(_data_path(config, schedule_path, SCHEDULE_FILE))
    validator = ScheduleValidator()
    if candidate is not None:
        try:
            block = ClassBlock.model_validate_json(candidate.read_text(encoding="utf-8"))
        except ValueError as e:
            console.print(f"[red]Kurs ungültig: {candidate}[/red]\n{escape(str(e))}")
            sys.exit(1)
        report = validator.validate_candidate(schedule, block)
    else:
        report = validator.validate(schedule)
    report.print_rich()

    sys.exit(0 if report.is_valid else 1)


# ─── EXPORT-ICAL ──────────────────────────────────────────────────────────────

@click.command("export-ical")
@click.option("--schedule", "schedule_path", default=None, help="Pfad zum Stundenplan (JSON).")
@click.option("--output", "-o", default=None, help="Ausgabepfad der .ics-Datei.")
@click.option("--start", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Startdatum (Standard: heute); Termine ab dessen Montag.")
@click.option("--weeks", default=None, type=int, help="Anzahl Wochen (Standard aus der Config).")
def cmd_export_ical(schedule_path: Optional[str], output: Optional[str],
                    start: Optional[datetime], weeks: Optional[int]):
    """Exportiert den Stundenplan als iCalendar-Datei."""
    mgr, config = _load_config_or_abort()
    from export.ical_export import ICalExporter

    schedule = _load_schedule_or_abort(_data_path(config, schedule_path, SCHEDULE_FILE))
    out_path = Path(output) if output else Path(config.data_dir) / "schedule.ics"
    exporter = ICalExporter(config.calendar)
    written = exporter.export(schedule, out_path, start.date() if start else None, weeks)
    console.print(f"[green]✓[/green] Kalender gespeichert: {written}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben aktivieren.")
def cli(verbose: bool):
    """Studienplaner: Notenstand, Zielnoten und Wochenstundenplan.

    Starten Sie mit: python main.py config init
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_grades)
cli.add_command(cmd_simulate)
cli.add_command(cmd_next_class)
cli.add_command(cmd_week)
cli.add_command(cmd_summary)
cli.add_command(cmd_conflicts)
cli.add_command(cmd_export_ical)


if __name__ == "__main__":
    main()
