"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import CalendarConfig, GradingConfig, PortalConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Studienplaner — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "grading": (
        "Notenskala",
        "Skala 0–scale_max, Bestehensgrenze und Buchstabennoten.\n"
        "Bänder absteigend sortiert; das höchste zutreffende Band gewinnt.",
    ),
    "time_buckets": (
        "Tageszeiten",
        "Fenster [start_hour, end_hour) für die Wochenverteilung.\n"
        "Stunden außerhalb aller Fenster werden nicht gezählt.",
    ),
    "calendar": (
        "Kalender-Export",
        None,
    ),
    "data_dir": (
        "Datenablage",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "portal_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> PortalConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return PortalConfig.model_validate(dict(raw))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> PortalConfig:
        """Wie load(), fällt aber ohne Datei auf die Standard-Config zurück."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            from config.defaults import default_portal_config
            return default_portal_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: PortalConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Abschnitts-Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: PortalConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "grading" in cm:
            grading_map = CommentedMap(cm["grading"])
            grading_map.yaml_add_eol_comment("Note ≥ passing_grade → bestanden",
                                             "passing_grade")
            cm["grading"] = grading_map

        return cm

    # ─── Interaktives Bearbeiten ───

    def edit_interactive(self, config: PortalConfig) -> PortalConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Notenskala & Zielnoten")
            console.print("  [bold]2.[/bold] Kalender-Export")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(
                    update={"grading": self._edit_grading(config.grading)}
                )
            elif choice == "2":
                config = config.model_copy(
                    update={"calendar": self._edit_calendar(config.calendar)}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_grading(self, gc: GradingConfig) -> GradingConfig:
        """Bestehensgrenze und Zielnoten anpassen."""
        table = Table(box=box.SIMPLE)
        table.add_column("Ab Note", style="bold")
        table.add_column("Buchstabe")
        for band in gc.letter_bands:
            table.add_row(f"{band.min_grade:.1f}", band.letter)
        console.print(table)

        passing = FloatPrompt.ask("Bestehensgrenze", default=gc.passing_grade)
        raw_targets = Prompt.ask(
            "Zielnoten (kommagetrennt)",
            default=", ".join(f"{t:.1f}" for t in gc.standard_targets),
        )
        targets = [float(t) for t in raw_targets.split(",") if t.strip()]
        return GradingConfig.model_validate({
            **gc.model_dump(),
            "passing_grade": passing,
            "standard_targets": targets,
        })

    def _edit_calendar(self, cc: CalendarConfig) -> CalendarConfig:
        """Kalender-Einstellungen anpassen."""
        name = Prompt.ask("Kalendername", default=cc.calendar_name)
        tz = Prompt.ask("Zeitzone", default=cc.timezone)
        weeks = IntPrompt.ask("Wochen", default=cc.weeks)
        return cc.model_copy(update={
            "calendar_name": name, "timezone": tz, "weeks": weeks,
        })
