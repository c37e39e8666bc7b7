"""Gemeinsame Hilfsfunktionen für Export und CLI-Ausgabe."""

from datetime import date, datetime, timedelta

from config.defaults import DAY_LABELS
from models.enums import Weekday
from models.timeslot import TimeSlot

# RFC 5545: Inhaltszeilen höchstens 75 Oktette (ohne CRLF)
ICAL_LINE_LIMIT = 75


def day_label(day: Weekday) -> str:
    """Kurzbezeichnung eines Wochentags ("Mo", "Di", ...)."""
    return DAY_LABELS[day.value]


def format_time_range(slot: TimeSlot) -> str:
    """Zeitspanne wie "08:00–09:30", mit Raum falls vorhanden."""
    text = str(slot)
    if slot.location is not None:
        text += f" ({slot.location})"
    return text


def format_minutes(minutes: int) -> str:
    """Minuten als "2 d 3 h 15 min" (führende Nullanteile entfallen)."""
    days, rest = divmod(max(0, minutes), 24 * 60)
    hours, mins = divmod(rest, 60)
    parts = []
    if days:
        parts.append(f"{days} d")
    if hours:
        parts.append(f"{hours} h")
    if mins or not parts:
        parts.append(f"{mins} min")
    return " ".join(parts)


def week_start(d: date) -> date:
    """Montag der Woche, in der `d` liegt."""
    return d - timedelta(days=d.weekday())


# ─── iCalendar ────────────────────────────────────────────────────────────────

def escape_ical_text(text: str) -> str:
    """Maskiert Backslash, Semikolon, Komma und Zeilenumbruch (TEXT-Werte)."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def format_ical_datetime(dt: datetime) -> str:
    """Lokale Zeit ohne Zonenangabe, z.B. 20240205T080000."""
    return dt.strftime("%Y%m%dT%H%M%S")


def fold_ical_line(line: str) -> list[str]:
    """Bricht eine Inhaltszeile nach 75 Oktetten um (Folgezeilen mit Leerzeichen)."""
    if len(line.encode("utf-8")) <= ICAL_LINE_LIMIT:
        return [line]
    parts: list[str] = []
    current = ""
    size = 0
    limit = ICAL_LINE_LIMIT
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            parts.append(current)
            current = " "
            size = 1
        current += ch
        size += width
    parts.append(current)
    return parts
