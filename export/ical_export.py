"""iCalendar-Export für den Wochenstundenplan.

Erzeugt für jede Woche ab dem Montag des Startdatums ein VEVENT pro
Kurstermin. Kurse mit `date_range` erscheinen nur in ihrem Gültigkeitszeitraum.
"""

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional

from config.schema import CalendarConfig
from models.class_block import ClassBlock
from models.enums import Weekday
from models.timeslot import TimeSlot
from models.week_schedule import WeekSchedule

from export.helpers import (
    escape_ical_text,
    fold_ical_line,
    format_ical_datetime,
    week_start,
)

logger = logging.getLogger(__name__)


class ICalExporter:
    """Exportiert einen WeekSchedule als .ics-Datei."""

    def __init__(self, config: Optional[CalendarConfig] = None):
        self.config = config or CalendarConfig()

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def build_calendar(
        self,
        schedule: WeekSchedule,
        start_date: Optional[date] = None,
        weeks: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """Gibt den Kalender als Text mit CRLF-Zeilenenden zurück."""
        start_date = start_date or date.today()
        if isinstance(start_date, datetime):
            start_date = start_date.date()
        weeks = weeks if weeks is not None else self.config.weeks
        stamp = format_ical_datetime(generated_at or datetime.now())

        lines = self._header()
        first_monday = week_start(start_date)
        count = 0
        for week in range(weeks):
            monday = first_monday + timedelta(weeks=week)
            for day in Weekday.ordered():
                event_date = monday + timedelta(days=day.index)
                for block in schedule.classes_on(day):
                    if not block.is_active_on(event_date):
                        continue
                    for slot in block.time_slots:
                        lines.extend(self._event(block, slot, event_date, stamp))
                        count += 1
        lines.append("END:VCALENDAR")

        logger.info(f"iCal: {count} Termine über {weeks} Wochen ab {first_monday.isoformat()}")
        folded = [part for line in lines for part in fold_ical_line(line)]
        return "\r\n".join(folded) + "\r\n"

    def export(
        self,
        schedule: WeekSchedule,
        output_path: Path,
        start_date: Optional[date] = None,
        weeks: Optional[int] = None,
    ) -> Path:
        """Schreibt die .ics-Datei und gibt den Pfad zurück."""
        content = self.build_calendar(schedule, start_date, weeks)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" verhindert die Umwandlung der CRLF-Zeilenenden
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        return output_path

    # ─── Bausteine ────────────────────────────────────────────────────────────

    def _header(self) -> list[str]:
        name = escape_ical_text(self.config.calendar_name)
        return [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{self.config.prod_id}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            f"X-WR-CALNAME:{name}",
            f"X-WR-CALDESC:{escape_ical_text('Horario de clases - ' + self.config.calendar_name)}",
            f"X-WR-TIMEZONE:{self.config.timezone}",
        ]

    def _event(
        self, block: ClassBlock, slot: TimeSlot, event_date: date, stamp: str
    ) -> list[str]:
        start = datetime.combine(event_date, time(slot.start_minutes // 60, slot.start_minutes % 60))
        end = datetime.combine(event_date, time(slot.end_minutes // 60, slot.end_minutes % 60))
        room = str(slot.location) if slot.location is not None else ""
        uid = (
            f"{block.course_nrc}-{event_date.strftime('%Y%m%d')}"
            f"-{slot.start_time.replace(':', '')}@{self.config.uid_domain}"
        )
        description = (
            f"Profesor: {block.instructor}\n"
            f"Aula: {room}\n"
            f"Horario: {slot.start_time} - {slot.end_time}"
        )
        return [
            "BEGIN:VEVENT",
            f"UID:{uid}",
            f"DTSTAMP:{stamp}",
            f"DTSTART:{format_ical_datetime(start)}",
            f"DTEND:{format_ical_datetime(end)}",
            f"SUMMARY:{escape_ical_text(f'{block.course_code} - {block.course_name}')}",
            f"DESCRIPTION:{escape_ical_text(description)}",
            f"LOCATION:{escape_ical_text(room)}",
            "STATUS:CONFIRMED",
            "TRANSP:OPAQUE",
            "END:VEVENT",
        ]
