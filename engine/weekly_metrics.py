"""Kennzahlen eines Wochenstundenplans: Credits, Wochenstunden, Tagesverteilung."""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel

from config.defaults import default_time_buckets
from config.schema import TimeBucket
from models.enums import Weekday
from models.week_schedule import WeekSchedule

logger = logging.getLogger(__name__)


class WeeklySummary(BaseModel):
    """Zusammenfassung eines Wochenstundenplans."""

    total_credits: int
    total_courses: int
    weekly_hours: float
    busiest_day: Weekday
    lightest_day: Weekday
    time_distribution: dict[str, int]   # Bucket-Name → Anzahl Slots
    average_classes_per_day: float
    day_counts: dict[Weekday, int]      # Kurse pro Wochentag


def summarize(
    schedule: WeekSchedule,
    buckets: Optional[Sequence[TimeBucket]] = None,
) -> WeeklySummary:
    """Berechnet alle Kennzahlen in einem Durchlauf.

    - weekly_hours: Σ Slotdauer × Anzahl Tage des Kurses
    - busiest/lightest_day: argmax/argmin der Kurse pro Tag; bei Gleichstand
      gewinnt der erste Tag in der Reihenfolge Montag..Sonntag
    - time_distribution: jeder Slot einmal nach Startstunde; Stunden
      außerhalb aller Buckets werden nicht gezählt
    - average_classes_per_day: Kurse / Tage mit mindestens einem Kurs
    """
    if buckets is None:
        buckets = default_time_buckets()

    total_courses = len(schedule.classes)
    total_credits = sum(c.credits for c in schedule.classes)

    weekly_hours = 0.0
    distribution = {b.name: 0 for b in buckets}
    for block in schedule.classes:
        for slot in block.time_slots:
            weekly_hours += slot.duration_hours * len(block.days)
            hour = slot.start_hour
            for bucket in buckets:
                if bucket.contains(hour):
                    distribution[bucket.name] += 1
                    break

    days = Weekday.ordered()
    day_counts = {day: len(schedule.classes_on(day)) for day in days}

    busiest = lightest = days[0]
    for day in days:
        if day_counts[day] > day_counts[busiest]:
            busiest = day
        if day_counts[day] < day_counts[lightest]:
            lightest = day

    days_with_classes = sum(1 for count in day_counts.values() if count > 0)
    average = total_courses / days_with_classes if days_with_classes else 0.0

    logger.debug(
        f"summarize: {total_courses} Kurse, {weekly_hours:g}h/Woche, "
        f"Spitzentag {busiest.value}"
    )
    return WeeklySummary(
        total_credits=total_credits,
        total_courses=total_courses,
        weekly_hours=weekly_hours,
        busiest_day=busiest,
        lightest_day=lightest,
        time_distribution=distribution,
        average_classes_per_day=average,
        day_counts=day_counts,
    )
