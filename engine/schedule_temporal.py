"""Zeitliche Auswertung eines Wochenstundenplans.

- Nächster Kurs relativ zu einem Zeitpunkt (heute zuerst, dann die
  folgenden sechs Tage mit Umbruch nach Sonntag)
- Laufender Kurs
- Überschneidungsprüfung für einen neuen Kurs (halboffen)
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel

from models.class_block import ClassBlock
from models.enums import ClassStatus, Weekday
from models.timeslot import TimeSlot, to_minutes
from models.week_schedule import WeekSchedule

logger = logging.getLogger(__name__)

_MINUTES_PER_DAY = 24 * 60


class NextClass(BaseModel):
    """Nächster (oder laufender) Kurstermin."""

    class_block: ClassBlock
    time_slot: TimeSlot
    is_today: bool
    day: Weekday
    minutes_until_start: int
    status: ClassStatus = ClassStatus.UPCOMING


def _clock(now: datetime) -> tuple[Weekday, str]:
    """(Wochentag, "HH:MM") des Zeitpunkts; Umrechnung nur an dieser Stelle."""
    return Weekday.from_date(now), f"{now.hour:02d}:{now.minute:02d}"


def _slots_on(schedule: WeekSchedule, day: Weekday) -> list[tuple[ClassBlock, TimeSlot]]:
    return [
        (block, slot)
        for block in schedule.classes_on(day)
        for slot in block.time_slots
    ]


def next_class(schedule: WeekSchedule, now: datetime) -> Optional[NextClass]:
    """Nächster Kurstermin nach `now`.

    Heute zählen nur Slots mit Startzeit strikt nach der aktuellen Minute.
    Das Minimum wird explizit gewählt, da Kurs- und Slotlisten nicht
    chronologisch sortiert sein müssen. Ohne Kurse in der Woche: None.
    """
    current_day, current_time = _clock(now)
    now_minutes = to_minutes(current_time)

    today = [(b, s) for b, s in _slots_on(schedule, current_day) if s.start_time > current_time]
    if today:
        block, slot = min(today, key=lambda pair: pair[1].start_time)
        return NextClass(
            class_block=block,
            time_slot=slot,
            is_today=True,
            day=current_day,
            minutes_until_start=slot.start_minutes - now_minutes,
        )

    for offset in range(1, 7):
        day = current_day.shifted(offset)
        candidates = _slots_on(schedule, day)
        if not candidates:
            continue
        block, slot = min(candidates, key=lambda pair: pair[1].start_time)
        return NextClass(
            class_block=block,
            time_slot=slot,
            is_today=False,
            day=day,
            minutes_until_start=offset * _MINUTES_PER_DAY + slot.start_minutes - now_minutes,
        )

    logger.debug("next_class: keine Kurse im Stundenplan")
    return None


def current_class(schedule: WeekSchedule, now: datetime) -> Optional[NextClass]:
    """Kurs, der zum Zeitpunkt `now` läuft (start ≤ now < end), sonst None."""
    current_day, current_time = _clock(now)
    running = [
        (b, s) for b, s in _slots_on(schedule, current_day)
        if s.start_time <= current_time < s.end_time
    ]
    if not running:
        return None
    block, slot = min(running, key=lambda pair: pair[1].start_time)
    return NextClass(
        class_block=block,
        time_slot=slot,
        is_today=True,
        day=current_day,
        minutes_until_start=0,
        status=ClassStatus.CURRENT,
    )


def blocks_conflict(a: ClassBlock, b: ClassBlock) -> bool:
    """True wenn beide Kurse einen Tag teilen und sich ein Slotpaar überschneidet."""
    if not set(a.days) & set(b.days):
        return False
    return any(
        slot_b.overlaps(slot_a)
        for slot_a in a.time_slots
        for slot_b in b.time_slots
    )


def conflicting_blocks(
    existing_blocks: Iterable[ClassBlock], candidate: ClassBlock
) -> list[ClassBlock]:
    """Alle bestehenden Kurse, mit denen `candidate` kollidiert."""
    return [block for block in existing_blocks if blocks_conflict(block, candidate)]


def has_conflict(existing_blocks: Iterable[ClassBlock], candidate: ClassBlock) -> bool:
    """Prüft, ob ein neuer Kurs mit einem bestehenden kollidiert.

    Aneinanderstoßende Slots (Ende == Beginn) sind kein Konflikt.
    """
    conflicts = conflicting_blocks(existing_blocks, candidate)
    if conflicts:
        logger.debug(
            f"has_conflict: {candidate.label} kollidiert mit "
            f"{', '.join(c.label for c in conflicts)}"
        )
    return bool(conflicts)


def classes_by_day(schedule: WeekSchedule, day: Weekday) -> list[tuple[ClassBlock, TimeSlot]]:
    """Alle (Kurs, Slot)-Paare eines Tages, nach Startzeit sortiert."""
    return sorted(_slots_on(schedule, day), key=lambda pair: pair[1].start_time)


def weekly_view(schedule: WeekSchedule) -> dict[Weekday, list[tuple[ClassBlock, TimeSlot]]]:
    """Wochenansicht Montag..Sonntag (auch leere Tage)."""
    return {day: classes_by_day(schedule, day) for day in Weekday.ordered()}
