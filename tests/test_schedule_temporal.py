"""Tests für die zeitliche Auswertung des Stundenplans (engine.schedule_temporal)."""

from datetime import datetime

import pytest

from engine.schedule_temporal import (
    blocks_conflict,
    classes_by_day,
    conflicting_blocks,
    current_class,
    has_conflict,
    next_class,
    weekly_view,
)
from models.class_block import ClassBlock
from models.enums import ClassStatus, Weekday
from models.timeslot import TimeSlot
from models.week_schedule import WeekSchedule

# 2024-03-04 ist ein Montag
MONDAY = datetime(2024, 3, 4)


def _at(day_offset: int, hour: int, minute: int = 0) -> datetime:
    return MONDAY.replace(day=4 + day_offset, hour=hour, minute=minute)


def _block(nrc: str, days: list[Weekday], *slots: tuple[str, str]) -> ClassBlock:
    return ClassBlock(
        course_nrc=nrc,
        course_code=f"C{nrc}",
        course_name=f"Kurs {nrc}",
        credits=3,
        days=days,
        time_slots=[TimeSlot(start_time=s, end_time=e) for s, e in slots],
    )


def _schedule(*blocks: ClassBlock) -> WeekSchedule:
    return WeekSchedule(student_id="s1", period_id="2024-1", classes=list(blocks))


# ─── NÄCHSTER KURS ────────────────────────────────────────────────────────────

class TestNextClass:
    def test_skips_past_class_today(self):
        """Mi 09:00, Kurse Mi 08:00 und Fr 10:00 → Freitag."""
        schedule = _schedule(
            _block("1", [Weekday.WEDNESDAY], ("08:00", "09:30")),
            _block("2", [Weekday.FRIDAY], ("10:00", "11:30")),
        )
        nxt = next_class(schedule, _at(2, 9))
        assert nxt is not None
        assert nxt.is_today is False
        assert nxt.day == Weekday.FRIDAY
        assert nxt.class_block.course_nrc == "2"
        assert nxt.minutes_until_start == 2 * 24 * 60 + 60

    def test_later_today(self):
        """Späterer Kurs am selben Tag wird bevorzugt."""
        schedule = _schedule(
            _block("1", [Weekday.WEDNESDAY], ("14:00", "15:30")),
            _block("2", [Weekday.THURSDAY], ("07:00", "08:30")),
        )
        nxt = next_class(schedule, _at(2, 9))
        assert nxt.is_today is True
        assert nxt.day == Weekday.WEDNESDAY
        assert nxt.minutes_until_start == 5 * 60
        assert nxt.status == ClassStatus.UPCOMING

    def test_start_equal_now_not_upcoming(self):
        """Start genau jetzt zählt nicht (strikt größer)."""
        schedule = _schedule(
            _block("1", [Weekday.WEDNESDAY], ("09:00", "10:00")),
            _block("2", [Weekday.THURSDAY], ("09:00", "10:00")),
        )
        nxt = next_class(schedule, _at(2, 9))
        assert nxt.day == Weekday.THURSDAY

    def test_earliest_chosen_regardless_of_order(self):
        """Unsortierte Eingabe: der früheste Start des Tages gewinnt."""
        schedule = _schedule(
            _block("late", [Weekday.FRIDAY], ("16:00", "18:00")),
            _block("early", [Weekday.FRIDAY], ("10:00", "12:00"), ("07:00", "08:00")),
        )
        nxt = next_class(schedule, _at(2, 9))
        assert nxt.class_block.course_nrc == "early"
        assert nxt.time_slot.start_time == "07:00"

    def test_wraps_after_sunday(self):
        """Sa 20:00, nur Montagskurs → nächster Montag."""
        schedule = _schedule(_block("1", [Weekday.MONDAY], ("08:00", "10:00")))
        nxt = next_class(schedule, _at(5, 20))
        assert nxt.day == Weekday.MONDAY
        assert nxt.is_today is False
        assert nxt.minutes_until_start == 2 * 24 * 60 - 12 * 60

    def test_same_weekday_next_week_not_found(self):
        """Nur heutiger, bereits vergangener Kurs → None (kein Rücksprung auf heute)."""
        schedule = _schedule(_block("1", [Weekday.WEDNESDAY], ("08:00", "09:00")))
        assert next_class(schedule, _at(2, 10)) is None

    def test_empty_schedule(self):
        assert next_class(_schedule(), _at(0, 8)) is None

    def test_single_digit_hour_normalized(self):
        """Einstellige Stunde wie "8:00" wird nullgepolstert und vor "10:00" einsortiert."""
        schedule = _schedule(
            _block("1", [Weekday.MONDAY], ("8:00", "9:00")),
            _block("2", [Weekday.MONDAY], ("10:00", "11:00")),
        )
        nxt = next_class(schedule, _at(0, 7))
        assert nxt.class_block.course_nrc == "1"


class TestCurrentClass:
    def test_running(self):
        schedule = _schedule(_block("1", [Weekday.MONDAY], ("08:00", "10:00")))
        cur = current_class(schedule, _at(0, 9, 15))
        assert cur is not None
        assert cur.status == ClassStatus.CURRENT
        assert cur.minutes_until_start == 0

    def test_end_is_exclusive(self):
        schedule = _schedule(_block("1", [Weekday.MONDAY], ("08:00", "10:00")))
        assert current_class(schedule, _at(0, 10)) is None
        assert current_class(schedule, _at(0, 8)) is not None


# ─── ÜBERSCHNEIDUNGEN ─────────────────────────────────────────────────────────

class TestConflicts:
    def test_touching_slots_do_not_conflict(self):
        """09:00–10:00 und 10:00–11:00 am selben Tag → kein Konflikt."""
        a = _block("a", [Weekday.MONDAY], ("09:00", "10:00"))
        b = _block("b", [Weekday.MONDAY], ("10:00", "11:00"))
        assert has_conflict([a], b) is False

    def test_overlapping_slots_conflict(self):
        """09:00–10:30 und 10:00–11:00 am selben Tag → Konflikt."""
        a = _block("a", [Weekday.MONDAY], ("09:00", "10:30"))
        b = _block("b", [Weekday.MONDAY], ("10:00", "11:00"))
        assert has_conflict([a], b) is True

    def test_different_days_no_conflict(self):
        a = _block("a", [Weekday.MONDAY], ("09:00", "10:30"))
        b = _block("b", [Weekday.TUESDAY], ("09:00", "10:30"))
        assert has_conflict([a], b) is False

    def test_shared_day_among_several(self):
        a = _block("a", [Weekday.MONDAY, Weekday.WEDNESDAY], ("09:00", "10:30"))
        b = _block("b", [Weekday.WEDNESDAY, Weekday.FRIDAY], ("10:00", "12:00"))
        assert has_conflict([a], b) is True

    @pytest.mark.parametrize("slot_a, slot_b", [
        (("09:00", "10:30"), ("10:00", "11:00")),
        (("09:00", "10:00"), ("10:00", "11:00")),
        (("08:00", "12:00"), ("09:00", "10:00")),
        (("13:00", "14:00"), ("09:00", "10:00")),
    ])
    def test_symmetric(self, slot_a, slot_b):
        """Konfliktprüfung ist symmetrisch."""
        a = _block("a", [Weekday.THURSDAY], slot_a)
        b = _block("b", [Weekday.THURSDAY], slot_b)
        assert has_conflict([a], b) == has_conflict([b], a)
        assert blocks_conflict(a, b) == blocks_conflict(b, a)

    def test_conflicting_blocks_lists_all(self):
        a = _block("a", [Weekday.MONDAY], ("08:00", "10:00"))
        b = _block("b", [Weekday.MONDAY], ("10:00", "12:00"))
        c = _block("c", [Weekday.MONDAY], ("09:00", "09:30"))
        candidate = _block("x", [Weekday.MONDAY], ("09:15", "10:15"))
        assert [blk.course_nrc for blk in conflicting_blocks([a, b, c], candidate)] == ["a", "b", "c"]

    def test_empty_existing(self):
        assert has_conflict([], _block("x", [Weekday.MONDAY], ("08:00", "09:00"))) is False


# ─── WOCHENANSICHT ────────────────────────────────────────────────────────────

class TestWeeklyView:
    def test_sorted_by_start(self):
        schedule = _schedule(
            _block("late", [Weekday.MONDAY], ("14:00", "15:00")),
            _block("early", [Weekday.MONDAY], ("08:00", "09:00")),
        )
        entries = classes_by_day(schedule, Weekday.MONDAY)
        assert [b.course_nrc for b, _ in entries] == ["early", "late"]

    def test_all_days_present(self):
        view = weekly_view(_schedule(_block("1", [Weekday.FRIDAY], ("08:00", "09:00"))))
        assert list(view) == Weekday.ordered()
        assert view[Weekday.MONDAY] == []
        assert len(view[Weekday.FRIDAY]) == 1
