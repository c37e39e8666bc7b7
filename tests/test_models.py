"""Tests für die Pydantic-Datenmodelle (Bewertungen, Notensätze, Stundenplan)."""

from datetime import date, datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from models import (
    Absence,
    Attendance,
    ClassBlock,
    CourseGradeRecord,
    DateRange,
    Evaluation,
    Location,
    TermGrades,
    TimeSlot,
    WeekSchedule,
    Weekday,
)


def _slot(start: str = "08:00", end: str = "09:30") -> TimeSlot:
    return TimeSlot(start_time=start, end_time=end)


# ─── ENUMS ────────────────────────────────────────────────────────────────────

class TestWeekday:
    def test_from_date_monday_first(self):
        """2024-03-04 (Montag) und 2024-03-10 (Sonntag)."""
        assert Weekday.from_date(date(2024, 3, 4)) == Weekday.MONDAY
        assert Weekday.from_date(datetime(2024, 3, 10, 23, 59)) == Weekday.SUNDAY

    def test_shifted_wraps(self):
        assert Weekday.SUNDAY.shifted(1) == Weekday.MONDAY
        assert Weekday.FRIDAY.shifted(3) == Weekday.MONDAY
        assert Weekday.MONDAY.index == 0

    def test_unknown_day_rejected(self):
        with pytest.raises(ValidationError):
            ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=1,
                       days=["funday"], time_slots=[_slot()])


# ─── BEWERTUNG ────────────────────────────────────────────────────────────────

class TestEvaluation:
    def test_submitted_derived_from_score(self):
        assert Evaluation(id="a", name="a", weight=10, max_score=5, score=3).is_submitted is True
        assert Evaluation(id="b", name="b", weight=10, max_score=5).is_submitted is False

    def test_explicit_submitted_kept(self):
        e = Evaluation(id="a", name="a", weight=10, max_score=5, score=3, is_submitted=False)
        assert e.is_submitted is False
        assert e.is_graded is False

    def test_score_above_max_rejected(self):
        with pytest.raises(ValidationError):
            Evaluation(id="a", name="a", weight=10, max_score=5, score=5.5)

    def test_weight_range(self):
        with pytest.raises(ValidationError):
            Evaluation(id="a", name="a", weight=101, max_score=5)
        with pytest.raises(ValidationError):
            Evaluation(id="a", name="a", weight=-1, max_score=5)

    def test_max_score_positive(self):
        with pytest.raises(ValidationError):
            Evaluation(id="a", name="a", weight=10, max_score=0)

    def test_normalized_score(self):
        e = Evaluation(id="a", name="a", weight=10, max_score=20, score=15)
        assert e.normalized_score() == pytest.approx(3.75)

    def test_normalized_score_without_score(self):
        with pytest.raises(ValueError):
            Evaluation(id="a", name="a", weight=10, max_score=20).normalized_score()


class TestCourseGradeRecord:
    def test_code_uppercased(self):
        r = CourseGradeRecord(course_code=" mat101 ", course_name="x", credits=3)
        assert r.course_code == "MAT101"

    def test_weights_above_100_rejected(self):
        with pytest.raises(ValidationError):
            CourseGradeRecord(course_code="X", course_name="x", credits=3, evaluations=[
                Evaluation(id="a", name="a", weight=60, max_score=5),
                Evaluation(id="b", name="b", weight=41, max_score=5),
            ])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError):
            CourseGradeRecord(course_code="X", course_name="x", credits=3, evaluations=[
                Evaluation(id="a", name="a", weight=50, max_score=5),
                Evaluation(id="a", name="b", weight=50, max_score=5),
            ])

    def test_credits_range(self):
        with pytest.raises(ValidationError):
            CourseGradeRecord(course_code="X", course_name="x", credits=0)

    def test_final_grade_negative_rejected(self):
        with pytest.raises(ValidationError):
            CourseGradeRecord(course_code="X", course_name="x", credits=3,
                              final_numeric_grade=-0.5)

    def test_final_grade_upper_bound_left_to_scale(self):
        """Die Obergrenze der Abschlussnote kommt aus der Notenskala, nicht aus dem Modell."""
        record = CourseGradeRecord(course_code="X", course_name="x", credits=3,
                                   final_numeric_grade=8.0)
        assert record.final_numeric_grade == 8.0

    def test_attendance_defaults_empty(self):
        record = CourseGradeRecord(course_code="X", course_name="x", credits=3)
        assert record.attendance.total_classes == 0
        assert record.attendance.absences == []


class TestAttendance:
    def test_attended_above_total_rejected(self):
        with pytest.raises(ValidationError):
            Attendance(total_classes=3, attended_classes=4)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            Attendance(total_classes=-1)

    def test_absence_reason_length(self):
        with pytest.raises(ValidationError):
            Absence(date=datetime(2024, 3, 4), reason="x" * 201)

    def test_roundtrip_with_term(self, tmp_path: Path):
        """Fehlzeiten überstehen das Speichern als JSON."""
        attendance = Attendance(total_classes=10, attended_classes=9, absences=[
            Absence(date=datetime(2024, 3, 4, 8), reason="Krankheit"),
        ])
        term = TermGrades(student_id="s", period_id="2024-1", courses=[
            CourseGradeRecord(course_code="X", course_name="x", credits=3,
                              attendance=attendance),
        ])
        term.save_json(tmp_path / "grades.json")
        loaded = TermGrades.load_json(tmp_path / "grades.json")
        assert loaded.courses[0].attendance == attendance


class TestTermGrades:
    def test_period_format(self):
        with pytest.raises(ValidationError):
            TermGrades(student_id="s", period_id="2024-3")

    def test_get_course_case_insensitive(self):
        term = TermGrades(student_id="s", period_id="2024-1", courses=[
            CourseGradeRecord(course_code="MAT101", course_name="x", credits=3),
        ])
        assert term.get_course("mat101") is not None
        assert term.get_course("FIS101") is None

    def test_json_roundtrip(self, tmp_path: Path):
        term = TermGrades(student_id="s", period_id="2024-2", courses=[
            CourseGradeRecord(course_code="MAT101", course_name="Cálculo", credits=4,
                              evaluations=[Evaluation(id="a", name="P1", weight=40,
                                                      max_score=100, score=85)]),
        ])
        path = tmp_path / "grades.json"
        term.save_json(path)
        loaded = TermGrades.load_json(path)
        assert loaded == term

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            TermGrades.load_json(tmp_path / "fehlt.json")


# ─── STUNDENPLAN ──────────────────────────────────────────────────────────────

class TestTimeSlot:
    def test_zero_padding(self):
        slot = _slot("8:05", "9:30")
        assert slot.start_time == "08:05"
        assert slot.end_time == "09:30"

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError):
            _slot("10:00", "10:00")
        with pytest.raises(ValidationError):
            _slot("10:00", "09:00")

    @pytest.mark.parametrize("value", ["24:00", "10:60", "1000", "ab:cd", ""])
    def test_invalid_format(self, value):
        with pytest.raises(ValidationError):
            _slot(value, "23:00")

    def test_duration(self):
        assert _slot("08:00", "09:30").duration_hours == pytest.approx(1.5)

    def test_location_str(self):
        assert str(Location(building_id="A", room="101")) == "A-101"
        assert str(Location(building_id="A", room="101", full_location="Edificio A")) == "Edificio A"


class TestClassBlock:
    def test_days_deduplicated_in_canonical_order(self):
        block = ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=3,
                           days=[Weekday.FRIDAY, Weekday.MONDAY, Weekday.FRIDAY],
                           time_slots=[_slot()])
        assert block.days == [Weekday.MONDAY, Weekday.FRIDAY]

    def test_days_required(self):
        with pytest.raises(ValidationError):
            ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=3,
                       days=[], time_slots=[_slot()])

    def test_slots_required(self):
        with pytest.raises(ValidationError):
            ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=3,
                       days=[Weekday.MONDAY], time_slots=[])

    def test_credits_positive(self):
        with pytest.raises(ValidationError):
            ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=0,
                       days=[Weekday.MONDAY], time_slots=[_slot()])

    def test_date_range(self):
        rng = DateRange(start=datetime(2024, 2, 1), end=datetime(2024, 5, 31))
        block = ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=3,
                           days=[Weekday.MONDAY], time_slots=[_slot()], date_range=rng)
        assert block.is_active_on(date(2024, 5, 31)) is True
        assert block.is_active_on(date(2024, 6, 1)) is False

    def test_date_range_order(self):
        with pytest.raises(ValidationError):
            DateRange(start=datetime(2024, 5, 1), end=datetime(2024, 2, 1))

    def test_earliest_slot(self):
        block = ClassBlock(course_nrc="1", course_code="X", course_name="X", credits=3,
                           days=[Weekday.MONDAY],
                           time_slots=[_slot("14:00", "15:00"), _slot("08:00", "09:00")])
        assert block.earliest_slot.start_time == "08:00"


class TestWeekSchedule:
    def _schedule(self) -> WeekSchedule:
        return WeekSchedule(student_id="s", period_id="2024-1", classes=[
            ClassBlock(course_nrc="1", course_code="A", course_name="A", credits=3,
                       days=[Weekday.MONDAY, Weekday.WEDNESDAY], time_slots=[_slot()]),
            ClassBlock(course_nrc="2", course_code="B", course_name="B", credits=2,
                       days=[Weekday.TUESDAY], time_slots=[_slot()],
                       date_range=DateRange(start=datetime(2024, 2, 1),
                                            end=datetime(2024, 3, 1))),
        ])

    def test_classes_on(self):
        s = self._schedule()
        assert [c.course_nrc for c in s.classes_on(Weekday.WEDNESDAY)] == ["1"]
        assert s.classes_on(Weekday.SUNDAY) == []

    def test_active_on(self):
        s = self._schedule()
        assert len(s.active_on(date(2024, 2, 15)).classes) == 2
        assert [c.course_nrc for c in s.active_on(date(2024, 4, 1)).classes] == ["1"]
        assert len(s.classes) == 2

    def test_get_class(self):
        assert self._schedule().get_class("2").course_code == "B"
        assert self._schedule().get_class("9") is None

    def test_summary(self):
        text = self._schedule().summary()
        assert "Kurse: 2 (5 Credits)" in text

    def test_json_roundtrip(self, tmp_path: Path):
        s = self._schedule()
        path = tmp_path / "schedule.json"
        s.save_json(path)
        loaded = WeekSchedule.load_json(path)
        assert loaded.classes == s.classes
        assert loaded.created_at is not None
        assert loaded.modified_at is not None
