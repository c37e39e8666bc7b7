from models.enums import ClassStatus, EvaluationType, GradeStatus, TargetStatus, Weekday
from models.evaluation import Evaluation
from models.course_grade import (
    Absence,
    Attendance,
    CourseGradeRecord,
    CourseGradeState,
    FinalGrade,
    TermGrades,
)
from models.timeslot import Location, TimeSlot
from models.class_block import ClassBlock, DateRange
from models.week_schedule import WeekSchedule

__all__ = [
    "ClassStatus",
    "EvaluationType",
    "GradeStatus",
    "TargetStatus",
    "Weekday",
    "Evaluation",
    "Absence",
    "Attendance",
    "CourseGradeRecord",
    "CourseGradeState",
    "FinalGrade",
    "TermGrades",
    "Location",
    "TimeSlot",
    "ClassBlock",
    "DateRange",
    "WeekSchedule",
]
