from models.errors import (
    TimetablingError,
    InvalidArgumentError,
    NotFoundError,
    AssignmentError,
    UnscheduledEventError,
    ProblemDefinitionError,
    ItcFormatError,
)
from models.time import Time, TimeOption, exclusive, subset_either, first_true_index
from models.room import Room, RoomOption, TravelMatrix
from models.course import CourseClass, Subpart, CourseConfig, Course
from models.student import Student
from models.event import Event
from models.timetable import Timetable

# ProblemInstance hängt von constraints/ ab und wird direkt aus models.problem importiert.

__all__ = [
    "TimetablingError",
    "InvalidArgumentError",
    "NotFoundError",
    "AssignmentError",
    "UnscheduledEventError",
    "ProblemDefinitionError",
    "ItcFormatError",
    "Time",
    "TimeOption",
    "exclusive",
    "subset_either",
    "first_true_index",
    "Room",
    "RoomOption",
    "TravelMatrix",
    "CourseClass",
    "Subpart",
    "CourseConfig",
    "Course",
    "Student",
    "Event",
    "Timetable",
]
