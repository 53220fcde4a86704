"""Event: der veränderliche Planungszustand einer Klasse.

Ein Event startet leer und wird vom externen Optimierer befüllt – Zeit und
Raum je genau einmal, Studenten schrittweise. Es gibt kein Zurücksetzen.

Die Vertragsprüfungen in assign_time / assign_room / enroll laufen nur unter
`__debug__`; mit `python -O` werden sie übersprungen.
"""

from typing import TYPE_CHECKING, Optional

from models.course import CourseClass
from models.errors import AssignmentError, UnscheduledEventError
from models.room import Room, RoomOption
from models.student import Student
from models.time import Time, TimeOption

if TYPE_CHECKING:
    from models.timetable import Timetable


class Event:
    """Geplante Klasse: gewählte Zeit, gewählter Raum, eingeschriebene Studenten."""

    __slots__ = ("course_class", "_time", "_room", "_students")

    def __init__(self, course_class: CourseClass) -> None:
        self.course_class = course_class
        self._time: Optional[TimeOption] = None
        self._room: Optional[RoomOption] = None
        self._students: dict[int, Student] = {}

    # ─── Zustand ──────────────────────────────────────────────────────────────

    @property
    def class_id(self) -> int:
        return self.course_class.id

    @property
    def time_option(self) -> Optional[TimeOption]:
        return self._time

    @property
    def room_option(self) -> Optional[RoomOption]:
        return self._room

    @property
    def students(self) -> list[Student]:
        return list(self._students.values())

    @property
    def is_scheduled(self) -> bool:
        """Zeit gesetzt und – falls benötigt – Raum gesetzt."""
        if self._time is None:
            return False
        return self._room is not None or not self.course_class.needs_room

    def has_student(self, student: Student) -> bool:
        return student.id in self._students

    # ─── Zugriff für die Auswertung ──────────────────────────────────────────

    @property
    def time(self) -> Time:
        """Gewählte Zeit. Ohne Zeitzuweisung ist die Auswertung undefiniert."""
        if self._time is None:
            raise UnscheduledEventError(f"Klasse {self.class_id} hat keine Zeit zugewiesen.")
        return self._time.time

    @property
    def room(self) -> Optional[Room]:
        """Gewählter Raum; None nur bei Klassen ohne Raumbedarf."""
        if self._room is None:
            if self.course_class.needs_room:
                raise UnscheduledEventError(
                    f"Klasse {self.class_id} benötigt einen Raum, hat aber keinen."
                )
            return None
        return self._room.room

    # ─── Zuweisung ────────────────────────────────────────────────────────────

    def assign_time(self, option: TimeOption) -> None:
        """Setzt die Zeit. Nur Optionen aus der Liste der Klasse sind erlaubt."""
        if __debug__:
            if self._time is not None:
                raise AssignmentError(f"Klasse {self.class_id} hat bereits eine Zeit.")
            if not self.course_class.has_time(option):
                raise AssignmentError(
                    f"Zeit {option.time} ist keine Option von Klasse {self.class_id}."
                )
        self._time = option

    def assign_room(self, option: RoomOption) -> None:
        """Setzt den Raum. Die aktuelle Teilnehmerzahl muss hineinpassen."""
        if __debug__:
            if not self.course_class.needs_room:
                raise AssignmentError(f"Klasse {self.class_id} benötigt keinen Raum.")
            if self._room is not None:
                raise AssignmentError(f"Klasse {self.class_id} hat bereits einen Raum.")
            if not self.course_class.has_room(option):
                raise AssignmentError(
                    f"Raum {option.room.id} ist keine Option von Klasse {self.class_id}."
                )
            if len(self._students) > option.room.capacity:
                raise AssignmentError(
                    f"Raum {option.room.id} (Kapazität {option.room.capacity}) zu klein "
                    f"für {len(self._students)} Studenten in Klasse {self.class_id}."
                )
        self._room = option

    def enroll(self, student: Student, timetable: "Timetable") -> None:
        """Schreibt einen Studenten ein.

        Die Elternklasse muss den Studenten bereits enthalten. Ob der Student
        den Kurs überhaupt nachfragt, wird hier nicht geprüft (siehe
        Student.needs_class).
        """
        if __debug__:
            if student.id in self._students:
                raise AssignmentError(
                    f"Student {student.id} ist bereits in Klasse {self.class_id}."
                )
            if len(self._students) >= self.course_class.limit:
                raise AssignmentError(
                    f"Klasse {self.class_id} hat ihr Limit ({self.course_class.limit}) erreicht."
                )
            if self._room is not None and len(self._students) >= self._room.room.capacity:
                raise AssignmentError(
                    f"Raum {self._room.room.id} von Klasse {self.class_id} ist voll."
                )
            parent_id = self.course_class.parent_id
            if parent_id is not None and not timetable.event(parent_id).has_student(student):
                raise AssignmentError(
                    f"Student {student.id} muss zuerst die Elternklasse {parent_id} "
                    f"von Klasse {self.class_id} belegen."
                )
        self._students[student.id] = student

    def copy(self) -> "Event":
        """Unabhängige Kopie des Zustands (Klasse und Optionen sind unveränderlich)."""
        clone = Event(self.course_class)
        clone._time = self._time
        clone._room = self._room
        clone._students = dict(self._students)
        return clone

    def __repr__(self) -> str:
        time = str(self._time.time) if self._time else "-"
        room = self._room.room.id if self._room else "-"
        return (
            f"Event(Klasse {self.class_id}, Zeit={time}, Raum={room}, "
            f"Studenten={len(self._students)})"
        )
