"""ProblemInstance: vollständiger ITC-2019-Datensatz + Konsistenzprüfung (Pydantic v2).

Die Instanz besitzt alle Räume, Kurse, Studenten, Verteilungs-Constraints und
die Wegezeit-Matrix. Beim Aufbau wird geprüft:
1. Wegezeit-Matrix deckt jeden Raum genau einmal ab
2. Alle Wochen-/Tagesmuster haben die Länge nr_weeks / nr_days
3. Alle referenzierten IDs (Räume, Klassen, Kurse, Eltern) existieren
4. Eltern-Beziehungen bilden einen Wald (keine Zyklen)
"""

import logging
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from config.defaults import MAX_DAYS_PER_WEEK, SLOTS_PER_DAY
from constraints.wrappers import HardConstraint, SoftConstraint
from models.course import Course, CourseClass
from models.errors import NotFoundError, ProblemDefinitionError
from models.room import Room, TravelMatrix
from models.student import Student
from models.timetable import Timetable

logger = logging.getLogger(__name__)


class OptimizationWeights(BaseModel):
    """Gewichte der vier Anteile der ITC-Zielfunktion."""

    time: int = Field(1, ge=1)
    room: int = Field(1, ge=1)
    distribution: int = Field(1, ge=1)
    student: int = Field(1, ge=1)


class ProblemInstance(BaseModel):
    """Vollständige Probleminstanz. Nach dem Aufbau unveränderlich."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = "unbenannt"
    nr_days: int = Field(ge=0, le=MAX_DAYS_PER_WEEK)
    nr_weeks: int = Field(ge=0)
    slots_per_day: int = Field(SLOTS_PER_DAY, ge=0, le=SLOTS_PER_DAY)
    weights: OptimizationWeights = Field(default_factory=OptimizationWeights)

    rooms: list[Room] = []
    courses: list[Course] = []
    students: list[Student] = []
    hard_constraints: list[HardConstraint] = []
    soft_constraints: list[SoftConstraint] = []
    travel: TravelMatrix

    # Indizes (werden in model_post_init befüllt)
    _rooms_by_id: dict[int, Room] = PrivateAttr(default_factory=dict)
    _classes_by_id: dict[int, CourseClass] = PrivateAttr(default_factory=dict)
    _courses_by_id: dict[int, Course] = PrivateAttr(default_factory=dict)
    _course_of_class: dict[int, int] = PrivateAttr(default_factory=dict)
    _students_by_id: dict[int, Student] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._index_rooms()
        self._index_courses()
        self._index_students()
        self._check_travel()
        self._check_time_dimensions()
        self._check_references()
        self._check_parent_forest()

    # ─── Aufbau der Indizes ───────────────────────────────────────────────────

    def _index_rooms(self) -> None:
        for room in self.rooms:
            if room.id in self._rooms_by_id:
                raise ProblemDefinitionError(f"Raum {room.id} ist mehrfach definiert.")
            self._rooms_by_id[room.id] = room

    def _index_courses(self) -> None:
        for course in self.courses:
            if course.id in self._courses_by_id:
                raise ProblemDefinitionError(f"Kurs {course.id} ist mehrfach definiert.")
            self._courses_by_id[course.id] = course
            for course_class in course.iter_classes():
                if course_class.id in self._classes_by_id:
                    raise ProblemDefinitionError(
                        f"Klasse {course_class.id} ist mehrfach definiert."
                    )
                self._classes_by_id[course_class.id] = course_class
                self._course_of_class[course_class.id] = course.id

    def _index_students(self) -> None:
        for student in self.students:
            if student.id in self._students_by_id:
                raise ProblemDefinitionError(f"Student {student.id} ist mehrfach definiert.")
            self._students_by_id[student.id] = student

    # ─── Prüfungen ────────────────────────────────────────────────────────────

    def _check_travel(self) -> None:
        if self.travel.row_count != len(self.rooms):
            raise ProblemDefinitionError(
                f"Wegezeit-Matrix hat {self.travel.row_count} Zeilen, "
                f"es gibt aber {len(self.rooms)} Räume."
            )
        missing = set(self._rooms_by_id) - set(self.travel.room_ids)
        if missing:
            raise ProblemDefinitionError(
                f"Räume ohne Wegezeit-Eintrag: {sorted(missing)}"
            )

    def _check_time_dimensions(self) -> None:
        try:
            for room in self.rooms:
                for window in room.unavailable:
                    window.check_dimensions(self.nr_weeks, self.nr_days)
            for course_class in self._classes_by_id.values():
                for option in course_class.times:
                    option.time.check_dimensions(self.nr_weeks, self.nr_days)
                    if option.time.end > self.slots_per_day:
                        raise ValueError(
                            f"{course_class}: Zeit {option.time} endet nach Slot "
                            f"{self.slots_per_day}."
                        )
        except ValueError as e:
            raise ProblemDefinitionError(str(e)) from e

    def _check_references(self) -> None:
        for course_class in self._classes_by_id.values():
            for option in course_class.rooms or ():
                known = self._rooms_by_id.get(option.room.id)
                if known is None:
                    raise ProblemDefinitionError(
                        f"{course_class} verweist auf unbekannten Raum {option.room.id}."
                    )
                if option.room != known:
                    raise ProblemDefinitionError(
                        f"{course_class}: Raumoption {option.room.id} weicht vom Raum "
                        f"der Instanz ab (Kapazität oder Sperrzeiten)."
                    )
            if course_class.parent_id is not None and course_class.parent_id not in self._classes_by_id:
                raise ProblemDefinitionError(
                    f"{course_class} verweist auf unbekannte Elternklasse {course_class.parent_id}."
                )
        for wrapper in (*self.hard_constraints, *self.soft_constraints):
            for class_id in wrapper.constraint.class_ids:
                if class_id not in self._classes_by_id:
                    raise ProblemDefinitionError(
                        f"Constraint {wrapper.constraint.kind.value} verweist auf "
                        f"unbekannte Klasse {class_id}."
                    )
            if wrapper.constraint.travel is not None and wrapper.constraint.travel is not self.travel:
                raise ProblemDefinitionError(
                    f"Constraint {wrapper.constraint.kind.value} nutzt eine fremde Wegezeit-Matrix."
                )
        for soft in self.soft_constraints:
            if soft.nr_weeks != self.nr_weeks:
                raise ProblemDefinitionError(
                    f"Weiche Constraint {soft.constraint} rechnet mit {soft.nr_weeks} "
                    f"Wochen, die Instanz hat {self.nr_weeks}."
                )
        for student in self.students:
            for course_id in student.course_ids:
                if course_id not in self._courses_by_id:
                    raise ProblemDefinitionError(
                        f"Student {student.id} verlangt unbekannten Kurs {course_id}."
                    )

    def _check_parent_forest(self) -> None:
        # Weiß/Grau/Schwarz-Färbung entlang der Eltern-Zeiger
        done: set[int] = set()
        for start in self._classes_by_id:
            path: list[int] = []
            on_path: set[int] = set()
            current: Optional[int] = start
            while current is not None and current not in done:
                if current in on_path:
                    cycle = path[path.index(current):] + [current]
                    raise ProblemDefinitionError(
                        "Zyklus in Eltern-Beziehungen: " + " → ".join(map(str, cycle))
                    )
                path.append(current)
                on_path.add(current)
                current = self._classes_by_id[current].parent_id
            done.update(path)

    # ─── Zugriff ──────────────────────────────────────────────────────────────

    def room_by_id(self, room_id: int) -> Room:
        try:
            return self._rooms_by_id[room_id]
        except KeyError:
            raise NotFoundError(f"Kein Raum mit ID {room_id}.") from None

    def class_by_id(self, class_id: int) -> CourseClass:
        try:
            return self._classes_by_id[class_id]
        except KeyError:
            raise NotFoundError(f"Keine Klasse mit ID {class_id}.") from None

    def course_by_id(self, course_id: int) -> Course:
        try:
            return self._courses_by_id[course_id]
        except KeyError:
            raise NotFoundError(f"Kein Kurs mit ID {course_id}.") from None

    def student_by_id(self, student_id: int) -> Student:
        try:
            return self._students_by_id[student_id]
        except KeyError:
            raise NotFoundError(f"Kein Student mit ID {student_id}.") from None

    def course_of(self, class_id: int) -> int:
        """ID des Kurses, zu dem die Klasse gehört."""
        try:
            return self._course_of_class[class_id]
        except KeyError:
            raise NotFoundError(f"Keine Klasse mit ID {class_id}.") from None

    def parent_of(self, course_class: CourseClass) -> Optional[CourseClass]:
        if course_class.parent_id is None:
            return None
        return self._classes_by_id[course_class.parent_id]

    def all_classes(self) -> Iterator[CourseClass]:
        """Alle Klassen in Definitionsreihenfolge (Kurs → Konfiguration → Teil)."""
        for course in self.courses:
            yield from course.iter_classes()

    def new_timetable(self) -> Timetable:
        """Leerer Zeitplan mit einem Event pro Klasse."""
        return Timetable(self.all_classes())

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über die Instanz."""
        nr_configs = sum(len(c.configs) for c in self.courses)
        nr_subparts = sum(len(cfg.subparts) for c in self.courses for cfg in c.configs)
        roomless = sum(1 for c in self._classes_by_id.values() if not c.needs_room)
        w = self.weights
        lines = [
            f"Instanz: {self.name}",
            f"Raster: {self.nr_weeks} Wochen × {self.nr_days} Tage × {self.slots_per_day} Slots",
            f"Räume: {len(self.rooms)}",
            f"Kurse: {len(self.courses)} ({nr_configs} Konfigurationen, {nr_subparts} Teile)",
            f"Klassen: {len(self._classes_by_id)}"
            + (f" ({roomless} ohne Raum)" if roomless else ""),
            f"Studenten: {len(self.students)}",
            f"Constraints: {len(self.hard_constraints)} hart, {len(self.soft_constraints)} weich",
            f"Gewichte: Zeit={w.time} Raum={w.room} Verteilung={w.distribution} Student={w.student}",
        ]
        return "\n".join(lines)
