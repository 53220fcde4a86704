"""Timetable: genau ein Event pro Klasse der Instanz, adressiert über die Klassen-ID."""

from collections import defaultdict
from typing import Iterable, Iterator, Union

from models.course import CourseClass
from models.errors import NotFoundError, ProblemDefinitionError
from models.event import Event


class Timetable:
    """Kandidatenlösung: ein Event pro Klasse.

    Alle Events werden bei der Konstruktion leer angelegt und danach vom
    Optimierer befüllt. Ein Zeitplan kann also jederzeit halb oder gar nicht
    geplant sein.
    """

    def __init__(self, classes: Iterable[CourseClass]) -> None:
        self._events: dict[int, Event] = {}
        for course_class in classes:
            if course_class.id in self._events:
                raise ProblemDefinitionError(
                    f"Klasse {course_class.id} ist mehrfach vorhanden."
                )
            self._events[course_class.id] = Event(course_class)

    def event(self, ref: Union[CourseClass, int]) -> Event:
        """Event zu einer Klasse (oder Klassen-ID) in O(1)."""
        class_id = ref.id if isinstance(ref, CourseClass) else ref
        try:
            return self._events[class_id]
        except KeyError:
            raise NotFoundError(f"Keine Klasse mit ID {class_id} im Zeitplan.") from None

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events.values())

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, ref: Union[CourseClass, int]) -> bool:
        class_id = ref.id if isinstance(ref, CourseClass) else ref
        return class_id in self._events

    def unscheduled(self) -> list[Event]:
        """Alle Events ohne Zeit oder ohne benötigten Raum."""
        return [e for e in self._events.values() if not e.is_scheduled]

    def is_complete(self) -> bool:
        return not self.unscheduled()

    def events_by_student(self) -> dict[int, list[Event]]:
        """Student-ID → Events, in denen der Student eingeschrieben ist."""
        result: dict[int, list[Event]] = defaultdict(list)
        for event in self._events.values():
            for student in event.students:
                result[student.id].append(event)
        return dict(result)

    def copy(self) -> "Timetable":
        """Schnappschuss für parallele Kandidatenbewertung."""
        clone = Timetable.__new__(Timetable)
        clone._events = {cid: e.copy() for cid, e in self._events.items()}
        return clone

    def __repr__(self) -> str:
        scheduled = len(self) - len(self.unscheduled())
        return f"Timetable({scheduled}/{len(self)} Klassen geplant)"
