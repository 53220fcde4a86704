"""Studentenkonflikte: Klassenpaare eines Studenten, die er nicht beide besuchen kann.

Ein Paar ist ein Konflikt, wenn sich die Termine überlappen oder zwischen ihnen
nicht genug Zeit für den Weg zwischen den Räumen bleibt (dasselbe Prädikat wie
SameAttendees). Jedes Paar zählt pro Student genau einmal, egal wie viele
einzelne Termine kollidieren.
"""

from itertools import combinations

from pydantic import BaseModel

from constraints.pairwise import can_attend_both
from models.room import TravelMatrix
from models.timetable import Timetable


class StudentConflict(BaseModel):
    """Ein Konfliktpaar eines Studenten."""

    student_id: int
    class_a: int
    class_b: int
    travel: int          # benötigte Wegezeit zwischen den Räumen (Slots)


def find_student_conflicts(timetable: Timetable, travel: TravelMatrix) -> list[StudentConflict]:
    """Alle Konfliktpaare, sortiert nach Student und Klassen-IDs."""
    conflicts: list[StudentConflict] = []
    for student_id, events in sorted(timetable.events_by_student().items()):
        events.sort(key=lambda e: e.class_id)
        for e1, e2 in combinations(events, 2):
            slots = travel.travel_time(e1.room, e2.room)
            if not can_attend_both(e1, e2, slots):
                conflicts.append(StudentConflict(
                    student_id=student_id,
                    class_a=e1.class_id,
                    class_b=e2.class_id,
                    travel=slots,
                ))
    return conflicts


def count_student_conflicts(timetable: Timetable, travel: TravelMatrix) -> int:
    return len(find_student_conflicts(timetable, travel))
