"""Tests für Räume, Klassen, Events, Zeitplan und Probleminstanz."""

import pytest
from pydantic import ValidationError

from constraints.factory import build_constraint, build_hard
from constraints.wrappers import SoftConstraint
from models.course import Course, CourseClass, CourseConfig, Subpart
from models.errors import (
    AssignmentError,
    NotFoundError,
    ProblemDefinitionError,
    UnscheduledEventError,
)
from models.problem import OptimizationWeights, ProblemInstance
from models.room import Room, RoomOption, TravelMatrix
from models.student import Student
from models.time import Time, TimeOption
from models.timetable import Timetable


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _time(days: str = "10000", start: int = 0, length: int = 10, weeks: str = "1") -> Time:
    return Time(weeks=weeks, days=days, start=start, length=length)


def _class(class_id: int, limit: int = 10, rooms=None, parent_id=None, times=None) -> CourseClass:
    return CourseClass(
        id=class_id,
        limit=limit,
        times=times or (TimeOption(time=_time()), TimeOption(time=_time(start=20), penalty=2)),
        rooms=rooms,
        parent_id=parent_id,
    )


def _course(course_id: int, *classes: CourseClass) -> Course:
    subparts = [Subpart(id=i + 1, classes=[c]) for i, c in enumerate(classes)]
    return Course(id=course_id, configs=[CourseConfig(id=1, subparts=subparts)])


def _instance(courses, rooms=(), students=(), hard=(), travel=None, **kwargs) -> ProblemInstance:
    rooms = list(rooms)
    return ProblemInstance(
        name=kwargs.pop("name", "test"),
        nr_days=kwargs.pop("nr_days", 5),
        nr_weeks=kwargs.pop("nr_weeks", 1),
        rooms=rooms,
        courses=list(courses),
        students=list(students),
        hard_constraints=list(hard),
        travel=travel or TravelMatrix.for_rooms(rooms),
        **kwargs,
    )


# ─── RÄUME ────────────────────────────────────────────────────────────────────

class TestRoom:
    def test_invalid_id_raises(self):
        with pytest.raises(ValidationError):
            Room(id=0, capacity=10)

    def test_negative_capacity_raises(self):
        with pytest.raises(ValidationError):
            Room(id=1, capacity=-1)

    def test_unavailable_window(self):
        room = Room(id=1, capacity=10, unavailable=(_time(days="10000", start=0, length=50),))
        assert not room.is_available(_time(days="10000", start=40, length=10))
        assert room.is_available(_time(days="10000", start=50, length=10))
        assert room.is_available(_time(days="01000", start=0, length=10))

    def test_room_option_penalty_non_negative(self):
        with pytest.raises(ValidationError):
            RoomOption(room=Room(id=1, capacity=1), penalty=-3)


class TestTravelMatrix:
    def test_symmetric(self):
        m = TravelMatrix([1, 2, 3], [(1, 2, 5), (3, 1, 7)])
        assert m.travel_time(1, 2) == 5
        assert m.travel_time(2, 1) == 5
        assert m.travel_time(1, 3) == 7
        assert m.travel_time(2, 3) == 0
        assert m.row_count == 3

    def test_accepts_rooms_and_none(self):
        r1, r2 = Room(id=1, capacity=1), Room(id=2, capacity=1)
        m = TravelMatrix.for_rooms([r1, r2], [(1, 2, 4)])
        assert m.travel_time(r1, r2) == 4
        assert m.travel_time(r1, None) == 0

    def test_unknown_room_raises(self):
        m = TravelMatrix([1, 2])
        with pytest.raises(ProblemDefinitionError):
            m.travel_time(1, 9)
        with pytest.raises(ProblemDefinitionError):
            TravelMatrix([1], [(1, 2, 3)])

    def test_negative_travel_raises(self):
        with pytest.raises(ProblemDefinitionError):
            TravelMatrix([1, 2], [(1, 2, -1)])

    def test_duplicate_room_raises(self):
        with pytest.raises(ProblemDefinitionError):
            TravelMatrix([1, 1])


# ─── KLASSEN ──────────────────────────────────────────────────────────────────

class TestCourseClass:
    def test_needs_room(self):
        room = Room(id=1, capacity=10)
        assert _class(1, rooms=(RoomOption(room=room),)).needs_room
        assert not _class(2).needs_room
        assert not _class(3, rooms=()).needs_room

    def test_own_parent_raises(self):
        with pytest.raises(ValidationError):
            _class(1, parent_id=1)

    @pytest.mark.parametrize("field,value", [("id", 0), ("limit", -1)])
    def test_invalid_values_raise(self, field: str, value: int):
        kwargs = {"id": 1, "limit": 1, field: value}
        with pytest.raises(ValidationError):
            CourseClass(**kwargs)

    def test_course_iterates_classes(self):
        course = _course(1, _class(1), _class(2))
        assert [c.id for c in course.iter_classes()] == [1, 2]
        assert course.class_ids() == {1, 2}


# ─── EVENT ────────────────────────────────────────────────────────────────────

class TestEvent:
    def _timetable(self, *classes: CourseClass) -> Timetable:
        return Timetable(classes)

    def test_assign_time_from_options(self):
        c = _class(1)
        e = self._timetable(c).event(1)
        e.assign_time(c.times[1])
        assert e.time.start == 20
        assert e.time_option.penalty == 2

    def test_assign_foreign_time_raises(self):
        e = self._timetable(_class(1)).event(1)
        with pytest.raises(AssignmentError):
            e.assign_time(TimeOption(time=_time(start=100)))

    def test_assign_time_twice_raises(self):
        c = _class(1)
        e = self._timetable(c).event(1)
        e.assign_time(c.times[0])
        with pytest.raises(AssignmentError):
            e.assign_time(c.times[1])

    def test_assign_room_without_need_raises(self):
        e = self._timetable(_class(1)).event(1)
        with pytest.raises(AssignmentError):
            e.assign_room(RoomOption(room=Room(id=1, capacity=10)))

    def test_assign_foreign_room_raises(self):
        c = _class(1, rooms=(RoomOption(room=Room(id=1, capacity=10)),))
        e = self._timetable(c).event(1)
        with pytest.raises(AssignmentError):
            e.assign_room(RoomOption(room=Room(id=2, capacity=10)))

    def test_room_too_small_for_enrollment_raises(self):
        small = RoomOption(room=Room(id=1, capacity=1))
        c = _class(1, limit=5, rooms=(small,))
        tt = self._timetable(c)
        e = tt.event(1)
        e.enroll(Student(id=1), tt)
        e.enroll(Student(id=2), tt)
        with pytest.raises(AssignmentError):
            e.assign_room(small)

    def test_enroll_over_limit_raises(self):
        tt = self._timetable(_class(1, limit=1))
        tt.event(1).enroll(Student(id=1), tt)
        with pytest.raises(AssignmentError):
            tt.event(1).enroll(Student(id=2), tt)

    def test_enroll_into_full_room_raises(self):
        option = RoomOption(room=Room(id=1, capacity=1))
        c = _class(1, limit=5, rooms=(option,))
        tt = self._timetable(c)
        tt.event(1).assign_room(option)
        tt.event(1).enroll(Student(id=1), tt)
        with pytest.raises(AssignmentError):
            tt.event(1).enroll(Student(id=2), tt)

    def test_enroll_twice_raises(self):
        tt = self._timetable(_class(1))
        tt.event(1).enroll(Student(id=1), tt)
        with pytest.raises(AssignmentError):
            tt.event(1).enroll(Student(id=1), tt)

    def test_enroll_requires_parent(self):
        tt = self._timetable(_class(1), _class(2, parent_id=1))
        student = Student(id=7)
        with pytest.raises(AssignmentError, match="Elternklasse"):
            tt.event(2).enroll(student, tt)
        tt.event(1).enroll(student, tt)
        tt.event(2).enroll(student, tt)
        assert tt.event(2).has_student(student)

    def test_unscheduled_access_raises(self):
        room = RoomOption(room=Room(id=1, capacity=10))
        c = _class(1, rooms=(room,))
        e = self._timetable(c).event(1)
        with pytest.raises(UnscheduledEventError):
            _ = e.time
        e.assign_time(c.times[0])
        with pytest.raises(UnscheduledEventError):
            _ = e.room
        assert not e.is_scheduled

    def test_roomless_class_has_no_room(self):
        c = _class(1)
        e = self._timetable(c).event(1)
        e.assign_time(c.times[0])
        assert e.room is None
        assert e.is_scheduled


# ─── ZEITPLAN ─────────────────────────────────────────────────────────────────

class TestTimetable:
    def test_one_event_per_class(self):
        classes = [_class(3), _class(1), _class(2)]
        tt = Timetable(classes)
        assert len(tt) == 3
        assert tt.event(classes[0]) is tt.event(3)
        assert 2 in tt and 9 not in tt

    def test_duplicate_class_raises(self):
        with pytest.raises(ProblemDefinitionError):
            Timetable([_class(1), _class(1)])

    def test_unknown_class_raises(self):
        with pytest.raises(NotFoundError):
            Timetable([_class(1)]).event(2)

    def test_is_complete(self):
        c = _class(1)
        tt = Timetable([c])
        assert not tt.is_complete()
        tt.event(1).assign_time(c.times[0])
        assert tt.is_complete()

    def test_copy_is_independent(self):
        c = _class(1)
        tt = Timetable([c])
        snapshot = tt.copy()
        tt.event(1).assign_time(c.times[0])
        tt.event(1).enroll(Student(id=1), tt)
        assert snapshot.event(1).time_option is None
        assert snapshot.event(1).students == []

    def test_events_by_student(self):
        tt = Timetable([_class(1), _class(2)])
        s = Student(id=4)
        tt.event(1).enroll(s, tt)
        tt.event(2).enroll(s, tt)
        assert sorted(e.class_id for e in tt.events_by_student()[4]) == [1, 2]


# ─── PROBLEMINSTANZ ───────────────────────────────────────────────────────────

class TestProblemInstance:
    def test_accessors(self):
        room = Room(id=5, capacity=10)
        c1 = _class(1, rooms=(RoomOption(room=room),))
        c2 = _class(2, parent_id=1)
        inst = _instance([_course(10, c1, c2)], rooms=[room],
                         students=[Student(id=1, course_ids=(10,))])
        assert inst.class_by_id(2).parent_id == 1
        assert inst.parent_of(c2) == c1
        assert inst.parent_of(c1) is None
        assert inst.room_by_id(5) == room
        assert inst.course_by_id(10).id == 10
        assert inst.course_of(2) == 10
        assert inst.student_by_id(1).course_ids == (10,)
        assert [c.id for c in inst.all_classes()] == [1, 2]
        assert len(inst.new_timetable()) == 2

    def test_unknown_lookup_raises(self):
        inst = _instance([_course(1, _class(1))])
        with pytest.raises(NotFoundError):
            inst.class_by_id(99)
        with pytest.raises(NotFoundError):
            inst.room_by_id(1)

    def test_student_needs_class(self):
        inst = _instance([_course(1, _class(1)), _course(2, _class(2))])
        student = Student(id=1, course_ids=(2,))
        assert student.needs_class(inst.class_by_id(2), inst)
        assert not student.needs_class(inst.class_by_id(1), inst)

    def test_default_weights(self):
        inst = _instance([_course(1, _class(1))])
        assert inst.weights == OptimizationWeights(time=1, room=1, distribution=1, student=1)

    def test_weight_below_one_raises(self):
        with pytest.raises(ValidationError):
            OptimizationWeights(time=0)

    @pytest.mark.parametrize("field,value", [("nr_days", 8), ("nr_days", -1),
                                             ("nr_weeks", -1), ("slots_per_day", 289)])
    def test_invalid_dimensions_raise(self, field: str, value: int):
        with pytest.raises(ValidationError):
            _instance([], **{field: value})

    def test_travel_row_count_mismatch_raises(self):
        rooms = [Room(id=1, capacity=1), Room(id=2, capacity=1)]
        with pytest.raises(ValueError, match="Wegezeit-Matrix"):
            _instance([], rooms=rooms, travel=TravelMatrix([1]))

    def test_time_dimension_mismatch_raises(self):
        c = _class(1, times=(TimeOption(time=_time(days="1111111")),))
        with pytest.raises(ValueError, match="Tagesmuster"):
            _instance([_course(1, c)], nr_days=5)

    def test_unknown_parent_raises(self):
        with pytest.raises(ValueError, match="Elternklasse"):
            _instance([_course(1, _class(1, parent_id=7))])

    def test_parent_cycle_raises(self):
        with pytest.raises(ValueError, match="Zyklus"):
            _instance([_course(1, _class(1, parent_id=2), _class(2, parent_id=1))])

    def test_forward_parent_reference_is_allowed(self):
        inst = _instance([_course(1, _class(1, parent_id=2), _class(2))])
        assert inst.parent_of(inst.class_by_id(1)).id == 2

    def test_duplicate_class_raises(self):
        with pytest.raises(ValueError, match="mehrfach"):
            _instance([_course(1, _class(1)), _course(2, _class(1))])

    def test_constraint_with_unknown_class_raises(self):
        with pytest.raises(ValueError, match="unbekannte Klasse"):
            _instance([_course(1, _class(1))], hard=[build_hard("SameStart", [1, 2])])

    def test_unknown_course_of_student_raises(self):
        with pytest.raises(ValueError, match="unbekannten Kurs"):
            _instance([_course(1, _class(1))], students=[Student(id=1, course_ids=(3,))])

    def test_soft_constraint_with_other_week_count_raises(self):
        """Ohne passende Wochenzahl würde MaxDayLoad nicht gemittelt."""
        c = _class(1, times=(TimeOption(time=_time(weeks="11", length=5)),))
        soft = SoftConstraint(constraint=build_constraint("MaxDayLoad(0)", [1]), weight=3)
        with pytest.raises(ValueError, match="Wochen"):
            _instance([_course(1, c)], nr_weeks=2, soft_constraints=[soft])

    def test_soft_constraint_week_average_over_two_weeks(self):
        c = _class(1, times=(TimeOption(time=_time(weeks="11", length=5)),))
        soft = SoftConstraint(constraint=build_constraint("MaxDayLoad(0)", [1]),
                              weight=3, nr_weeks=2)
        inst = _instance([_course(1, c)], nr_weeks=2, soft_constraints=[soft])
        tt = inst.new_timetable()
        tt.event(1).assign_time(c.times[0])
        # 5 Slots in jeder der beiden Wochen → (3 × 10) // 2
        assert inst.soft_constraints[0].penalty(tt) == 15

    def test_room_option_differing_from_instance_room_raises(self):
        room = Room(id=1, capacity=10)
        stale = Room(id=1, capacity=50)
        c = _class(1, rooms=(RoomOption(room=stale),))
        with pytest.raises(ValueError, match="weicht vom Raum"):
            _instance([_course(1, c)], rooms=[room])

    def test_equal_room_option_is_accepted(self):
        c = _class(1, rooms=(RoomOption(room=Room(id=1, capacity=10)),))
        inst = _instance([_course(1, c)], rooms=[Room(id=1, capacity=10)])
        assert inst.class_by_id(1).rooms[0].room == inst.room_by_id(1)

    def test_summary(self):
        room = Room(id=1, capacity=10)
        inst = _instance([_course(1, _class(1, rooms=(RoomOption(room=room),)), _class(2))],
                         rooms=[room], name="mini")
        text = inst.summary()
        assert "Instanz: mini" in text
        assert "Klassen: 2 (1 ohne Raum)" in text
        assert "Räume: 1" in text
