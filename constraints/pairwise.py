"""Paarweise Prädikate der Verteilungs-Constraints.

Jedes Prädikat bekommt zwei geplante Events und die Constraint (für Parameter
und Wegezeiten) und liefert True, wenn das Paar die Regel erfüllt. Die
Reihenfolge e1/e2 entspricht der Reihenfolge in der Klassenliste, was nur für
Precedence eine Rolle spielt.
"""

from typing import TYPE_CHECKING, Callable

from constraints.kinds import ConstraintKind
from models.event import Event
from models.time import exclusive, first_true_index, subset_either

if TYPE_CHECKING:
    from constraints.distribution import DistributionConstraint

PairPredicate = Callable[[Event, Event, "DistributionConstraint"], bool]


def _apart(e1: Event, e2: Event) -> bool:
    """Nie am selben Tag: Tage oder Wochen disjunkt."""
    t1, t2 = e1.time, e2.time
    return exclusive(t1.days, t2.days) or exclusive(t1.weeks, t2.weeks)


def _disjoint_in_day(e1: Event, e2: Event) -> bool:
    t1, t2 = e1.time, e2.time
    return t1.end <= t2.start or t2.end <= t1.start


# ─── Zeit ─────────────────────────────────────────────────────────────────────

def same_start(e1: Event, e2: Event, c) -> bool:
    return e1.time.start == e2.time.start


def same_time(e1: Event, e2: Event, c) -> bool:
    t1, t2 = e1.time, e2.time
    return (t1.start <= t2.start and t2.end <= t1.end) or (
        t2.start <= t1.start and t1.end <= t2.end
    )


def different_time(e1: Event, e2: Event, c) -> bool:
    return _disjoint_in_day(e1, e2)


def same_days(e1: Event, e2: Event, c) -> bool:
    return subset_either(e1.time.days, e2.time.days)


def different_days(e1: Event, e2: Event, c) -> bool:
    return exclusive(e1.time.days, e2.time.days)


def same_weeks(e1: Event, e2: Event, c) -> bool:
    return subset_either(e1.time.weeks, e2.time.weeks)


def different_weeks(e1: Event, e2: Event, c) -> bool:
    return exclusive(e1.time.weeks, e2.time.weeks)


def overlap(e1: Event, e2: Event, c) -> bool:
    return not _disjoint_in_day(e1, e2) and not _apart(e1, e2)


def not_overlap(e1: Event, e2: Event, c) -> bool:
    return _disjoint_in_day(e1, e2) or _apart(e1, e2)


def precedence(e1: Event, e2: Event, c) -> bool:
    """e1 (früher in der Liste) muss vor e2 liegen: erste Woche, dann erster Tag, dann Uhrzeit."""
    t1, t2 = e1.time, e2.time
    w1, w2 = first_true_index(t1.weeks), first_true_index(t2.weeks)
    if w1 != w2:
        return w1 < w2
    d1, d2 = first_true_index(t1.days), first_true_index(t2.days)
    if d1 != d2:
        return d1 < d2
    return t1.end <= t2.start


def work_day(e1: Event, e2: Event, c) -> bool:
    t1, t2 = e1.time, e2.time
    return _apart(e1, e2) or max(t1.end, t2.end) - min(t1.start, t2.start) <= c.param("S")


def min_gap(e1: Event, e2: Event, c) -> bool:
    t1, t2 = e1.time, e2.time
    gap = c.param("G")
    return _apart(e1, e2) or t1.end + gap <= t2.start or t2.end + gap <= t1.start


# ─── Räume ────────────────────────────────────────────────────────────────────

def same_room(e1: Event, e2: Event, c) -> bool:
    r1, r2 = e1.room, e2.room
    if r1 is None or r2 is None:
        return True
    return r1.id == r2.id


def different_room(e1: Event, e2: Event, c) -> bool:
    r1, r2 = e1.room, e2.room
    if r1 is None or r2 is None:
        return True
    return r1.id != r2.id


def same_attendees(e1: Event, e2: Event, c) -> bool:
    """Keine Überlappung und genug Zeit für den Weg zwischen den Räumen."""
    return can_attend_both(e1, e2, c.travel.travel_time(e1.room, e2.room))


def can_attend_both(e1: Event, e2: Event, travel: int) -> bool:
    """Gemeinsames Prädikat für SameAttendees und Studentenkonflikte."""
    t1, t2 = e1.time, e2.time
    return (
        t1.end + travel <= t2.start
        or t2.end + travel <= t1.start
        or _apart(e1, e2)
    )


PAIR_PREDICATES: dict[ConstraintKind, PairPredicate] = {
    ConstraintKind.SAME_START: same_start,
    ConstraintKind.SAME_TIME: same_time,
    ConstraintKind.DIFFERENT_TIME: different_time,
    ConstraintKind.SAME_DAYS: same_days,
    ConstraintKind.DIFFERENT_DAYS: different_days,
    ConstraintKind.SAME_WEEKS: same_weeks,
    ConstraintKind.DIFFERENT_WEEKS: different_weeks,
    ConstraintKind.OVERLAP: overlap,
    ConstraintKind.NOT_OVERLAP: not_overlap,
    ConstraintKind.SAME_ROOM: same_room,
    ConstraintKind.DIFFERENT_ROOM: different_room,
    ConstraintKind.SAME_ATTENDEES: same_attendees,
    ConstraintKind.PRECEDENCE: precedence,
    ConstraintKind.WORK_DAY: work_day,
    ConstraintKind.MIN_GAP: min_gap,
}
