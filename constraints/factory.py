"""Erzeugt Constraints aus ITC-Typnamen wie 'MaxBlock(60,0)' oder 'SameAttendees'."""

import re
from typing import Iterable, Optional

from constraints.distribution import DistributionConstraint
from constraints.kinds import ConstraintKind
from constraints.wrappers import HardConstraint, SoftConstraint
from models.errors import InvalidArgumentError
from models.room import TravelMatrix

_TYPE_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s*(?:\(([^)]*)\))?\s*$")


def parse_constraint_type(text: str) -> tuple[ConstraintKind, dict[str, int]]:
    """Zerlegt einen ITC-Typnamen in Art und benannte Parameter.

    >>> parse_constraint_type("MaxBreaks(2,12)")
    (<ConstraintKind.MAX_BREAKS: 'MaxBreaks'>, {'R': 2, 'S': 12})
    """
    match = _TYPE_PATTERN.match(text)
    if not match:
        raise InvalidArgumentError(f"Ungültiger Constraint-Typ: '{text}'")
    name, raw_args = match.groups()
    try:
        kind = ConstraintKind(name)
    except ValueError:
        raise InvalidArgumentError(f"Unbekannter Constraint-Typ: '{name}'") from None

    args = [a.strip() for a in raw_args.split(",")] if raw_args and raw_args.strip() else []
    if len(args) != len(kind.params):
        raise InvalidArgumentError(
            f"{name} erwartet {len(kind.params)} Parameter, erhalten: {len(args)} ('{text}')"
        )
    try:
        values = [int(a) for a in args]
    except ValueError:
        raise InvalidArgumentError(f"Parameter von '{text}' müssen ganze Zahlen sein.") from None
    return kind, dict(zip(kind.params, values))


def build_constraint(
    type_text: str,
    class_ids: Iterable[int],
    travel: Optional[TravelMatrix] = None,
) -> DistributionConstraint:
    kind, params = parse_constraint_type(type_text)
    return DistributionConstraint(
        kind=kind,
        class_ids=tuple(class_ids),
        params=params,
        travel=travel if kind is ConstraintKind.SAME_ATTENDEES else None,
    )


def build_hard(
    type_text: str,
    class_ids: Iterable[int],
    travel: Optional[TravelMatrix] = None,
) -> HardConstraint:
    return HardConstraint(constraint=build_constraint(type_text, class_ids, travel))


def build_soft(
    type_text: str,
    class_ids: Iterable[int],
    weight: int,
    nr_weeks: int,
    travel: Optional[TravelMatrix] = None,
) -> SoftConstraint:
    return SoftConstraint(
        constraint=build_constraint(type_text, class_ids, travel),
        weight=weight,
        nr_weeks=nr_weeks,
    )
