"""DistributionConstraint: Art + Parameter + Klassenliste.

Eine einzige Klasse für alle 19 Arten. Die Auswertung verzweigt nach Familie:
paarweise Arten prüfen jedes ungeordnete Klassenpaar (Reihenfolge der Liste,
i < j), aggregierte Arten werten die ganze Liste pro Woche/Tag aus.
"""

import logging
from itertools import combinations
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from constraints.aggregate import AGGREGATE_COUNTERS
from constraints.kinds import ConstraintFamily, ConstraintKind
from constraints.pairwise import PAIR_PREDICATES
from models.event import Event
from models.room import TravelMatrix
from models.timetable import Timetable

logger = logging.getLogger(__name__)


class DistributionConstraint(BaseModel):
    """Eine Verteilungs-Constraint über eine geordnete Liste von Klassen."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ConstraintKind
    class_ids: tuple[int, ...] = Field(min_length=1)
    params: dict[str, int] = {}
    travel: Optional[TravelMatrix] = None   # nur SameAttendees

    @field_validator("class_ids")
    @classmethod
    def _check_class_ids(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if any(class_id < 1 for class_id in v):
            raise ValueError(f"Klassen-IDs müssen ≥ 1 sein: {v}")
        if len(set(v)) != len(v):
            raise ValueError(f"Klasse mehrfach in derselben Constraint: {v}")
        return v

    @model_validator(mode="after")
    def _check_params(self):
        expected = set(self.kind.params)
        if set(self.params) != expected:
            raise ValueError(
                f"{self.kind.value} erwartet Parameter {sorted(expected)}, "
                f"erhalten: {sorted(self.params)}"
            )
        negative = {k: v for k, v in self.params.items() if v < 0}
        if negative:
            raise ValueError(f"{self.kind.value}: Parameter dürfen nicht negativ sein: {negative}")
        if self.kind is ConstraintKind.SAME_ATTENDEES and self.travel is None:
            raise ValueError("SameAttendees benötigt die Wegezeit-Matrix der Instanz.")
        return self

    # ─── Zugriff ───

    def param(self, name: str) -> int:
        return self.params[name]

    @property
    def type_name(self) -> str:
        """ITC-Typname mit Parametern, z.B. 'MaxBlock(60,0)'."""
        if not self.kind.params:
            return self.kind.value
        values = ",".join(str(self.params[p]) for p in self.kind.params)
        return f"{self.kind.value}({values})"

    def events(self, timetable: Timetable) -> list[Event]:
        return [timetable.event(class_id) for class_id in self.class_ids]

    # ─── Auswertung ───────────────────────────────────────────────────────────

    def violations(self, timetable: Timetable) -> Iterator[int]:
        """Liefert pro Verletzung deren Gewicht; paarweise Arten immer 1 pro Paar."""
        events = self.events(timetable)
        if self.kind.family is ConstraintFamily.PAIR:
            check = PAIR_PREDICATES[self.kind]
            for e1, e2 in combinations(events, 2):
                if not check(e1, e2, self):
                    yield 1
        else:
            yield from AGGREGATE_COUNTERS[self.kind](events, self)

    def is_satisfied(self, timetable: Timetable) -> bool:
        """Bricht bei der ersten Verletzung ab."""
        return not any(self.violations(timetable))

    def violation_count(self, timetable: Timetable) -> int:
        return sum(self.violations(timetable))

    def violating_pairs(self, timetable: Timetable) -> list[tuple[int, int]]:
        """Klassenpaare, die das Prädikat verletzen (leer bei aggregierten Arten)."""
        if self.kind.family is not ConstraintFamily.PAIR:
            return []
        check = PAIR_PREDICATES[self.kind]
        return [
            (e1.class_id, e2.class_id)
            for e1, e2 in combinations(self.events(timetable), 2)
            if not check(e1, e2, self)
        ]

    def __str__(self) -> str:
        return f"{self.type_name} {list(self.class_ids)}"
