"""Räume, Raumoptionen und Wegezeiten nach ITC 2019 (Pydantic v2)."""

from types import MappingProxyType
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models.errors import ProblemDefinitionError
from models.time import Time


class Room(BaseModel):
    """Ein Raum mit Kapazität und Sperrzeiten.

    Wegezeiten werden nicht hier, sondern zentral in der TravelMatrix der
    Instanz gehalten.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    capacity: int = Field(ge=0)
    unavailable: tuple[Time, ...] = ()

    def is_available(self, time: Time) -> bool:
        """False, wenn `time` eine Sperrzeit des Raums überlappt."""
        return not any(window.overlaps(time) for window in self.unavailable)


class RoomOption(BaseModel):
    """Ein möglicher Raum einer Klasse mit Strafpunkten."""

    model_config = ConfigDict(frozen=True)

    room: Room
    penalty: int = Field(0, ge=0)


RoomRef = Union[Room, int]


def _room_id(room: RoomRef) -> int:
    return room.id if isinstance(room, Room) else room


class TravelMatrix:
    """Symmetrische Wegezeiten (in Slots) zwischen allen Räumen einer Instanz.

    Wird einmal beim Aufbau der Instanz erzeugt und danach nur gelesen.
    Nicht angegebene Paare haben Wegezeit 0.
    """

    def __init__(
        self,
        room_ids: Iterable[int],
        travel: Iterable[tuple[int, int, int]] = (),
    ) -> None:
        ids = list(room_ids)
        if len(set(ids)) != len(ids):
            raise ProblemDefinitionError("Doppelte Raum-IDs in der Wegezeit-Matrix.")
        if any(room_id < 1 for room_id in ids):
            raise ProblemDefinitionError("Raum-IDs müssen ≥ 1 sein.")

        self._index = MappingProxyType({room_id: row for row, room_id in enumerate(ids)})
        matrix = [[0] * len(ids) for _ in ids]
        for a, b, slots in travel:
            if slots < 0:
                raise ProblemDefinitionError(
                    f"Negative Wegezeit zwischen Raum {a} und {b}: {slots}"
                )
            if a not in self._index or b not in self._index:
                raise ProblemDefinitionError(
                    f"Wegezeit verweist auf unbekannten Raum ({a} → {b})."
                )
            i, j = self._index[a], self._index[b]
            matrix[i][j] = slots
            matrix[j][i] = slots
        self._matrix = tuple(tuple(row) for row in matrix)

    @classmethod
    def for_rooms(
        cls, rooms: Iterable[Room], travel: Iterable[tuple[int, int, int]] = ()
    ) -> "TravelMatrix":
        return cls((r.id for r in rooms), travel)

    @property
    def row_count(self) -> int:
        return len(self._matrix)

    @property
    def room_ids(self) -> list[int]:
        return list(self._index)

    def travel_time(self, a: Optional[RoomRef], b: Optional[RoomRef]) -> int:
        """Wegezeit zwischen zwei Räumen; 0 wenn einer der Räume fehlt."""
        if a is None or b is None:
            return 0
        try:
            return self._matrix[self._index[_room_id(a)]][self._index[_room_id(b)]]
        except KeyError as e:
            raise ProblemDefinitionError(
                f"Raum {e.args[0]} ist nicht in der Wegezeit-Matrix enthalten."
            ) from e

    def __repr__(self) -> str:
        return f"TravelMatrix({self.row_count} Räume)"
