"""Kurse, Konfigurationen, Teile und Klassen nach ITC 2019 (Pydantic v2).

Hierarchie: Course → CourseConfig → Subpart → CourseClass.
Ein Student wählt pro Kurs genau eine Konfiguration und belegt daraus je
Subpart genau eine Klasse. Eltern-Beziehungen zwischen Klassen werden als
`parent_id` gespeichert und erst in der ProblemInstance aufgelöst.
"""

from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.room import RoomOption
from models.time import TimeOption


class CourseClass(BaseModel):
    """Eine Klasse (Veranstaltung) mit möglichen Zeiten und Räumen.

    `rooms=None` oder eine leere Liste bedeutet: Die Klasse braucht keinen Raum.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    limit: int = Field(ge=0)
    times: tuple[TimeOption, ...] = ()
    rooms: Optional[tuple[RoomOption, ...]] = None
    parent_id: Optional[int] = None   # Elternklasse (muss ebenfalls belegt werden)

    @model_validator(mode="after")
    def _check_parent(self):
        if self.parent_id is not None and self.parent_id == self.id:
            raise ValueError(f"Klasse {self.id} kann nicht ihre eigene Elternklasse sein.")
        return self

    @property
    def needs_room(self) -> bool:
        return bool(self.rooms)

    def has_time(self, option: TimeOption) -> bool:
        return option in self.times

    def has_room(self, option: RoomOption) -> bool:
        return bool(self.rooms) and option in self.rooms

    def __str__(self) -> str:
        return f"Klasse {self.id}"


class Subpart(BaseModel):
    """Pflichtbestandteil einer Konfiguration – genau eine Klasse daraus wird belegt."""

    id: int = Field(ge=1)
    classes: list[CourseClass] = []


class CourseConfig(BaseModel):
    """Konfiguration eines Kurses (z.B. Vorlesung + Übung)."""

    id: int = Field(ge=1)
    subparts: list[Subpart] = []

    def iter_classes(self) -> Iterator[CourseClass]:
        for subpart in self.subparts:
            yield from subpart.classes


class Course(BaseModel):
    """Ein Kurs mit einer oder mehreren Konfigurationen."""

    id: int = Field(ge=1)
    configs: list[CourseConfig] = []

    def iter_classes(self) -> Iterator[CourseClass]:
        for config in self.configs:
            yield from config.iter_classes()

    def class_ids(self) -> set[int]:
        return {c.id for c in self.iter_classes()}
