"""Zeitmodell nach ITC 2019 (Pydantic v2).

Ein Tag besteht aus 288 Slots à 5 Minuten. Eine Klasse trifft sich an allen
gesetzten Tagen aller gesetzten Wochen, jeweils ab `start` für `length` Slots.
Wochen und Tage sind Bit-Vektoren fester Länge (nr_weeks bzw. nr_days der
Instanz), z.B. days "1010100" = Mo, Mi, Fr.

Die Längenprüfung der Bit-Algebra läuft nur unter `__debug__`; mit `python -O`
entfällt sie prozessweit.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.defaults import SLOTS_PER_DAY
from models.errors import InvalidArgumentError, NotFoundError

BitVector = tuple[bool, ...]


# ─── Bit-Algebra ──────────────────────────────────────────────────────────────

def _check_same_length(a: BitVector, b: BitVector) -> None:
    if len(a) != len(b):
        raise InvalidArgumentError(
            f"Bit-Vektoren unterschiedlicher Länge: {len(a)} ≠ {len(b)}"
        )


def exclusive(a: BitVector, b: BitVector) -> bool:
    """True, wenn keine Position in beiden Vektoren gesetzt ist ((a AND b) = 0)."""
    if __debug__:
        _check_same_length(a, b)
    return not any(x and y for x, y in zip(a, b))


def subset_either(a: BitVector, b: BitVector) -> bool:
    """True, wenn ein Muster im anderen enthalten ist.

    ((a OR b) = a) ∨ ((a OR b) = b), in einem Durchlauf berechnet.
    """
    if __debug__:
        _check_same_length(a, b)
    a_in_b = b_in_a = True
    for x, y in zip(a, b):
        if x and not y:
            a_in_b = False
        elif y and not x:
            b_in_a = False
        if not (a_in_b or b_in_a):
            return False
    return True


def first_true_index(bits: BitVector) -> int:
    """Index des ersten gesetzten Bits; NotFoundError bei leerem Muster."""
    for i, bit in enumerate(bits):
        if bit:
            return i
    raise NotFoundError("Bit-Vektor enthält kein gesetztes Bit.")


def parse_bits(text: str) -> BitVector:
    """Wandelt "1010100" in (True, False, True, False, True, False, False) um."""
    if any(ch not in "01" for ch in text):
        raise ValueError(f"Ungültiger Bit-String: {text!r}")
    return tuple(ch == "1" for ch in text)


def format_bits(bits: BitVector) -> str:
    """Umkehrung von parse_bits."""
    return "".join("1" if b else "0" for b in bits)


# ─── Zeit ─────────────────────────────────────────────────────────────────────

class Time(BaseModel):
    """Ein Zeitmuster: Wochen, Tage, Startslot und Dauer (unveränderlich)."""

    model_config = ConfigDict(frozen=True)

    weeks: BitVector
    days: BitVector
    start: int = Field(ge=0, lt=SLOTS_PER_DAY)
    length: int = Field(gt=0)

    @field_validator("weeks", "days", mode="before")
    @classmethod
    def _accept_bit_strings(cls, v):
        if isinstance(v, str):
            return parse_bits(v)
        return v

    @model_validator(mode="after")
    def _check_window(self):
        if self.start + self.length > SLOTS_PER_DAY:
            raise ValueError(
                f"Zeitfenster {self.start}+{self.length} endet nach Slot {SLOTS_PER_DAY}."
            )
        return self

    @classmethod
    def for_instance(
        cls, nr_weeks: int, nr_days: int, weeks, days, start: int, length: int
    ) -> "Time":
        """Erzeugt ein Time-Objekt und prüft die Musterlängen gegen die Instanz."""
        time = cls(weeks=weeks, days=days, start=start, length=length)
        time.check_dimensions(nr_weeks, nr_days)
        return time

    @property
    def end(self) -> int:
        """Erster Slot nach dem Ende (start + length)."""
        return self.start + self.length

    @property
    def duration(self) -> int:
        return self.length

    def check_dimensions(self, nr_weeks: int, nr_days: int) -> None:
        """Musterlängen müssen nr_weeks / nr_days der Instanz entsprechen."""
        if len(self.weeks) != nr_weeks:
            raise ValueError(
                f"Wochenmuster hat Länge {len(self.weeks)}, Instanz hat {nr_weeks} Wochen."
            )
        if len(self.days) != nr_days:
            raise ValueError(
                f"Tagesmuster hat Länge {len(self.days)}, Instanz hat {nr_days} Tage."
            )

    def meets(self, week: int, day: int) -> bool:
        """True, wenn ein Termin in Woche `week` am Tag `day` liegt."""
        return self.weeks[week] and self.days[day]

    def overlaps(self, other: "Time") -> bool:
        """Überlappung in Tageszeit, Tagen und Wochen."""
        return (
            other.start < self.end
            and self.start < other.end
            and not exclusive(self.days, other.days)
            and not exclusive(self.weeks, other.weeks)
        )

    def __str__(self) -> str:
        return (
            f"{format_bits(self.days)} {self.start}+{self.length} "
            f"W{format_bits(self.weeks)}"
        )


class TimeOption(BaseModel):
    """Eine mögliche Zeit einer Klasse mit Strafpunkten."""

    model_config = ConfigDict(frozen=True)

    time: Time
    penalty: int = Field(0, ge=0)
