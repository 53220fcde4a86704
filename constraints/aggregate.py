"""Aggregierte Verteilungs-Constraints: MaxDays, MaxDayLoad, MaxBreaks, MaxBlock.

Diese Arten betrachten die ganze Klassenliste gemeinsam. Jede Funktion ist ein
Generator, der pro Verletzung deren Gewicht (> 0) liefert:
  is_satisfied    → `not any(...)` bricht bei der ersten Verletzung ab
  violation_count → `sum(...)`

Das Raster (Woche × Tag) ergibt sich aus den Musterlängen der gewählten Zeiten;
die Instanz garantiert, dass alle Muster gleich lang sind.
"""

from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from constraints.kinds import ConstraintKind
from models.event import Event

if TYPE_CHECKING:
    from constraints.distribution import DistributionConstraint

Interval = tuple[int, int]   # (start, end) in Slots
AggregateCounter = Callable[[list[Event], "DistributionConstraint"], Iterator[int]]


def day_cells(events: list[Event]) -> Iterator[list[Interval]]:
    """Pro (Woche, Tag) die Intervalle aller Klassen, die dort stattfinden."""
    times = [e.time for e in events]
    if not times:
        return
    nr_weeks, nr_days = len(times[0].weeks), len(times[0].days)
    for week in range(nr_weeks):
        for day in range(nr_days):
            yield [(t.start, t.end) for t in times if t.meets(week, day)]


def merge_blocks(intervals: Iterable[Interval], max_gap: int) -> list[Interval]:
    """Verschmilzt nach Start sortierte Intervalle, deren Lücke ≤ max_gap ist.

    Ein einziger Durchlauf von links nach rechts: ein Intervall gehört zum
    laufenden Block, wenn `block_end + max_gap >= start`.
    """
    blocks: list[Interval] = []
    for start, end in sorted(intervals):
        if blocks and blocks[-1][1] + max_gap >= start:
            blocks[-1] = (blocks[-1][0], max(blocks[-1][1], end))
        else:
            blocks.append((start, end))
    return blocks


# ─── Zähler ───────────────────────────────────────────────────────────────────

def max_days(events: list[Event], c: "DistributionConstraint") -> Iterator[int]:
    """Anzahl verschiedener Wochentage über alle Klassen minus D."""
    if not events:
        return
    nr_days = len(events[0].time.days)
    used = sum(1 for day in range(nr_days) if any(e.time.days[day] for e in events))
    excess = used - c.param("D")
    if excess > 0:
        yield excess


def max_day_load(events: list[Event], c: "DistributionConstraint") -> Iterator[int]:
    """Pro Zelle: Summe der Dauern minus S, falls positiv."""
    limit = c.param("S")
    for cell in day_cells(events):
        excess = sum(end - start for start, end in cell) - limit
        if excess > 0:
            yield excess


def max_breaks(events: list[Event], c: "DistributionConstraint") -> Iterator[int]:
    """Pro Zelle: Blöcke über die erlaubten R + 1 hinaus."""
    allowed = c.param("R") + 1
    gap = c.param("S")
    for cell in day_cells(events):
        if len(cell) < 2:
            continue
        excess = len(merge_blocks(cell, gap)) - allowed
        if excess > 0:
            yield excess


def max_block(events: list[Event], c: "DistributionConstraint") -> Iterator[int]:
    """Pro Zelle: jeder Verschmelzungsschritt, nach dem der Block länger als M ist.

    Eine einzelne Klasse länger als M zählt nicht; nur Blöcke aus mindestens
    zwei Klassen werden bewertet.
    """
    limit = c.param("M")
    gap = c.param("S")
    for cell in day_cells(events):
        if len(cell) < 2:
            continue
        cell.sort()
        block_start, block_end = cell[0]
        for start, end in cell[1:]:
            if block_end + gap < start:
                block_start, block_end = start, end
                continue
            block_end = max(block_end, end)
            if block_end - block_start > limit:
                yield 1


AGGREGATE_COUNTERS: dict[ConstraintKind, AggregateCounter] = {
    ConstraintKind.MAX_DAYS: max_days,
    ConstraintKind.MAX_DAY_LOAD: max_day_load,
    ConstraintKind.MAX_BREAKS: max_breaks,
    ConstraintKind.MAX_BLOCK: max_block,
}
