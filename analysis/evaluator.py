"""Bewertung eines fertig befüllten Zeitplans gegen eine Probleminstanz.

Zwei Betriebsarten:
  is_feasible() – interaktiv: bricht bei der ersten verletzten harten Regel ab
  evaluate()    – vollständiger Bericht für die Diagnose (alle Constraints,
                  Raumprüfungen, Studentenkonflikte, ITC-Zielfunktion)

Die Auswertung liest nur. Mit num_workers > 1 werden die Constraints auf einen
ThreadPoolExecutor verteilt; der Zeitplan darf währenddessen nicht verändert
werden.
"""

import concurrent.futures
import logging
import time
from collections import defaultdict
from itertools import combinations
from typing import Callable, Iterable, Literal, Optional, TypeVar

from pydantic import BaseModel

from analysis.student_conflicts import StudentConflict, find_student_conflicts
from config.schema import EvaluationConfig
from constraints.wrappers import HardConstraint, SoftConstraint
from models.errors import UnscheduledEventError
from models.event import Event
from models.problem import ProblemInstance
from models.timetable import Timetable

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# ─── Bericht ──────────────────────────────────────────────────────────────────

class ConstraintResult(BaseModel):
    """Ergebnis einer einzelnen Verteilungs-Constraint."""

    constraint: str                 # z.B. "MaxBlock(60,0)"
    class_ids: list[int]
    required: bool
    satisfied: bool
    violations: int
    penalty: int = 0                # nur weich
    pairs: list[tuple[int, int]] = []   # verletzende Paare (paarweise Arten)


class RoomViolation(BaseModel):
    """Verletzung einer Raumregel (immer hart)."""

    kind: Literal["room_unavailable", "room_clash"]
    room_id: int
    class_ids: list[int]
    description: str


class ObjectiveBreakdown(BaseModel):
    """ITC-Zielfunktion, ungewichtet und gewichtet."""

    time_penalty: int
    room_penalty: int
    distribution_penalty: int
    student_conflicts: int
    total: int


class EvaluationReport(BaseModel):
    """Vollständiger Bewertungsbericht."""

    instance_name: str
    is_valid: bool
    hard_results: list[ConstraintResult]
    soft_results: list[ConstraintResult]
    room_violations: list[RoomViolation]
    student_conflicts: list[StudentConflict]
    objective: ObjectiveBreakdown
    elapsed: float

    @property
    def hard_violations(self) -> list[ConstraintResult]:
        return [r for r in self.hard_results if not r.satisfied]

    @property
    def soft_violations(self) -> list[ConstraintResult]:
        return [r for r in self.soft_results if not r.satisfied]

    def print_rich(self, max_rows: int = 50, show_satisfied: bool = False) -> None:
        """Gibt den Bericht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ GÜLTIG[/bold green]"
            if self.is_valid
            else "[bold red]✗ UNGÜLTIG[/bold red]"
        )
        o = self.objective
        lines = [
            status,
            f"Harte Verletzungen: {len(self.hard_violations)} | "
            f"Raumverletzungen: {len(self.room_violations)}",
            f"Zeit: {o.time_penalty} | Raum: {o.room_penalty} | "
            f"Verteilung: {o.distribution_penalty} | Studentenkonflikte: {o.student_conflicts}",
            f"[bold]Gesamt: {o.total}[/bold]  [dim]({self.elapsed:.2f}s)[/dim]",
        ]
        console.print(Panel("\n".join(lines), title=f"Bewertung: {self.instance_name}",
                            border_style="cyan"))

        rows = [
            r for r in (*self.hard_results, *self.soft_results)
            if show_satisfied or not r.satisfied
        ]
        if rows:
            table = Table(box=box.ROUNDED, show_lines=False)
            table.add_column("Art", width=6)
            table.add_column("Constraint", width=22)
            table.add_column("Klassen")
            table.add_column("Verletzungen", justify="right")
            table.add_column("Strafe", justify="right")
            for r in rows[:max_rows]:
                color = "green" if r.satisfied else ("red" if r.required else "yellow")
                table.add_row(
                    f"[{color}]{'HART' if r.required else 'WEICH'}[/{color}]",
                    r.constraint,
                    ", ".join(map(str, r.class_ids)),
                    str(r.violations),
                    "-" if r.required else str(r.penalty),
                )
            console.print(table)
            if len(rows) > max_rows:
                console.print(f"[dim]… {len(rows) - max_rows} weitere Zeilen ausgeblendet.[/dim]")

        for v in self.room_violations[:max_rows]:
            console.print(f"  [red]• Raum {v.room_id}: {v.description}[/red]")
        if not rows and not self.room_violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")


# ─── Evaluator ────────────────────────────────────────────────────────────────

class TimetableEvaluator:
    """Bewertet Zeitpläne einer festen Probleminstanz."""

    def __init__(
        self, instance: ProblemInstance, config: Optional[EvaluationConfig] = None
    ) -> None:
        self.instance = instance
        self.config = config or EvaluationConfig()

    # ─── Machbarkeit (interaktiv) ─────────────────────────────────────────────

    def is_feasible(self, timetable: Timetable) -> bool:
        """True, wenn alle harten Constraints und Raumregeln erfüllt sind.

        Bricht bei der ersten Verletzung ab.

        Raises:
            UnscheduledEventError: wie evaluate().
        """
        self._require_complete(timetable)
        for hard in self.instance.hard_constraints:
            if not hard.is_satisfied(timetable):
                logger.debug(f"Unzulässig: {hard}")
                return False
        return not any(self._room_violations(timetable))

    # ─── Vollständiger Bericht ────────────────────────────────────────────────

    def evaluate(self, timetable: Timetable) -> EvaluationReport:
        """Wertet alle Constraints aus und berechnet die ITC-Zielfunktion.

        Raises:
            UnscheduledEventError: wenn eine Klasse keine Zeit oder keinen
                benötigten Raum hat.
        """
        started = time.perf_counter()
        self._require_complete(timetable)

        hard_results = self._map(lambda c: self._hard_result(c, timetable),
                                 self.instance.hard_constraints)
        soft_results = self._map(lambda c: self._soft_result(c, timetable),
                                 self.instance.soft_constraints)
        room_violations = list(self._room_violations(timetable))
        conflicts = (
            find_student_conflicts(timetable, self.instance.travel)
            if self.config.include_student_conflicts
            else []
        )

        for r in hard_results:
            if not r.satisfied:
                logger.error(f"Harte Constraint verletzt: {r.constraint} {r.class_ids}")
        for v in room_violations:
            logger.error(f"Raumregel verletzt: {v.description}")

        objective = self._objective(timetable, soft_results, len(conflicts))
        is_valid = all(r.satisfied for r in hard_results) and not room_violations
        elapsed = time.perf_counter() - started
        logger.info(
            f"Bewertung '{self.instance.name}': "
            f"{'gültig' if is_valid else 'ungültig'}, Gesamt={objective.total}, "
            f"{len(hard_results)} harte / {len(soft_results)} weiche Constraints "
            f"in {elapsed:.2f}s"
        )
        return EvaluationReport(
            instance_name=self.instance.name,
            is_valid=is_valid,
            hard_results=hard_results,
            soft_results=soft_results,
            room_violations=room_violations,
            student_conflicts=conflicts,
            objective=objective,
            elapsed=elapsed,
        )

    def total_penalty(self, timetable: Timetable) -> int:
        """Nur die gewichtete Zielfunktion (ohne Bericht)."""
        return self.evaluate(timetable).objective.total

    # ─── Einzelschritte ───────────────────────────────────────────────────────

    @staticmethod
    def _require_complete(timetable: Timetable) -> None:
        """Jede Klasse braucht eine Zeit und, falls nötig, einen Raum."""
        missing = timetable.unscheduled()
        if missing:
            ids = ", ".join(str(e.class_id) for e in missing[:10])
            raise UnscheduledEventError(
                f"{len(missing)} Klasse(n) nicht vollständig geplant: {ids}"
                + (" …" if len(missing) > 10 else "")
            )

    def _map(self, fn: Callable[[T], R], items: Iterable[T]) -> list[R]:
        items = list(items)
        workers = self.config.num_workers
        if workers > 1 and len(items) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(fn, items))
        return [fn(item) for item in items]

    @staticmethod
    def _hard_result(hard: HardConstraint, timetable: Timetable) -> ConstraintResult:
        c = hard.constraint
        count = c.violation_count(timetable)
        logger.debug(f"{c}: {count} Verletzung(en)")
        return ConstraintResult(
            constraint=c.type_name,
            class_ids=list(c.class_ids),
            required=True,
            satisfied=count == 0,
            violations=count,
            pairs=c.violating_pairs(timetable) if count else [],
        )

    @staticmethod
    def _soft_result(soft: SoftConstraint, timetable: Timetable) -> ConstraintResult:
        c = soft.constraint
        count = c.violation_count(timetable)
        logger.debug(f"{c}: {count} Verletzung(en)")
        return ConstraintResult(
            constraint=c.type_name,
            class_ids=list(c.class_ids),
            required=False,
            satisfied=count == 0,
            violations=count,
            penalty=soft.penalty_for(count),
            pairs=c.violating_pairs(timetable) if count else [],
        )

    def _room_violations(self, timetable: Timetable) -> Iterable[RoomViolation]:
        """Sperrzeiten und Doppelbelegungen von Räumen."""
        by_room: dict[int, list[Event]] = defaultdict(list)
        for event in timetable:
            room = event.room
            if room is None:
                continue
            by_room[room.id].append(event)
            if not room.is_available(event.time):
                yield RoomViolation(
                    kind="room_unavailable",
                    room_id=room.id,
                    class_ids=[event.class_id],
                    description=(
                        f"Klasse {event.class_id} liegt in einer Sperrzeit von Raum {room.id} "
                        f"({event.time})."
                    ),
                )
        for room_id, events in sorted(by_room.items()):
            for e1, e2 in combinations(events, 2):
                if e1.time.overlaps(e2.time):
                    yield RoomViolation(
                        kind="room_clash",
                        room_id=room_id,
                        class_ids=[e1.class_id, e2.class_id],
                        description=(
                            f"Klassen {e1.class_id} und {e2.class_id} belegen Raum "
                            f"{room_id} gleichzeitig."
                        ),
                    )

    def _objective(
        self,
        timetable: Timetable,
        soft_results: list[ConstraintResult],
        conflicts: int,
    ) -> ObjectiveBreakdown:
        time_penalty = sum(e.time_option.penalty for e in timetable)
        room_penalty = sum(e.room_option.penalty for e in timetable if e.room_option)
        distribution = sum(r.penalty for r in soft_results)
        w = self.instance.weights
        total = (
            w.time * time_penalty
            + w.room * room_penalty
            + w.distribution * distribution
            + w.student * conflicts
        )
        return ObjectiveBreakdown(
            time_penalty=time_penalty,
            room_penalty=room_penalty,
            distribution_penalty=distribution,
            student_conflicts=conflicts,
            total=total,
        )
