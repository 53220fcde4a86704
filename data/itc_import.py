"""ITC 2019 XML Import (Probleminstanz).

Liest eine <problem>-Datei im Format der International Timetabling
Competition 2019 und erzeugt eine ProblemInstance. Verwendet nur stdlib
xml.etree.ElementTree.

Klassen werden in zwei Schritten aufgebaut: erst alle Klassen mit ihrer
Eltern-ID einlesen, dann beim Aufbau der Instanz die Eltern auflösen. So sind
Vorwärtsverweise auf später definierte Elternklassen erlaubt.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from constraints.factory import build_hard, build_soft
from constraints.wrappers import HardConstraint, SoftConstraint
from models.course import Course, CourseClass, CourseConfig, Subpart
from models.errors import ItcFormatError, TimetablingError
from models.problem import OptimizationWeights, ProblemInstance
from models.room import Room, RoomOption, TravelMatrix
from models.student import Student
from models.time import Time, TimeOption

logger = logging.getLogger(__name__)

_KNOWN_SECTIONS = {"optimization", "rooms", "courses", "distributions", "students"}


class ImportReport(BaseModel):
    """Bericht über den ITC-Import."""
    warnings: list[str] = []
    rooms_imported: int = 0
    courses_imported: int = 0
    classes_imported: int = 0
    distributions_imported: int = 0
    students_imported: int = 0

    def print_rich(self) -> None:
        from rich.console import Console
        from rich.panel import Panel
        console = Console()
        lines = [f"[green]Räume: {self.rooms_imported}[/green]  "
                 f"[green]Kurse: {self.courses_imported}[/green]  "
                 f"[green]Klassen: {self.classes_imported}[/green]  "
                 f"[green]Constraints: {self.distributions_imported}[/green]  "
                 f"[green]Studenten: {self.students_imported}[/green]"]
        if self.warnings:
            lines.append("\n[yellow]Warnungen:[/yellow]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        console.print(Panel("\n".join(lines), title="ITC 2019 Import", border_style="cyan"))


def parse_int(el: ET.Element, attr: str, default: Optional[int] = None) -> int:
    """Ganzzahliges Attribut; fehlt es ohne Default, ist die Datei fehlerhaft."""
    raw = el.get(attr)
    if raw is None:
        if default is None:
            raise ItcFormatError(f"<{el.tag}> ohne Attribut '{attr}'.")
        return default
    try:
        return int(raw)
    except ValueError:
        raise ItcFormatError(f"<{el.tag} {attr}=\"{raw}\">: keine ganze Zahl.") from None


def parse_time(el: ET.Element) -> Time:
    """<time>/<unavailable> mit days, start, length, weeks."""
    for attr in ("days", "start", "length", "weeks"):
        if el.get(attr) is None:
            raise ItcFormatError(f"<{el.tag}> ohne Attribut '{attr}'.")
    try:
        return Time(
            weeks=el.get("weeks"),
            days=el.get("days"),
            start=parse_int(el, "start"),
            length=parse_int(el, "length"),
        )
    except ValidationError as e:
        raise ItcFormatError(f"Ungültige Zeit in <{el.tag}>: {e}") from e


class ItcProblemImporter:
    """Importiert eine Probleminstanz aus einer ITC-2019-XML-Datei."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.report = ImportReport()
        self._root: Optional[ET.Element] = None
        self._rooms: dict[int, Room] = {}

    def _parse_xml(self) -> ET.Element:
        try:
            root = ET.parse(str(self.path)).getroot()
        except ET.ParseError as e:
            raise ItcFormatError(f"XML-Parse-Fehler in {self.path}: {e}") from e
        except FileNotFoundError:
            raise FileNotFoundError(f"Datei nicht gefunden: {self.path}") from None
        if root.tag != "problem":
            raise ItcFormatError(f"Wurzelelement <problem> erwartet, gefunden: <{root.tag}>")
        return root

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.report.warnings.append(message)

    def load(self) -> ProblemInstance:
        """Liest die Datei und baut die vollständige Instanz."""
        root = self._root = self._parse_xml()
        for child in root:
            if child.tag not in _KNOWN_SECTIONS:
                self._warn(f"Unbekannte Sektion <{child.tag}> wird ignoriert.")

        nr_weeks = parse_int(root, "nrWeeks")
        nr_days = parse_int(root, "nrDays")
        weights = self._import_weights(root.find("optimization"))
        rooms, travel = self._import_rooms(root.find("rooms"))
        courses = self._import_courses(root.find("courses"))
        hard, soft = self._import_distributions(root.find("distributions"), travel, nr_weeks)
        students = self._import_students(root.find("students"))

        try:
            instance = ProblemInstance(
                name=root.get("name", self.path.stem),
                nr_days=nr_days,
                nr_weeks=nr_weeks,
                slots_per_day=parse_int(root, "slotsPerDay"),
                weights=weights,
                rooms=rooms,
                courses=courses,
                students=students,
                hard_constraints=hard,
                soft_constraints=soft,
                travel=travel,
            )
        except (ValidationError, TimetablingError) as e:
            raise ItcFormatError(f"Inkonsistente Instanz in {self.path}: {e}") from e
        logger.info(
            f"ITC-Import {self.path.name}: {len(rooms)} Räume, "
            f"{self.report.classes_imported} Klassen, {len(students)} Studenten"
        )
        return instance

    # ─── Sektionen ────────────────────────────────────────────────────────────

    def _import_weights(self, section: Optional[ET.Element]) -> OptimizationWeights:
        if section is None:
            self._warn("Keine <optimization>-Sektion gefunden: alle Gewichte 1.")
            return OptimizationWeights()
        try:
            return OptimizationWeights(
                time=parse_int(section, "time", 1),
                room=parse_int(section, "room", 1),
                distribution=parse_int(section, "distribution", 1),
                student=parse_int(section, "student", 1),
            )
        except ValidationError as e:
            raise ItcFormatError(f"Ungültige Gewichte in <optimization>: {e}") from e

    def _import_rooms(self, section: Optional[ET.Element]) -> tuple[list[Room], TravelMatrix]:
        rooms: list[Room] = []
        travel: list[tuple[int, int, int]] = []
        if section is None:
            self._warn("Keine <rooms>-Sektion gefunden: keine Räume.")
            return rooms, TravelMatrix([])
        for el in section.findall("room"):
            room_id = parse_int(el, "id")
            for t in el.findall("travel"):
                travel.append((room_id, parse_int(t, "room"), parse_int(t, "value")))
            try:
                room = Room(
                    id=room_id,
                    capacity=parse_int(el, "capacity"),
                    unavailable=tuple(parse_time(u) for u in el.findall("unavailable")),
                )
            except ValidationError as e:
                raise ItcFormatError(f"Ungültiger Raum {room_id}: {e}") from e
            rooms.append(room)
            self._rooms[room_id] = room
        # Wegezeiten dürfen auf später definierte Räume verweisen
        try:
            matrix = TravelMatrix.for_rooms(rooms, travel)
        except TimetablingError as e:
            raise ItcFormatError(str(e)) from e
        self.report.rooms_imported = len(rooms)
        return rooms, matrix

    def _import_courses(self, section: Optional[ET.Element]) -> list[Course]:
        courses: list[Course] = []
        if section is None:
            self._warn("Keine <courses>-Sektion gefunden: keine Kurse.")
            return courses
        for course_el in section.findall("course"):
            course_id = parse_int(course_el, "id")
            configs = []
            try:
                for config_el in course_el.findall("config"):
                    subparts = []
                    for subpart_el in config_el.findall("subpart"):
                        classes = [self._import_class(c) for c in subpart_el.findall("class")]
                        subparts.append(Subpart(id=parse_int(subpart_el, "id"), classes=classes))
                    configs.append(CourseConfig(id=parse_int(config_el, "id"), subparts=subparts))
                courses.append(Course(id=course_id, configs=configs))
            except ValidationError as e:
                raise ItcFormatError(f"Ungültiger Kurs {course_id}: {e}") from e
        self.report.courses_imported = len(courses)
        return courses

    def _import_class(self, el: ET.Element) -> CourseClass:
        class_id = parse_int(el, "id")
        needs_room = el.get("room", "true").lower() != "false"
        room_options: list[RoomOption] = []
        for r in el.findall("room"):
            room_id = parse_int(r, "id")
            room = self._rooms.get(room_id)
            if room is None:
                raise ItcFormatError(f"Klasse {class_id} verweist auf unbekannten Raum {room_id}.")
            room_options.append(RoomOption(room=room, penalty=parse_int(r, "penalty", 0)))
        if not needs_room and room_options:
            self._warn(f"Klasse {class_id} hat room=\"false\", Raumoptionen werden ignoriert.")
        times = tuple(
            TimeOption(time=parse_time(t), penalty=parse_int(t, "penalty", 0))
            for t in el.findall("time")
        )
        if not times:
            self._warn(f"Klasse {class_id} hat keine Zeitoptionen.")
        parent = el.get("parent")
        try:
            course_class = CourseClass(
                id=class_id,
                limit=parse_int(el, "limit"),
                times=times,
                rooms=tuple(room_options) if needs_room else None,
                parent_id=int(parent) if parent is not None else None,
            )
        except (ValidationError, ValueError) as e:
            raise ItcFormatError(f"Ungültige Klasse {class_id}: {e}") from e
        self.report.classes_imported += 1
        return course_class

    def _import_distributions(
        self, section: Optional[ET.Element], travel: TravelMatrix, nr_weeks: int
    ) -> tuple[list[HardConstraint], list[SoftConstraint]]:
        hard: list[HardConstraint] = []
        soft: list[SoftConstraint] = []
        if section is None:
            return hard, soft
        for el in section.findall("distribution"):
            type_text = el.get("type")
            if not type_text:
                raise ItcFormatError("<distribution> ohne Attribut 'type'.")
            class_ids = [parse_int(c, "id") for c in el.findall("class")]
            required = el.get("required", "false").lower() == "true"
            try:
                if required:
                    hard.append(build_hard(type_text, class_ids, travel))
                else:
                    soft.append(build_soft(type_text, class_ids, parse_int(el, "penalty"),
                                           nr_weeks, travel))
            except (ValidationError, TimetablingError) as e:
                raise ItcFormatError(f"Ungültige Constraint '{type_text}' {class_ids}: {e}") from e
        self.report.distributions_imported = len(hard) + len(soft)
        return hard, soft

    def _import_students(self, section: Optional[ET.Element]) -> list[Student]:
        students: list[Student] = []
        if section is None:
            return students
        for el in section.findall("student"):
            course_ids = tuple(parse_int(c, "id") for c in el.findall("course"))
            try:
                students.append(Student(id=parse_int(el, "id"), course_ids=course_ids))
            except ValidationError as e:
                raise ItcFormatError(f"Ungültiger Student {el.get('id')}: {e}") from e
        self.report.students_imported = len(students)
        return students


def load_problem(path: Path) -> ProblemInstance:
    """Kurzform für ItcProblemImporter(path).load()."""
    return ItcProblemImporter(path).load()
