"""ITC 2019 XML Import (Lösung).

Liest eine <solution>-Datei und füllt einen leeren Zeitplan der Instanz über
die geprüfte Zuweisungs-API von Event (assign_time, assign_room, enroll).

    <solution name="...">
      <class id="1" days="1010100" start="90" weeks="1111111111111" room="1">
        <student id="1"/>
      </class>
    </solution>
"""

import logging
import xml.etree.ElementTree as ET
from collections import defaultdict
from pathlib import Path

from data.itc_import import parse_int
from models.errors import ItcFormatError, NotFoundError
from models.problem import ProblemInstance
from models.time import parse_bits
from models.timetable import Timetable

logger = logging.getLogger(__name__)


class ItcSolutionImporter:
    """Füllt einen Zeitplan aus einer ITC-2019-Lösungsdatei."""

    def __init__(self, path: Path, instance: ProblemInstance) -> None:
        self.path = Path(path)
        self.instance = instance

    def _parse_xml(self) -> ET.Element:
        try:
            root = ET.parse(str(self.path)).getroot()
        except ET.ParseError as e:
            raise ItcFormatError(f"XML-Parse-Fehler in {self.path}: {e}") from e
        except FileNotFoundError:
            raise FileNotFoundError(f"Datei nicht gefunden: {self.path}") from None
        if root.tag != "solution":
            raise ItcFormatError(f"Wurzelelement <solution> erwartet, gefunden: <{root.tag}>")
        return root

    def load(self) -> Timetable:
        root = self._parse_xml()
        name = root.get("name")
        if name and name != self.instance.name:
            logger.warning(
                f"Lösung gehört zu Instanz '{name}', geladen ist '{self.instance.name}'."
            )
        timetable = self.instance.new_timetable()
        enrollments: dict[int, list[int]] = defaultdict(list)

        for el in root.findall("class"):
            class_id = parse_int(el, "id")
            self._assign(timetable, el, class_id)
            for s in el.findall("student"):
                enrollments[parse_int(s, "id")].append(class_id)

        for student_id, class_ids in sorted(enrollments.items()):
            self._enroll(timetable, student_id, class_ids)

        missing = len(timetable.unscheduled())
        logger.info(
            f"Lösung {self.path.name}: {len(timetable) - missing}/{len(timetable)} "
            f"Klassen geplant, {len(enrollments)} Studenten"
        )
        return timetable

    def _assign(self, timetable: Timetable, el: ET.Element, class_id: int) -> None:
        try:
            event = timetable.event(class_id)
        except NotFoundError:
            raise ItcFormatError(f"Lösung enthält unbekannte Klasse {class_id}.") from None
        course_class = event.course_class

        try:
            days, weeks = parse_bits(el.get("days", "")), parse_bits(el.get("weeks", ""))
        except ValueError as e:
            raise ItcFormatError(f"Klasse {class_id}: {e}") from e
        start = parse_int(el, "start")
        option = next(
            (
                o for o in course_class.times
                if o.time.start == start and o.time.days == days and o.time.weeks == weeks
            ),
            None,
        )
        if option is None:
            raise ItcFormatError(
                f"Klasse {class_id}: Zeit (Tage {el.get('days')}, Start {start}, "
                f"Wochen {el.get('weeks')}) ist keine Zeitoption."
            )
        event.assign_time(option)

        room_attr = el.get("room")
        if room_attr is None:
            return
        room_id = parse_int(el, "room")
        room_option = next(
            (o for o in course_class.rooms or () if o.room.id == room_id), None
        )
        if room_option is None:
            raise ItcFormatError(f"Klasse {class_id}: Raum {room_id} ist keine Raumoption.")
        event.assign_room(room_option)

    def _depth(self, class_id: int) -> int:
        depth = 0
        course_class = self.instance.class_by_id(class_id)
        while course_class.parent_id is not None:
            depth += 1
            course_class = self.instance.class_by_id(course_class.parent_id)
        return depth

    def _enroll(self, timetable: Timetable, student_id: int, class_ids: list[int]) -> None:
        try:
            student = self.instance.student_by_id(student_id)
        except NotFoundError:
            raise ItcFormatError(f"Lösung enthält unbekannten Studenten {student_id}.") from None
        # Elternklassen zuerst, damit enroll() die Eltern-Kette prüfen kann
        for class_id in sorted(class_ids, key=self._depth):
            timetable.event(class_id).enroll(student, timetable)


def load_solution(path: Path, instance: ProblemInstance) -> Timetable:
    """Kurzform für ItcSolutionImporter(path, instance).load()."""
    return ItcSolutionImporter(path, instance).load()
