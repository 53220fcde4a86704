"""Die 19 Verteilungs-Constraints nach ITC 2019 als Enum.

Jede Art trägt ihre Familie (paarweise / aggregiert), die Parameternamen und
ob die Soft-Strafe am Ende durch nr_weeks geteilt wird. Die Werte kommen aus
config.defaults.DISTRIBUTION_METADATA.
"""

from enum import Enum

from config.defaults import DISTRIBUTION_METADATA


class ConstraintFamily(str, Enum):
    PAIR = "pair"             # jedes ungeordnete Klassenpaar einzeln
    AGGREGATE = "aggregate"   # alle Klassen gemeinsam pro Woche/Tag


class ConstraintKind(str, Enum):
    """Art einer Verteilungs-Constraint. Der Wert ist der ITC-Typname ohne Parameter."""

    SAME_START = "SameStart"
    SAME_TIME = "SameTime"
    DIFFERENT_TIME = "DifferentTime"
    SAME_DAYS = "SameDays"
    DIFFERENT_DAYS = "DifferentDays"
    SAME_WEEKS = "SameWeeks"
    DIFFERENT_WEEKS = "DifferentWeeks"
    OVERLAP = "Overlap"
    NOT_OVERLAP = "NotOverlap"
    SAME_ROOM = "SameRoom"
    DIFFERENT_ROOM = "DifferentRoom"
    SAME_ATTENDEES = "SameAttendees"
    PRECEDENCE = "Precedence"
    WORK_DAY = "WorkDay"
    MIN_GAP = "MinGap"
    MAX_DAYS = "MaxDays"
    MAX_DAY_LOAD = "MaxDayLoad"
    MAX_BREAKS = "MaxBreaks"
    MAX_BLOCK = "MaxBlock"

    @property
    def family(self) -> ConstraintFamily:
        return ConstraintFamily(DISTRIBUTION_METADATA[self.value]["family"])

    @property
    def params(self) -> tuple[str, ...]:
        return tuple(DISTRIBUTION_METADATA[self.value]["params"])

    @property
    def week_average(self) -> bool:
        return DISTRIBUTION_METADATA[self.value]["week_average"]

    @property
    def uses_rooms(self) -> bool:
        return DISTRIBUTION_METADATA[self.value]["uses_rooms"]

    @property
    def description(self) -> str:
        return DISTRIBUTION_METADATA[self.value]["description"]
