"""Harte und weiche Hülle um eine DistributionConstraint."""

from pydantic import BaseModel, ConfigDict, Field

from constraints.distribution import DistributionConstraint
from models.timetable import Timetable


class HardConstraint(BaseModel):
    """Muss erfüllt sein, sonst ist der Zeitplan unzulässig."""

    model_config = ConfigDict(frozen=True)

    constraint: DistributionConstraint

    def is_satisfied(self, timetable: Timetable) -> bool:
        return self.constraint.is_satisfied(timetable)

    def violation_count(self, timetable: Timetable) -> int:
        return self.constraint.violation_count(timetable)

    def __str__(self) -> str:
        return f"hart {self.constraint}"


class SoftConstraint(BaseModel):
    """Verletzungen kosten weight × Anzahl Strafpunkte.

    Bei MaxDayLoad, MaxBreaks und MaxBlock wird das Produkt einmal am Ende
    ganzzahlig durch nr_weeks geteilt (nicht pro Zelle).
    """

    model_config = ConfigDict(frozen=True)

    constraint: DistributionConstraint
    weight: int = Field(ge=0)
    nr_weeks: int = Field(1, ge=0)

    def is_satisfied(self, timetable: Timetable) -> bool:
        return self.constraint.is_satisfied(timetable)

    def violation_count(self, timetable: Timetable) -> int:
        return self.constraint.violation_count(timetable)

    def penalty(self, timetable: Timetable) -> int:
        return self.penalty_for(self.violation_count(timetable))

    def penalty_for(self, count: int) -> int:
        """Strafe zu einer bereits gezählten Verletzungsanzahl."""
        total = self.weight * count
        if self.constraint.kind.week_average and self.nr_weeks > 0:
            total //= self.nr_weeks
        return total

    def __str__(self) -> str:
        return f"weich({self.weight}) {self.constraint}"
