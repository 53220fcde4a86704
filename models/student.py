"""Datenmodell für einen Studenten (Pydantic v2)."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from models.course import CourseClass
    from models.problem import ProblemInstance


class Student(BaseModel):
    """Ein Student mit den Kursen, die er belegen muss."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    course_ids: tuple[int, ...] = ()

    def needs_class(self, course_class: "CourseClass", instance: "ProblemInstance") -> bool:
        """True, wenn die Klasse zu einem der nachgefragten Kurse gehört."""
        return instance.course_of(course_class.id) in self.course_ids
