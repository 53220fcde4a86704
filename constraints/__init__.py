"""Verteilungs-Constraints nach ITC 2019 (paarweise und aggregiert)."""

from .kinds import ConstraintFamily, ConstraintKind
from .distribution import DistributionConstraint
from .wrappers import HardConstraint, SoftConstraint
from .factory import build_constraint, build_hard, build_soft, parse_constraint_type

__all__ = [
    "ConstraintFamily",
    "ConstraintKind",
    "DistributionConstraint",
    "HardConstraint",
    "SoftConstraint",
    "build_constraint",
    "build_hard",
    "build_soft",
    "parse_constraint_type",
]
