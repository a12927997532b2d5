"""Constraint compilation for fieldguard record types."""

from fieldguard.compiler.builder import compile_constraints, compile_cross_field
from fieldguard.compiler.constraints import Constraint, CustomConstraint
from fieldguard.compiler.crossfield import CrossFieldConstraint, is_zero
from fieldguard.compiler.plan import FieldPlan, PlanBuilder, RecordPlan, compile_record

__all__ = [
    "Constraint",
    "CrossFieldConstraint",
    "CustomConstraint",
    "FieldPlan",
    "PlanBuilder",
    "RecordPlan",
    "compile_constraints",
    "compile_cross_field",
    "compile_record",
    "is_zero",
]
