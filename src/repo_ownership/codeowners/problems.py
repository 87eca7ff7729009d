from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ProblemKind(StrEnum):
    optional_with_min_approvers = "optional_with_min_approvers"
    duplicate_expression = "duplicate_expression"
    optional_conflict = "optional_conflict"


@dataclass(frozen=True)
class StructuralProblem:
    kind: ProblemKind
    section: str
    message: str
    expression: str | None = None
