"""Core type definitions for pgschemagen."""

from enum import Enum
from typing import TypeAlias

TableName: TypeAlias = str
ColumnName: TypeAlias = str
TypeName: TypeAlias = str
SchemaName: TypeAlias = str

__all__ = [
    "TableName",
    "ColumnName",
    "TypeName",
    "SchemaName",
    "ConstraintKind",
    "MatchPolicy",
    "NumericRepresentation",
]


class ConstraintKind(Enum):
    """Constraint kinds as reported by pg_constraint.contype."""

    NONE = ""
    PRIMARY = "p"
    UNIQUE = "u"
    FOREIGN = "f"
    CHECK = "c"
    EXCLUSION = "x"
    TRIGGER = "t"

    @classmethod
    def from_code(cls, code: str | None) -> "ConstraintKind":
        """Map a contype code to a kind. Unknown or missing codes map to NONE."""
        if not code:
            return cls.NONE
        try:
            return cls(code)
        except ValueError:
            return cls.NONE


class MatchPolicy(Enum):
    """How ignore-list patterns are matched against table and column names."""

    CONTAINS = "contains"
    EXACT = "exact"


class NumericRepresentation(Enum):
    """How protobuf messages represent numeric columns."""

    INTEGER = "integer"
    STRING = "string"
