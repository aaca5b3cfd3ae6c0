"""Schema representation classes.

The model is built once by the inspector and shared read-only by every
generator, so all classes are frozen and sequences are tuples.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from pgschemagen.types import ConstraintKind

ARRAY_SUFFIX = "[]"

SERIAL_TYPES = frozenset({"serial", "bigserial", "smallserial"})

# Matches the default Postgres assigns to serial/identity-like columns.
NEXTVAL_PATTERN = re.compile(r"^nextval\('.+_seq'::regclass\)")


@dataclass(frozen=True)
class Column:
    """Column definition, reconciled across all of its constraint rows."""

    name: str
    data_type: str
    ordinal: int = 0
    comment: Optional[str] = None
    not_null: bool = False
    default: Optional[str] = None
    is_primary_key: bool = False
    is_unique: bool = False
    constraint: ConstraintKind = ConstraintKind.NONE
    constraint_source: Optional[str] = None
    foreign_table: Optional[str] = None

    @property
    def nullable(self) -> bool:
        return not self.not_null

    @property
    def is_array(self) -> bool:
        return self.data_type.endswith(ARRAY_SUFFIX)

    @property
    def base_type(self) -> str:
        """Data type with the array suffix stripped."""
        if self.is_array:
            return self.data_type[: -len(ARRAY_SUFFIX)]
        return self.data_type

    @property
    def is_serial(self) -> bool:
        """True for the native auto-increment pseudo-types."""
        return self.base_type in SERIAL_TYPES

    @property
    def is_sequence(self) -> bool:
        """True for a primary key whose default draws from a sequence."""
        return is_sequence(self)

    @property
    def is_generated(self) -> bool:
        return self.is_serial or self.is_sequence


def is_sequence(column: Column) -> bool:
    """Check if a column is a sequence-generated primary key.

    This is a textual match on the default expression, e.g.
    ``nextval('foo_bar_id_seq'::regclass)``; other generating defaults do
    not qualify.
    """
    if not column.is_primary_key or not column.default:
        return False
    return NEXTVAL_PATTERN.match(column.default) is not None


@dataclass(frozen=True)
class Table:
    """Table definition."""

    name: str
    columns: tuple[Column, ...] = ()
    schema: str = "public"
    comment: Optional[str] = None
    primary_keys: tuple[Column, ...] = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        """Normalize columns to a tuple and derive primary_keys when omitted."""
        object.__setattr__(self, "columns", tuple(self.columns))
        if self.primary_keys is None:
            pks = tuple(c for c in self.columns if c.is_primary_key)
            object.__setattr__(self, "primary_keys", pks)
        else:
            object.__setattr__(self, "primary_keys", tuple(self.primary_keys))

    @property
    def has_primary_key(self) -> bool:
        return len(self.primary_keys) > 0

    def get_column(self, name: str) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass(frozen=True)
class EnumType:
    """Enumerated type. Values keep the database's enumsortorder."""

    name: str
    values: tuple[str, ...] = ()
    comment: Optional[str] = None
    not_null: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class SchemaModel:
    """Complete inspected schema."""

    tables: tuple[Table, ...] = ()
    types: tuple[EnumType, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tables", tuple(self.tables))
        object.__setattr__(self, "types", tuple(self.types))

    def get_table(self, name: str) -> Optional[Table]:
        """Get a table by name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def find_type(self, name: str) -> Optional[EnumType]:
        """Get an enum type by name."""
        for typ in self.types:
            if typ.name == name:
                return typ
        return None

    def type_names(self) -> set[str]:
        """Get all enum type names."""
        return {typ.name for typ in self.types}
