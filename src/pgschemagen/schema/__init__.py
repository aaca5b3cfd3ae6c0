"""Schema model and introspection modules."""

from pgschemagen.schema.introspect import (
    SchemaInspector,
    SQLClient,
    inspect_schema,
    reconcile_columns,
)
from pgschemagen.schema.models import (
    Column,
    EnumType,
    SchemaModel,
    Table,
    is_sequence,
)

__all__ = [
    "Column",
    "EnumType",
    "SchemaInspector",
    "SchemaModel",
    "SQLClient",
    "Table",
    "inspect_schema",
    "is_sequence",
    "reconcile_columns",
]
