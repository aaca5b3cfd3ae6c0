"""Schema introspection from the PostgreSQL catalog."""

import logging
from dataclasses import replace
from typing import Any, Iterable, Optional, Protocol, Sequence

from pgschemagen.deadline import Deadline
from pgschemagen.exceptions import (
    DeadlineExceededError,
    QueryError,
    SchemagenError,
)
from pgschemagen.schema.models import Column, EnumType, SchemaModel, Table
from pgschemagen.types import ConstraintKind

__all__ = ["SQLClient", "SchemaInspector", "inspect_schema", "reconcile_columns"]

logger = logging.getLogger(__name__)


class SQLClient(Protocol):
    """Protocol for SQL client used by the inspector."""

    def fetchall(
        self, sql: str, params: Sequence[Any] = (), timeout: Optional[float] = None
    ) -> list: ...


TABLES_SQL = """
    SELECT c.relname AS table_name,
           obj_description(c.oid, 'pg_class') AS comment
    FROM pg_class c
    JOIN ONLY pg_namespace n ON n.oid = c.relnamespace
    WHERE n.nspname = %s
      AND c.relkind = 'r'
    ORDER BY c.relname
"""

# One row per (column, constraint) pair; reconcile_columns merges them.
COLUMNS_SQL = """
    SELECT a.attnum AS ordinal,
           a.attname AS column_name,
           col_description(c.oid, a.attnum) AS comment,
           format_type(a.atttypid, a.atttypmod) AS data_type,
           a.attnotnull AS not_null,
           COALESCE(pg_get_expr(ad.adbin, ad.adrelid), '') AS column_default,
           ct.contype AS constraint_type,
           pg_catalog.pg_get_constraintdef(ct.oid, true) AS constraint_source,
           rc.relname AS foreign_table
    FROM pg_attribute a
    JOIN ONLY pg_class c ON c.oid = a.attrelid
    JOIN ONLY pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_constraint ct ON ct.conrelid = c.oid AND a.attnum = ANY(ct.conkey)
    LEFT JOIN pg_attrdef ad ON ad.adrelid = c.oid AND ad.adnum = a.attnum
    LEFT JOIN pg_class rc ON rc.oid = ct.confrelid
    WHERE a.attisdropped = false
      AND n.nspname = %s
      AND c.relname = %s
      AND a.attnum > 0
    ORDER BY a.attnum
"""

TYPES_SQL = """
    SELECT t.oid AS type_oid,
           t.typname AS type_name,
           obj_description(t.oid, 'pg_type') AS comment,
           t.typnotnull AS not_null
    FROM pg_type t
    LEFT JOIN pg_catalog.pg_namespace n ON n.oid = t.typnamespace
    WHERE (t.typrelid = 0
           OR (SELECT c.relkind = 'c' FROM pg_catalog.pg_class c WHERE c.oid = t.typrelid))
      AND NOT EXISTS (
          SELECT 1 FROM pg_catalog.pg_type el
          WHERE el.oid = t.typelem AND el.typarray = t.oid)
      AND n.nspname NOT IN ('pg_catalog', 'information_schema')
      AND t.typtype = 'e'
    ORDER BY t.typname
"""

ENUM_VALUES_SQL = """
    SELECT e.enumlabel AS label
    FROM pg_enum e
    WHERE e.enumtypid = %s
    ORDER BY e.enumsortorder
"""


def _row_get(row: Any, key: str, default: Any = None) -> Any:
    """Safely get a value from a row, supporting dict-like and tuple-keyed rows."""
    if hasattr(row, "get"):
        return row.get(key, default)
    try:
        return row[key]
    except (KeyError, IndexError, TypeError):
        return default


def _column_from_row(row: Any) -> Column:
    kind = ConstraintKind.from_code(_row_get(row, "constraint_type"))
    return Column(
        ordinal=_row_get(row, "ordinal", 0),
        name=_row_get(row, "column_name"),
        comment=_row_get(row, "comment"),
        data_type=_row_get(row, "data_type"),
        not_null=bool(_row_get(row, "not_null", False)),
        default=_row_get(row, "column_default") or None,
        is_primary_key=kind is ConstraintKind.PRIMARY,
        is_unique=kind is ConstraintKind.UNIQUE,
        constraint=kind,
        constraint_source=_row_get(row, "constraint_source"),
        foreign_table=_row_get(row, "foreign_table"),
    )


def reconcile_columns(rows: Iterable[Any]) -> list[Column]:
    """Merge catalog rows sharing a column name into single columns.

    Boolean flags are OR-ed across rows. constraint_source and
    foreign_table take the last row's value, overwriting earlier ones,
    while the constraint kind stays that of the first row. Columns keep
    the order in which their name was first seen.
    """
    merged: dict[str, Column] = {}
    for row in rows:
        col = _column_from_row(row)
        existing = merged.get(col.name)
        if existing is None:
            merged[col.name] = col
            continue
        merged[col.name] = replace(
            existing,
            is_primary_key=existing.is_primary_key or col.is_primary_key,
            is_unique=existing.is_unique or col.is_unique,
            constraint_source=col.constraint_source,
            foreign_table=col.foreign_table,
        )
    return list(merged.values())


class SchemaInspector:
    """Introspect tables and enum types from the PostgreSQL catalog."""

    def __init__(self, client: SQLClient, namespace: str = "public") -> None:
        self._client = client
        self._namespace = namespace

    def inspect(self, deadline: Optional[Deadline] = None) -> SchemaModel:
        """Build the schema model.

        Either the whole model is returned or an error is raised; a
        partially inspected schema is never returned.

        Raises:
            QueryError: If any catalog query fails or the deadline passes.
        """
        deadline = deadline or Deadline()
        tables = self._fetch_tables(deadline)
        types = self._fetch_types(deadline)
        logger.debug(
            "Inspected %d tables and %d enum types in %s",
            len(tables),
            len(types),
            self._namespace,
        )
        return SchemaModel(tables=tuple(tables), types=tuple(types))

    def _fetch(
        self, operation: str, sql: str, params: Sequence[Any], deadline: Deadline
    ) -> list:
        """Run one catalog query, wrapping failures with the operation name."""
        deadline.check(operation)
        try:
            return self._client.fetchall(sql, params, timeout=deadline.remaining())
        except SchemagenError:
            raise
        except Exception as e:
            if deadline.expired() or deadline.cancelled:
                raise DeadlineExceededError(
                    operation, f"{operation}: deadline exceeded ({e})"
                ) from e
            raise QueryError(f"{operation}: {e}") from e

    def _fetch_tables(self, deadline: Deadline) -> list[Table]:
        rows = self._fetch("tables query", TABLES_SQL, (self._namespace,), deadline)
        tables = []
        for row in rows:
            name = _row_get(row, "table_name")
            if name is None:
                raise QueryError("tables scan: row without table_name")
            columns = self._fetch_columns(name, deadline)
            tables.append(
                Table(
                    schema=self._namespace,
                    name=name,
                    comment=_row_get(row, "comment"),
                    columns=tuple(columns),
                )
            )
        return tables

    def _fetch_columns(self, table_name: str, deadline: Deadline) -> list[Column]:
        operation = f"columns query of {table_name}"
        rows = self._fetch(
            operation, COLUMNS_SQL, (self._namespace, table_name), deadline
        )
        for row in rows:
            if _row_get(row, "column_name") is None or _row_get(row, "data_type") is None:
                raise QueryError(f"columns scan of {table_name}: incomplete row")
        return reconcile_columns(rows)

    def _fetch_types(self, deadline: Deadline) -> list[EnumType]:
        rows = self._fetch("type query", TYPES_SQL, (), deadline)
        types = []
        for row in rows:
            name = _row_get(row, "type_name")
            values = self._fetch_enum_values(name, _row_get(row, "type_oid"), deadline)
            types.append(
                EnumType(
                    name=name,
                    comment=_row_get(row, "comment"),
                    not_null=bool(_row_get(row, "not_null", False)),
                    values=tuple(values),
                )
            )
        return types

    def _fetch_enum_values(
        self, type_name: str, type_oid: Any, deadline: Deadline
    ) -> list[str]:
        rows = self._fetch(
            f"enum query of {type_name}", ENUM_VALUES_SQL, (type_oid,), deadline
        )
        return [_row_get(row, "label") for row in rows]


def inspect_schema(
    client: SQLClient, namespace: str = "public", deadline: Optional[Deadline] = None
) -> SchemaModel:
    """Inspect the namespace and return its immutable schema model."""
    return SchemaInspector(client, namespace).inspect(deadline)
