"""Shared test helpers for pgschemagen tests."""

from pathlib import Path
from typing import Any, Optional
from unittest.mock import MagicMock

from pgschemagen.config import GeneratorConfig
from pgschemagen.generators.bindings import Bindings


def column_row(
    name: str,
    data_type: str,
    ordinal: int = 1,
    not_null: bool = False,
    default: str = "",
    constraint_type: Optional[str] = None,
    constraint_source: Optional[str] = None,
    foreign_table: Optional[str] = None,
    comment: Optional[str] = None,
) -> dict:
    """One row as returned by the columns catalog query."""
    return {
        "ordinal": ordinal,
        "column_name": name,
        "comment": comment,
        "data_type": data_type,
        "not_null": not_null,
        "column_default": default,
        "constraint_type": constraint_type,
        "constraint_source": constraint_source,
        "foreign_table": foreign_table,
    }


def make_mock_client(
    tables_data: list[dict] | None = None,
    columns_data: dict[str, list[dict]] | None = None,
    types_data: list[dict] | None = None,
    enum_values_data: dict[Any, list[str]] | None = None,
) -> MagicMock:
    """Create a mock SQL client answering the inspector's catalog queries.

    Args:
        tables_data: Rows for the tables query
        columns_data: Dict mapping table_name -> column rows
        types_data: Rows for the enum types query
        enum_values_data: Dict mapping type_oid -> labels in sort order
    """
    client = MagicMock()
    tables_data = tables_data or []
    columns_data = columns_data or {}
    types_data = types_data or []
    enum_values_data = enum_values_data or {}

    def fetchall_side_effect(sql: str, params=(), timeout=None):
        sql_lower = sql.lower()

        if "from pg_attribute" in sql_lower:
            return list(columns_data.get(params[1], []))

        if "from pg_enum" in sql_lower:
            return [{"label": v} for v in enum_values_data.get(params[0], [])]

        if "from pg_type t" in sql_lower:
            return list(types_data)

        if "from pg_class c" in sql_lower:
            return list(tables_data)

        return []

    client.fetchall.side_effect = fetchall_side_effect
    return client


def user_account_client() -> MagicMock:
    """Catalog for one table: user_account(id serial pk, email text unique)."""
    return make_mock_client(
        tables_data=[{"table_name": "user_account", "comment": "Accounts"}],
        columns_data={
            "user_account": [
                column_row(
                    "id",
                    "serial",
                    ordinal=1,
                    not_null=True,
                    constraint_type="p",
                    constraint_source="PRIMARY KEY (id)",
                ),
                column_row(
                    "email",
                    "text",
                    ordinal=2,
                    not_null=True,
                    constraint_type="u",
                    constraint_source="UNIQUE (email)",
                ),
            ]
        },
    )


class MemorySink:
    """Artifact sink collecting files in a dict."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}

    def write(self, filename: str, text: str) -> None:
        self.files[filename] = text


class RecordingRenderer:
    """Renderer returning '<template>' and recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Bindings]] = []

    def render(self, template_name: str, bindings: Bindings) -> str:
        self.calls.append((template_name, bindings))
        return f"<{template_name}>"

    def bindings_for(self, template_name: str) -> list[Bindings]:
        return [b for name, b in self.calls if name == template_name]


class RecordingObserver:
    """Observer recording events as tuples."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def generator_started(self, kind, output, templates) -> None:
        self.events.append(("started", kind))

    def artifact_written(self, kind, filename) -> None:
        self.events.append(("artifact", kind, filename))

    def warning(self, kind, message) -> None:
        self.events.append(("warning", kind, message))

    def generator_finished(self, kind) -> None:
        self.events.append(("finished", kind))


def make_generator_config(
    type: str = "hibernate", output: Optional[Path] = None, **kwargs: Any
) -> GeneratorConfig:
    """Create a GeneratorConfig for tests with sensible defaults."""
    return GeneratorConfig(type=type, output=output or Path("."), **kwargs)


FIXED_TIME = "2024-01-02T03:04:05Z"


def fixed_clock() -> str:
    return FIXED_TIME
