"""Generator abstraction shared by all backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, ClassVar, Iterable, Optional

from pgschemagen.config import GeneratorConfig
from pgschemagen.generators.bindings import Bindings
from pgschemagen.generators.types import MappedType, TypeMap
from pgschemagen.naming import to_lower_camel, to_upper_camel
from pgschemagen.observer import GenerationObserver, LoggingObserver
from pgschemagen.render import Renderer
from pgschemagen.schema.models import Column, EnumType, SchemaModel, Table
from pgschemagen.sink import ArtifactSink
from pgschemagen.types import ConstraintKind, MatchPolicy

__all__ = ["IgnoreMatcher", "ColumnFacts", "Generator", "utc_timestamp"]

PUBLIC = "public"
PRIVATE = "private"


def utc_timestamp() -> str:
    """Current UTC time in RFC 3339, e.g. 2024-01-02T03:04:05Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class IgnoreMatcher:
    """Decide whether a table or column name is excluded from generation.

    With MatchPolicy.CONTAINS a name is excluded when any pattern occurs
    within it, which covers prefix and tenant-style exclusions. With
    MatchPolicy.EXACT the name must equal a pattern.
    """

    def __init__(
        self, patterns: Iterable[str], policy: MatchPolicy = MatchPolicy.CONTAINS
    ):
        self.patterns = tuple(p for p in patterns if p)
        self.policy = policy

    def is_ignored(self, name: str) -> bool:
        if self.policy is MatchPolicy.EXACT:
            return name in self.patterns
        return any(pattern in name for pattern in self.patterns)


@dataclass(frozen=True)
class ColumnFacts:
    """Facts derived once per column and handed to templates."""

    column: Column
    field_name: str
    accessor_name: str
    mapped: MappedType
    access: str
    insertable: bool
    updatable: bool
    primary_key: bool
    unique: bool
    generated: bool
    version: bool
    enum: Optional[EnumType]
    foreign_note: str
    check_note: str
    comment: str

    @property
    def name(self) -> str:
        return self.column.name

    @property
    def type(self) -> str:
        return self.mapped.expression

    @property
    def nullable(self) -> bool:
        return self.column.nullable


def single_line(text: Optional[str]) -> str:
    return (text or "").replace("\n", "")


class Generator(ABC):
    """Base class for backend generators.

    Subclasses set TYPE_NAME (the configuration discriminator) and
    implement type_map() and build().
    """

    TYPE_NAME: ClassVar[str]

    def __init__(
        self,
        config: GeneratorConfig,
        renderer: Renderer,
        observer: Optional[GenerationObserver] = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.observer = observer or LoggingObserver()
        self._clock = clock
        self._table_matcher = IgnoreMatcher(config.ignore_tables, config.ignore_match)
        self._column_matcher = IgnoreMatcher(config.ignore_columns, config.ignore_match)
        self._type_map = self.type_map()

    def kind(self) -> str:
        return self.TYPE_NAME

    @abstractmethod
    def type_map(self) -> TypeMap:
        """Build this backend's ordered type rules."""

    @abstractmethod
    def build(self, model: SchemaModel, sink: ArtifactSink) -> None:
        """Render every artifact for model into sink.

        Raises:
            BuildError: On template lookup, render or write failure.
        """

    def now(self) -> str:
        return self._clock()

    def tables(self, model: SchemaModel) -> list[Table]:
        """Tables not excluded by ignore_tables, in model order."""
        return [t for t in model.tables if not self._table_matcher.is_ignored(t.name)]

    def columns(self, table: Table) -> list[Column]:
        """Columns not excluded by ignore_columns, in table order."""
        return [
            c for c in table.columns if not self._column_matcher.is_ignored(c.name)
        ]

    @staticmethod
    def enums(model: SchemaModel) -> dict[str, EnumType]:
        return {typ.name: typ for typ in model.types}

    def map_type(self, raw_type: str, model: SchemaModel) -> MappedType:
        return self._type_map.resolve(raw_type, self.enums(model))

    def column_facts(self, column: Column, model: SchemaModel) -> ColumnFacts:
        """Derive the per-column facts used by this backend's templates."""
        insertable = column.name not in self.config.not_insertable_columns
        updatable = column.name not in self.config.not_updatable_columns
        mapped = self.map_type(column.data_type, model)

        foreign_note = ""
        if column.foreign_table:
            foreign_note = f"references {column.foreign_table}"

        check_note = ""
        if column.constraint is ConstraintKind.CHECK and column.constraint_source:
            check_note = column.constraint_source

        return ColumnFacts(
            column=column,
            field_name=to_lower_camel(column.name),
            accessor_name=to_upper_camel(column.name),
            mapped=mapped,
            access=PRIVATE if not insertable and not updatable else PUBLIC,
            insertable=insertable,
            updatable=updatable,
            primary_key=column.is_primary_key,
            unique=column.is_unique,
            generated=column.is_generated,
            version=bool(self.config.version_field_column)
            and column.name == self.config.version_field_column,
            enum=mapped.enum,
            foreign_note=foreign_note,
            check_note=check_note,
            comment=single_line(column.comment),
        )

    def render(self, template_name: str, bindings: Bindings) -> str:
        return self.renderer.render(template_name, bindings)

    def emit(self, sink: ArtifactSink, filename: str, text: str) -> None:
        sink.write(filename, text)
        self.observer.artifact_written(self.kind(), filename)
