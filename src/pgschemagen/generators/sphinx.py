"""reStructuredText reference documentation generator."""

from pgschemagen.generators.base import ColumnFacts, Generator, single_line
from pgschemagen.generators.bindings import (
    DocEnum,
    DocMember,
    EnumDocBindings,
    TableDocBindings,
)
from pgschemagen.generators.types import TypeMap, enum_rule
from pgschemagen.naming import to_upper_camel
from pgschemagen.schema.models import SchemaModel, Table
from pgschemagen.sink import ArtifactSink
from pgschemagen.types import ConstraintKind

__all__ = ["SphinxGenerator"]

ENUM_FILE = "enum.rst"


class SphinxGenerator(Generator):
    """Emit one <Name>.rst per table plus an aggregate enum.rst.

    Documentation shows database types as declared, so the type map only
    recognizes enums and otherwise passes types through.
    """

    TYPE_NAME = "sphinx"
    EXTENSION = ".rst"

    def type_map(self) -> TypeMap:
        return TypeMap([enum_rule(lambda typ: typ.name)], wrap_array=lambda t: f"{t}[]")

    def build(self, model: SchemaModel, sink: ArtifactSink) -> None:
        for table in self.tables(model):
            filename = to_upper_camel(table.name) + self.EXTENSION
            self.emit(sink, filename, self._build_table(table, model))

        self.emit(sink, ENUM_FILE, self._build_types(model))

    def _build_table(self, table: Table, model: SchemaModel) -> str:
        members = []
        for col in self.columns(table):
            fact = self.column_facts(col, model)
            dtype = fact.type
            if fact.generated:
                dtype += "(serial)"
            members.append(
                DocMember(
                    name=col.name,
                    type=dtype,
                    constraint=self.constraint_text(fact),
                    comment=fact.comment,
                )
            )

        return self.render(
            "table",
            TableDocBindings(
                generated_at=self.now(),
                comment=table.comment or "",
                name=table.name,
                members=tuple(members),
            ),
        )

    @staticmethod
    def constraint_text(fact: ColumnFacts) -> str:
        kind = fact.column.constraint
        if kind is ConstraintKind.PRIMARY:
            return "Primary"
        if kind in (ConstraintKind.FOREIGN, ConstraintKind.CHECK):
            return fact.column.constraint_source or ""
        if kind is ConstraintKind.UNIQUE:
            return "Unique"
        return ""

    def _build_types(self, model: SchemaModel) -> str:
        members = tuple(
            DocEnum(
                name=typ.name,
                comment=single_line(typ.comment),
                values=typ.values,
            )
            for typ in model.types
        )
        return self.render(
            "enum", EnumDocBindings(generated_at=self.now(), members=members)
        )
