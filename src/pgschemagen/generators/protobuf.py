"""proto3 message definition generator."""

import posixpath

from pgschemagen.generators.base import Generator, single_line
from pgschemagen.generators.bindings import (
    MessageBindings,
    MessageField,
    ProtoEnum,
    ProtoEnumBindings,
)
from pgschemagen.generators.types import (
    NUMERIC_PARAM_PREFIX,
    TIME_ZONE_SUFFIX,
    TypeMap,
    enum_rule,
    exact,
    prefix,
    suffix,
)
from pgschemagen.naming import is_number, to_upper_camel, to_upper_snake
from pgschemagen.schema.models import EnumType, SchemaModel, Table
from pgschemagen.sink import ArtifactSink
from pgschemagen.types import NumericRepresentation

__all__ = ["ProtoBufGenerator"]

ENUM_FILE = "enum.proto"
TIMESTAMP = "google.protobuf.Timestamp"


class ProtoBufGenerator(Generator):
    """Emit one <Name>Message.proto per table plus an aggregate enum.proto."""

    TYPE_NAME = "protobuf"
    SUFFIX = "Message.proto"

    def type_map(self) -> TypeMap:
        # https://developers.google.com/protocol-buffers/docs/proto3#simple
        numeric = (
            "string"
            if self.config.numeric_representation is NumericRepresentation.STRING
            else "int64"
        )
        return TypeMap(
            [
                prefix(NUMERIC_PARAM_PREFIX, numeric),
                suffix(TIME_ZONE_SUFFIX, TIMESTAMP),
                enum_rule(self._enum_reference),
                exact("text", "string"),
                exact(("int", "integer", "serial"), "int32"),
                exact(("smallint", "smallserial"), "int32"),
                exact(("bigint", "bigserial"), "int64"),
                exact(("float", "real"), "float"),
                exact(("double", "double precision"), "double"),
                exact("uuid", "string"),
                exact("bytea", "bytes"),
                exact("numeric", numeric),
                exact("date", "string"),
                exact("timestamp", TIMESTAMP),
                exact("boolean", "bool"),
                exact(("json", "jsonb"), "map<string, string>"),
                prefix("character", "string"),
                prefix("varchar", "string"),
            ],
            wrap_array=lambda t: f"repeated {t}",
        )

    def _enum_reference(self, typ: EnumType) -> str:
        name = to_upper_camel(typ.name)
        if self.config.package_name:
            return f"{self.config.package_name}.{name}"
        return name

    def build(self, model: SchemaModel, sink: ArtifactSink) -> None:
        for table in self.tables(model):
            filename = to_upper_camel(table.name) + self.SUFFIX
            self.emit(sink, filename, self._build_table(table, model))

        self.emit(sink, ENUM_FILE, self._build_types(model.types))

    def _build_table(self, table: Table, model: SchemaModel) -> str:
        members = []
        for i, col in enumerate(self.columns(table)):
            fact = self.column_facts(col, model)
            members.append(
                MessageField(
                    name=col.name,
                    type=fact.type,
                    comment=fact.comment,
                    index=i + 1,
                )
            )

        return self.render(
            "message",
            MessageBindings(
                package_name=self.config.package_name,
                java_package=self.config.java_package,
                go_package=self.config.go_package,
                generated_at=self.now(),
                comment=table.comment or "",
                table=table,
                name=to_upper_camel(table.name) + "Message",
                members=tuple(members),
                enum_path=posixpath.join(self.config.enum_dir, ENUM_FILE),
            ),
        )

    def _build_types(self, types: tuple[EnumType, ...]) -> str:
        members = []
        for typ in types:
            name = to_upper_snake(typ.name)
            values = []
            for i, val in enumerate(typ.values):
                if is_number(val):
                    values.append(f"{name}_VALUE_{to_upper_snake(val)} = {i};")
                else:
                    values.append(f"{name}_{to_upper_snake(val)} = {i};")
            members.append(
                ProtoEnum(
                    name=to_upper_camel(typ.name),
                    comment=single_line(typ.comment),
                    values=tuple(values),
                )
            )

        return self.render(
            "enum",
            ProtoEnumBindings(
                package_name=self.config.package_name,
                java_package=self.config.java_package,
                go_package=self.config.go_package,
                generated_at=self.now(),
                members=tuple(members),
            ),
        )
