"""JPA/Hibernate entity class generator."""

from pgschemagen.generators.base import ColumnFacts, Generator
from pgschemagen.generators.bindings import (
    ClassBindings,
    EntityMember,
    GetterBindings,
    JavaEnumBindings,
    MetamodelBindings,
    MetamodelMember,
    SetterBindings,
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
from pgschemagen.naming import (
    decapitalize,
    is_number,
    to_upper_camel,
    to_upper_snake,
)
from pgschemagen.schema.models import EnumType, SchemaModel, Table
from pgschemagen.sink import ArtifactSink

__all__ = ["HibernateGenerator"]

JSON_TYPES = ("json", "jsonb")


class HibernateGenerator(Generator):
    """Emit one entity class per table and one enum class per enum type.

    Each enum also gets a <Name>UserType companion. With generate_metamodel
    each table gets a <Name>_ JPA static metamodel companion.
    """

    TYPE_NAME = "hibernate"
    EXTENSION = ".java"

    def type_map(self) -> TypeMap:
        # http://docs.jboss.org/hibernate/orm/5.2/userguide/html_single/Hibernate_User_Guide.html#basic
        return TypeMap(
            [
                prefix(NUMERIC_PARAM_PREFIX, "BigDecimal"),
                suffix(TIME_ZONE_SUFFIX, "OffsetDateTime"),
                enum_rule(lambda typ: to_upper_camel(typ.name)),
                exact("text", "String"),
                exact(("int", "integer", "serial"), "Integer"),
                exact(("smallint", "smallserial"), "Short"),
                exact(("bigint", "bigserial"), "Long"),
                exact(("float", "real"), "Float"),
                exact(("double", "double precision"), "Double"),
                exact("uuid", "UUID"),
                exact("bytea", "byte[]"),
                exact("numeric", "BigDecimal"),
                exact("date", "LocalDate"),
                exact(JSON_TYPES, "JsonObject"),
                exact("timestamp", "Timestamp"),
                exact("boolean", "boolean"),
                prefix("character", "String"),
                prefix("varchar", "String"),
            ],
            wrap_array=lambda t: f"{t}[]",
        )

    def build(self, model: SchemaModel, sink: ArtifactSink) -> None:
        table_files: dict[str, str] = {}
        for table in self.tables(model):
            name = to_upper_camel(table.name)
            self.emit(sink, name + self.EXTENSION, self._build_table(table, model))
            table_files[name + self.EXTENSION] = table.name

            if self.config.generate_metamodel:
                self.emit(
                    sink,
                    name + "_" + self.EXTENSION,
                    self._build_metamodel(table, model),
                )

        for typ in model.types:
            name = to_upper_camel(typ.name)
            bindings = self._enum_bindings(typ)
            for filename in (name + self.EXTENSION, name + "UserType" + self.EXTENSION):
                if filename in table_files:
                    self.observer.warning(
                        self.kind(),
                        f"enum {typ.name} overwrites {filename} of table "
                        f"{table_files[filename]}",
                    )
            self.emit(sink, name + self.EXTENSION, self.render("enum", bindings))
            self.emit(
                sink,
                name + "UserType" + self.EXTENSION,
                self.render("enum_usertype", bindings),
            )

    def _build_table(self, table: Table, model: SchemaModel) -> str:
        facts = [self.column_facts(col, model) for col in self.columns(table)]
        if not table.has_primary_key:
            self.observer.warning(
                self.kind(), f"{table.name} doesn't have a primary key"
            )

        accessors: list[str] = []
        for fact in facts:
            accessors.append(self._getter(fact))
            accessors.append(self._setter(fact))

        return self.render(
            "class",
            ClassBindings(
                package_name=self.config.package_name,
                generated_at=self.now(),
                table=table,
                name=to_upper_camel(table.name),
                members=tuple(
                    EntityMember(name=f.field_name, type=f.type, comment=f.comment)
                    for f in facts
                ),
                accessors=tuple(accessors),
            ),
        )

    def _build_metamodel(self, table: Table, model: SchemaModel) -> str:
        cls_name = to_upper_camel(table.name)
        members = []
        for col in self.columns(table):
            mapped = self.map_type(col.data_type, model)
            typ = mapped.element[:1].upper() + mapped.element[1:]
            if mapped.is_array:
                typ += "[]"
            members.append(
                MetamodelMember(
                    attr="SingularAttribute",
                    cls_name=cls_name,
                    name=decapitalize(to_upper_camel(col.name)),
                    type=typ,
                )
            )
        return self.render(
            "metamodel",
            MetamodelBindings(
                package_name=self.config.package_name,
                name=cls_name,
                members=tuple(members),
            ),
        )

    def _getter(self, fact: ColumnFacts) -> str:
        return self.render(
            "getter",
            GetterBindings(
                func=fact.accessor_name,
                name=fact.field_name,
                type=fact.type,
                annotations=tuple(self.annotations(fact)),
            ),
        )

    def _setter(self, fact: ColumnFacts) -> str:
        constraint = f"    // {fact.check_note}" if fact.check_note else ""
        return self.render(
            "setter",
            SetterBindings(
                func=fact.accessor_name,
                name=fact.field_name,
                type=fact.type,
                scope=fact.access,
                constraint=constraint,
            ),
        )

    def annotations(self, fact: ColumnFacts) -> list[str]:
        """JPA annotations for a column's getter, in emission order."""
        col = fact.column
        ret = []
        if fact.primary_key:
            ret.append("@Id")
        if fact.generated:
            ret.append("@GeneratedValue(strategy=GenerationType.IDENTITY)")
        if fact.enum is not None and not fact.mapped.is_array:
            enum_class = to_upper_camel(fact.enum.name)
            qualified = (
                f"{self.config.package_name}.{enum_class}"
                if self.config.package_name
                else enum_class
            )
            ret.append(f'@Type(type = "{qualified}UserType")')
        if col.base_type in JSON_TYPES:
            ret.append('@Type(type = "JsonUserType")')
        if fact.mapped.is_array:
            element = fact.mapped.element[:1].upper() + fact.mapped.element[1:]
            ret.append(f'@Type(type = "{element}ArrayUserType")')
        if fact.version:
            ret.append("@javax.persistence.Version")

        column_args = [f'name="{col.name}"', f"nullable={str(fact.nullable).lower()}"]
        if fact.unique:
            column_args.append("unique=true")
        if not fact.insertable:
            column_args.append("insertable=false")
        if not fact.updatable:
            column_args.append("updatable=false")
        ret.append(f"@Column({', '.join(column_args)})")
        return ret

    def _enum_bindings(self, typ: EnumType) -> JavaEnumBindings:
        members = []
        dt = "String"
        for val in typ.values:
            if is_number(val):
                members.append(f"VALUE_{to_upper_snake(val)}({val})")
                dt = "Integer"
            else:
                members.append(f'{to_upper_snake(val)}("{val}")')

        return JavaEnumBindings(
            package_name=self.config.package_name,
            generated_at=self.now(),
            name=to_upper_camel(typ.name),
            snake=typ.name,
            type=typ,
            dt=dt,
            members=", ".join(members) + ";",
        )
