"""Tests for the Hibernate entity generator."""

import pytest

from pgschemagen.generators.hibernate import HibernateGenerator
from pgschemagen.render import JinjaRenderer, default_template_dir
from pgschemagen.schema.models import Column, EnumType, SchemaModel, Table
from pgschemagen.types import ConstraintKind
from tests.helpers import (
    FIXED_TIME,
    MemorySink,
    RecordingObserver,
    RecordingRenderer,
    fixed_clock,
    make_generator_config,
)


def make_generator(renderer=None, observer=None, **kwargs) -> HibernateGenerator:
    return HibernateGenerator(
        make_generator_config("hibernate", **kwargs),
        renderer or RecordingRenderer(),
        observer,
        clock=fixed_clock,
    )


def jinja() -> JinjaRenderer:
    return JinjaRenderer(default_template_dir("hibernate"))


USER_ACCOUNT = Table(
    name="user_account",
    comment="Accounts",
    columns=[
        Column(
            name="id",
            data_type="serial",
            not_null=True,
            is_primary_key=True,
            constraint=ConstraintKind.PRIMARY,
        ),
        Column(
            name="email",
            data_type="text",
            not_null=True,
            is_unique=True,
            constraint=ConstraintKind.UNIQUE,
        ),
    ],
)


class TestBuildFiles:
    def test_one_file_per_table(self):
        sink = MemorySink()
        make_generator().build(SchemaModel(tables=[USER_ACCOUNT]), sink)
        assert list(sink.files) == ["UserAccount.java"]

    def test_metamodel_companion(self):
        sink = MemorySink()
        make_generator(generate_metamodel=True).build(
            SchemaModel(tables=[USER_ACCOUNT]), sink
        )
        assert list(sink.files) == ["UserAccount.java", "UserAccount_.java"]

    def test_enum_files(self):
        sink = MemorySink()
        model = SchemaModel(types=[EnumType(name="user_mood", values=("ok",))])
        make_generator().build(model, sink)
        assert list(sink.files) == ["UserMood.java", "UserMoodUserType.java"]

    def test_ignored_table_skipped(self):
        sink = MemorySink()
        make_generator(ignore_tables=["account"]).build(
            SchemaModel(tables=[USER_ACCOUNT]), sink
        )
        assert sink.files == {}

    def test_artifacts_reported(self):
        observer = RecordingObserver()
        make_generator(observer=observer).build(
            SchemaModel(tables=[USER_ACCOUNT]), MemorySink()
        )
        assert observer.events == [("artifact", "hibernate", "UserAccount.java")]

    def test_missing_primary_key_warns(self):
        observer = RecordingObserver()
        table = Table(name="log", columns=[Column(name="msg", data_type="text")])
        make_generator(observer=observer).build(SchemaModel(tables=[table]), MemorySink())
        assert ("warning", "hibernate", "log doesn't have a primary key") in observer.events

    def test_enum_named_like_table_warns(self):
        observer = RecordingObserver()
        sink = MemorySink()
        table = Table(
            name="status",
            columns=[Column(name="id", data_type="integer", is_primary_key=True)],
        )
        model = SchemaModel(tables=[table], types=[EnumType(name="status", values=("a",))])

        make_generator(observer=observer).build(model, sink)

        assert (
            "warning",
            "hibernate",
            "enum status overwrites Status.java of table status",
        ) in observer.events
        assert list(sink.files) == ["Status.java", "StatusUserType.java"]

    def test_no_collision_no_warning(self):
        observer = RecordingObserver()
        model = SchemaModel(
            tables=[USER_ACCOUNT], types=[EnumType(name="user_mood", values=("a",))]
        )
        make_generator(observer=observer).build(model, MemorySink())
        assert not [e for e in observer.events if e[0] == "warning"]


class TestBindings:
    def test_class_bindings(self):
        renderer = RecordingRenderer()
        make_generator(renderer, package_name="com.acme").build(
            SchemaModel(tables=[USER_ACCOUNT]), MemorySink()
        )

        (bindings,) = renderer.bindings_for("class")
        assert bindings.package_name == "com.acme"
        assert bindings.generated_at == FIXED_TIME
        assert bindings.name == "UserAccount"
        assert bindings.table is USER_ACCOUNT
        assert [(m.name, m.type) for m in bindings.members] == [
            ("id", "Integer"),
            ("email", "String"),
        ]
        # getter and setter per column, rendered in column order
        assert bindings.accessors == ("<getter>", "<setter>", "<getter>", "<setter>")

    def test_setter_scope_and_check(self):
        renderer = RecordingRenderer()
        table = Table(
            name="person",
            columns=[
                Column(
                    name="age",
                    data_type="integer",
                    constraint=ConstraintKind.CHECK,
                    constraint_source="CHECK (age > 0)",
                )
            ],
        )
        make_generator(
            renderer, not_insertable_columns=["age"], not_updatable_columns=["age"]
        ).build(SchemaModel(tables=[table]), MemorySink())

        (setter,) = renderer.bindings_for("setter")
        assert setter.scope == "private"
        assert setter.func == "Age"
        assert setter.constraint == "    // CHECK (age > 0)"

    def test_metamodel_members(self):
        renderer = RecordingRenderer()
        table = Table(
            name="doc",
            columns=[
                Column(name="url_path", data_type="text"),
                Column(name="scores", data_type="integer[]"),
                Column(name="raw", data_type="bytea"),
            ],
        )
        make_generator(renderer, generate_metamodel=True).build(
            SchemaModel(tables=[table]), MemorySink()
        )

        (bindings,) = renderer.bindings_for("metamodel")
        assert [(m.name, m.type) for m in bindings.members] == [
            ("urlPath", "String"),
            ("scores", "Integer[]"),
            ("raw", "Byte[]"),
        ]
        assert all(m.cls_name == "Doc" for m in bindings.members)

    def test_enum_string_values(self):
        renderer = RecordingRenderer()
        model = SchemaModel(types=[EnumType(name="mood", values=("sad", "very_happy"))])
        make_generator(renderer).build(model, MemorySink())

        (bindings,) = renderer.bindings_for("enum")
        assert bindings.dt == "String"
        assert bindings.members == 'SAD("sad"), VERY_HAPPY("very_happy");'

    def test_enum_numeric_values(self):
        renderer = RecordingRenderer()
        model = SchemaModel(types=[EnumType(name="level", values=("1", "2"))])
        make_generator(renderer).build(model, MemorySink())

        (bindings,) = renderer.bindings_for("enum")
        assert bindings.dt == "Integer"
        assert bindings.members == "VALUE_1(1), VALUE_2(2);"


class TestAnnotations:
    def annotations(self, column, model=None, **kwargs):
        gen = make_generator(**kwargs)
        return gen.annotations(gen.column_facts(column, model or SchemaModel()))

    def test_serial_primary_key(self):
        assert self.annotations(USER_ACCOUNT.columns[0]) == [
            "@Id",
            "@GeneratedValue(strategy=GenerationType.IDENTITY)",
            '@Column(name="id", nullable=false)',
        ]

    def test_sequence_primary_key(self):
        col = Column(
            name="id",
            data_type="integer",
            not_null=True,
            default="nextval('t_id_seq'::regclass)",
            is_primary_key=True,
        )
        assert "@GeneratedValue(strategy=GenerationType.IDENTITY)" in self.annotations(col)

    def test_plain_primary_key_not_generated(self):
        col = Column(name="code", data_type="text", is_primary_key=True)
        assert self.annotations(col)[:2] == ["@Id", '@Column(name="code", nullable=true)']

    def test_unique(self):
        assert self.annotations(USER_ACCOUNT.columns[1]) == [
            '@Column(name="email", nullable=false, unique=true)'
        ]

    def test_enum_user_type(self):
        mood = EnumType(name="user_mood")
        result = self.annotations(
            Column(name="mood", data_type="user_mood"),
            SchemaModel(types=[mood]),
            package_name="com.acme",
        )
        assert result[0] == '@Type(type = "com.acme.UserMoodUserType")'

    def test_enum_array_uses_array_type(self):
        mood = EnumType(name="user_mood")
        result = self.annotations(
            Column(name="moods", data_type="user_mood[]"), SchemaModel(types=[mood])
        )
        assert result[0] == '@Type(type = "UserMoodArrayUserType")'

    def test_json(self):
        result = self.annotations(Column(name="data", data_type="jsonb"))
        assert result[0] == '@Type(type = "JsonUserType")'

    def test_array(self):
        result = self.annotations(Column(name="tags", data_type="text[]"))
        assert result[0] == '@Type(type = "StringArrayUserType")'

    def test_version_and_restrictions(self):
        result = self.annotations(
            Column(name="version", data_type="integer", not_null=True),
            version_field_column="version",
            not_insertable_columns=["version"],
            not_updatable_columns=["version"],
        )
        assert result == [
            "@javax.persistence.Version",
            '@Column(name="version", nullable=false, insertable=false, updatable=false)',
        ]


class TestRenderedOutput:
    def test_entity_class(self):
        sink = MemorySink()
        make_generator(jinja(), package_name="com.acme").build(
            SchemaModel(tables=[USER_ACCOUNT]), sink
        )

        text = sink.files["UserAccount.java"]
        assert "package com.acme;" in text
        assert '@Table(name = "user_account")' in text
        assert "public class UserAccount implements Serializable {" in text
        assert "private Integer id;" in text
        assert "private String email;" in text
        assert "@GeneratedValue(strategy=GenerationType.IDENTITY)" in text
        assert '@Column(name="email", nullable=false, unique=true)' in text
        assert "public Integer getId() {" in text
        assert "public void setEmail(String email) {" in text
        assert FIXED_TIME in text

    def test_no_package_line_without_package(self):
        sink = MemorySink()
        make_generator(jinja()).build(SchemaModel(tables=[USER_ACCOUNT]), sink)
        assert "package " not in sink.files["UserAccount.java"]

    def test_enum_class(self):
        sink = MemorySink()
        model = SchemaModel(
            types=[EnumType(name="user_mood", values=("sad", "ok"), comment="Moods")]
        )
        make_generator(jinja()).build(model, sink)

        enum_text = sink.files["UserMood.java"]
        assert "public enum UserMood {" in enum_text
        assert 'SAD("sad"), OK("ok");' in enum_text
        assert "private final String value;" in enum_text

        usertype = sink.files["UserMoodUserType.java"]
        assert "public class UserMoodUserType implements UserType {" in usertype
        assert 'obj.setType("user_mood");' in usertype

    def test_metamodel(self):
        sink = MemorySink()
        make_generator(jinja(), generate_metamodel=True).build(
            SchemaModel(tables=[USER_ACCOUNT]), sink
        )
        text = sink.files["UserAccount_.java"]
        assert "public abstract class UserAccount_ {" in text
        assert (
            "public static volatile SingularAttribute<UserAccount, String> email;"
            in text
        )


@pytest.mark.parametrize(
    "template", ["class", "getter", "setter", "metamodel", "enum", "enum_usertype"]
)
def test_bundled_templates_exist(template):
    assert (default_template_dir("hibernate") / f"{template}.j2").is_file()
