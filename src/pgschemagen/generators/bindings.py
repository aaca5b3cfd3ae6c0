"""Typed template bindings, one class per template kind."""

from dataclasses import dataclass, fields
from typing import Any

from pgschemagen.schema.models import EnumType, Table

__all__ = [
    "Bindings",
    "EntityMember",
    "ClassBindings",
    "GetterBindings",
    "SetterBindings",
    "MetamodelMember",
    "MetamodelBindings",
    "JavaEnumBindings",
    "MessageField",
    "MessageBindings",
    "ProtoEnum",
    "ProtoEnumBindings",
    "DocMember",
    "TableDocBindings",
    "DocEnum",
    "EnumDocBindings",
]


@dataclass(frozen=True)
class Bindings:
    """Base class for template bindings."""

    def context(self) -> dict[str, Any]:
        """Top-level fields as a template context. Nested values stay objects."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# hibernate


@dataclass(frozen=True)
class EntityMember:
    name: str
    type: str
    comment: str


@dataclass(frozen=True)
class GetterBindings(Bindings):
    func: str
    name: str
    type: str
    annotations: tuple[str, ...]


@dataclass(frozen=True)
class SetterBindings(Bindings):
    func: str
    name: str
    type: str
    scope: str
    constraint: str


@dataclass(frozen=True)
class ClassBindings(Bindings):
    package_name: str
    generated_at: str
    table: Table
    name: str
    members: tuple[EntityMember, ...]
    accessors: tuple[str, ...]


@dataclass(frozen=True)
class MetamodelMember:
    attr: str
    cls_name: str
    name: str
    type: str


@dataclass(frozen=True)
class MetamodelBindings(Bindings):
    package_name: str
    name: str
    members: tuple[MetamodelMember, ...]


@dataclass(frozen=True)
class JavaEnumBindings(Bindings):
    """Bindings for both the enum class and its user-type companion."""

    package_name: str
    generated_at: str
    name: str
    snake: str
    type: EnumType
    dt: str
    members: str


# protobuf


@dataclass(frozen=True)
class MessageField:
    name: str
    type: str
    comment: str
    index: int


@dataclass(frozen=True)
class MessageBindings(Bindings):
    package_name: str
    java_package: str
    go_package: str
    generated_at: str
    comment: str
    table: Table
    name: str
    members: tuple[MessageField, ...]
    enum_path: str


@dataclass(frozen=True)
class ProtoEnum:
    name: str
    comment: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class ProtoEnumBindings(Bindings):
    package_name: str
    java_package: str
    go_package: str
    generated_at: str
    members: tuple[ProtoEnum, ...]


# sphinx


@dataclass(frozen=True)
class DocMember:
    name: str
    type: str
    constraint: str
    comment: str


@dataclass(frozen=True)
class TableDocBindings(Bindings):
    generated_at: str
    comment: str
    name: str
    members: tuple[DocMember, ...]


@dataclass(frozen=True)
class DocEnum:
    name: str
    comment: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class EnumDocBindings(Bindings):
    generated_at: str
    members: tuple[DocEnum, ...]
