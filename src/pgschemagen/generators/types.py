"""Ordered type-mapping rules from PostgreSQL types to target expressions.

Each backend owns a TypeMap. Rules are evaluated top-to-bottom on the base
type (array suffix stripped) and the first match wins. When nothing
matches the base type passes through unchanged, so mapping never fails.
"""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from pgschemagen.schema.models import ARRAY_SUFFIX, EnumType

__all__ = [
    "TypeRule",
    "MappedType",
    "TypeMap",
    "exact",
    "prefix",
    "suffix",
    "enum_rule",
    "NUMERIC_PARAM_PREFIX",
    "TIME_ZONE_SUFFIX",
]

NUMERIC_PARAM_PREFIX = "numeric("
TIME_ZONE_SUFFIX = "time zone"

Enums = Mapping[str, EnumType]


@dataclass(frozen=True)
class TypeRule:
    """A single mapping rule.

    matches and target both receive the base type and the model's enum
    types keyed by name.
    """

    name: str
    matches: Callable[[str, Enums], bool]
    target: Callable[[str, Enums], str]
    is_enum: bool = False


def exact(names: str | Sequence[str], target: str) -> TypeRule:
    """Match one or more type names exactly."""
    options = (names,) if isinstance(names, str) else tuple(names)
    return TypeRule(
        name=f"exact:{'|'.join(options)}",
        matches=lambda base, enums: base in options,
        target=lambda base, enums: target,
    )


def prefix(start: str, target: str) -> TypeRule:
    return TypeRule(
        name=f"prefix:{start}",
        matches=lambda base, enums: base.startswith(start),
        target=lambda base, enums: target,
    )


def suffix(end: str, target: str) -> TypeRule:
    return TypeRule(
        name=f"suffix:{end}",
        matches=lambda base, enums: base.endswith(end),
        target=lambda base, enums: target,
    )


def enum_rule(formatter: Callable[[EnumType], str]) -> TypeRule:
    """Match base types naming a known enum; target is formatter(enum)."""
    return TypeRule(
        name="enum",
        matches=lambda base, enums: base in enums,
        target=lambda base, enums: formatter(enums[base]),
        is_enum=True,
    )


@dataclass(frozen=True)
class MappedType:
    """Result of mapping one raw column type."""

    raw: str
    element: str
    expression: str
    is_array: bool
    enum: Optional[EnumType] = None


class TypeMap:
    """Ordered rule table for one backend.

    Args:
        rules: Rules in evaluation order.
        wrap_array: Turns a mapped element type into the backend's array
            or repeated form.
    """

    def __init__(
        self,
        rules: Sequence[TypeRule],
        wrap_array: Callable[[str], str] = lambda t: f"{t}[]",
    ) -> None:
        self._rules = tuple(rules)
        self._wrap_array = wrap_array

    @property
    def rules(self) -> tuple[TypeRule, ...]:
        return self._rules

    def resolve(self, raw_type: str, enums: Optional[Enums] = None) -> MappedType:
        """Map a raw type string, e.g. ``integer[]`` or ``numeric(10,2)``."""
        enums = enums or {}
        is_array = raw_type.endswith(ARRAY_SUFFIX)
        base = raw_type[: -len(ARRAY_SUFFIX)] if is_array else raw_type

        mapped = base
        enum = None
        for rule in self._rules:
            if rule.matches(base, enums):
                mapped = rule.target(base, enums)
                if rule.is_enum:
                    enum = enums[base]
                break

        expression = self._wrap_array(mapped) if is_array else mapped
        return MappedType(
            raw=raw_type,
            element=mapped,
            expression=expression,
            is_array=is_array,
            enum=enum,
        )

    def convert(self, raw_type: str, enums: Optional[Enums] = None) -> str:
        """Map a raw type and return only the target expression."""
        return self.resolve(raw_type, enums).expression
