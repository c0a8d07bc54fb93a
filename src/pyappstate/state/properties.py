"""Typed state properties.

The typed half of the state is declared as a pydantic model deriving from
:class:`StateProperties`. Fields opt in by carrying a :class:`StateProperty`
marker in their ``Annotated`` metadata; the registry maps the lowercase
form of each declared (PascalCase) name to a :class:`TypedProperty`
accessor.

Example::

    class GameProperties(StateProperties):
        level: Annotated[int, StateProperty()] = 1

    # "Level", "level" and "LEVEL" all resolve to the same property.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import operator
from collections.abc import Callable, Iterable, Iterator
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal

from pyappstate.exceptions import CoercionError, StateSchemaError, UnsupportedCoercionError
from pyappstate.values import Value

_logger = logging.getLogger(__name__)


class PropertyKind(StrEnum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL_FLOAT = "decimal_float"


# Exact type matches only; subclasses and generics are unsupported.
_KIND_BY_TYPE: dict[type, PropertyKind] = {
    str: PropertyKind.STRING,
    bool: PropertyKind.BOOLEAN,
    int: PropertyKind.INTEGER,
    float: PropertyKind.FLOAT,
    Decimal: PropertyKind.DECIMAL_FLOAT,
}


@dataclasses.dataclass(frozen=True)
class StateProperty:
    """Marks a :class:`StateProperties` field as script-visible."""


@dataclasses.dataclass(frozen=True)
class TypedProperty:
    """A declared ``(name, kind, getter, setter)`` entry.

    ``kind`` is ``None`` when the declared type is not one of the supported
    primitive kinds; reading or writing such a property raises
    :class:`UnsupportedCoercionError`.
    """

    name: str
    kind: PropertyKind | None
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]
    type_name: str = ""

    @property
    def normalized_name(self) -> str:
        return self.name.lower()

    def read(self, target: Any) -> Value:
        """Read the property from *target* as a :class:`Value`."""
        kind = self._require_kind()
        raw = self.getter(target)
        if kind is PropertyKind.DECIMAL_FLOAT:
            return Value.of(float(raw))
        return Value.of(raw)

    def write(self, target: Any, value: Any) -> None:
        """Coerce *value* into this property's kind and assign it.

        Coercion happens before the setter runs, so a failure leaves
        *target* unchanged.
        """
        kind = self._require_kind()
        source = Value.of(value)
        coerced = coerce_to_kind(source, kind)
        try:
            self.setter(target, coerced)
        except ValueError as err:
            # pydantic ValidationError; the field keeps its previous value.
            raise CoercionError(
                f"Property '{self.name}' rejected value '{coerced}'.",
                source_kind=source.kind,
                target_kind=kind,
            ) from err

    def _require_kind(self) -> PropertyKind:
        if self.kind is None:
            raise UnsupportedCoercionError(
                f"Property '{self.name}' has unsupported type '{self.type_name}'.",
                property_name=self.name,
                type_name=self.type_name,
            )
        return self.kind


def coerce_to_kind(value: Value, kind: PropertyKind) -> Any:
    """Convert *value* into the native type backing *kind*."""
    if kind is PropertyKind.STRING:
        return value.as_string()
    if kind is PropertyKind.BOOLEAN:
        return value.as_boolean()
    if kind is PropertyKind.INTEGER:
        return value.as_integer()
    if kind is PropertyKind.FLOAT:
        return value.as_float()
    return value.as_decimal()


class TypedPropertyRegistry:
    """Case-insensitive lookup table of typed properties.

    Immutable after construction; safe to share read-only.
    """

    def __init__(self, properties: Iterable[TypedProperty]) -> None:
        table: dict[str, TypedProperty] = {}
        for prop in properties:
            key = prop.normalized_name
            if key in table:
                raise StateSchemaError(
                    f"Properties '{table[key].name}' and '{prop.name}' share the name '{key}'."
                )
            table[key] = prop
        self._properties = table

    @classmethod
    def for_model(cls, model_cls: type[BaseModel]) -> TypedPropertyRegistry:
        """Registry for a :class:`StateProperties` schema, built once per class."""
        return _registry_for_model(model_cls)

    def resolve(self, normalized_name: str) -> TypedProperty | None:
        return self._properties.get(normalized_name)

    def names(self) -> list[str]:
        """Declared names, in declaration order."""
        return [prop.name for prop in self._properties.values()]

    def __contains__(self, normalized_name: object) -> bool:
        return normalized_name in self._properties

    def __iter__(self) -> Iterator[TypedProperty]:
        return iter(self._properties.values())

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"TypedPropertyRegistry({self.names()!r})"


def _attr_setter(attr: str) -> Callable[[Any, Any], None]:
    def _set(target: Any, value: Any) -> None:
        setattr(target, attr, value)

    return _set


@functools.cache
def _registry_for_model(model_cls: type[BaseModel]) -> TypedPropertyRegistry:
    model_frozen = bool(model_cls.model_config.get("frozen", False))
    entries: list[TypedProperty] = []
    for field_name, info in model_cls.model_fields.items():
        if not any(isinstance(meta, StateProperty) for meta in info.metadata):
            continue
        if model_frozen or info.frozen:
            # No setter: read-only fields are not script-visible.
            _logger.debug("Skipping read-only state property %s.%s", model_cls.__name__, field_name)
            continue
        annotation = info.annotation
        kind = _KIND_BY_TYPE.get(annotation) if isinstance(annotation, type) else None
        entries.append(
            TypedProperty(
                name=info.alias or field_name,
                kind=kind,
                getter=operator.attrgetter(field_name),
                setter=_attr_setter(field_name),
                type_name=getattr(annotation, "__name__", repr(annotation)),
            )
        )
    registry = TypedPropertyRegistry(entries)
    _logger.debug("Built %r for %s", registry, model_cls.__name__)
    return registry


class StateProperties(BaseModel):
    """Base for typed state schemas.

    Field names are snake_case; declared (script and snapshot) names are
    their PascalCase aliases. Assignments are validated.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        alias_generator=to_pascal,
    )


class AppProperties(StateProperties):
    """Default application properties."""

    app_name: Annotated[str, StateProperty()] = "App"
    app_version: Annotated[str, StateProperty()] = "1.0.0"
    debug_enabled: Annotated[bool, StateProperty()] = False

    int_value: Annotated[int, StateProperty()] = 1
    float_value: Annotated[float, StateProperty()] = 2.1
    double_value: Annotated[float, StateProperty()] = 3.4
    decimal_value: Annotated[Decimal, StateProperty()] = Decimal("4.5")
