from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Annotated

import pytest
from pydantic import ConfigDict, Field

from pyappstate.exceptions import CoercionError, StateSchemaError, UnsupportedCoercionError
from pyappstate.state.properties import (
    AppProperties,
    PropertyKind,
    StateProperties,
    StateProperty,
    TypedProperty,
    TypedPropertyRegistry,
)
from pyappstate.values import Value, ValueKind


class _MixedProperties(StateProperties):
    level: Annotated[int, StateProperty()] = 1
    lives: Annotated[int, StateProperty(), Field(ge=0)] = 3
    build_id: Annotated[str, StateProperty(), Field(frozen=True)] = "b1"
    started_at: Annotated[datetime.date, StateProperty()] = datetime.date(2026, 1, 1)
    internal_note: str = "hidden"


class _FrozenProperties(StateProperties):
    model_config = ConfigDict(frozen=True)

    title: Annotated[str, StateProperty()] = "x"


def test_default_registry_lists_declared_names_in_order() -> None:
    registry = TypedPropertyRegistry.for_model(AppProperties)

    assert registry.names() == [
        "AppName",
        "AppVersion",
        "DebugEnabled",
        "IntValue",
        "FloatValue",
        "DoubleValue",
        "DecimalValue",
    ]


def test_registry_resolves_lowercase_names_only() -> None:
    registry = TypedPropertyRegistry.for_model(AppProperties)

    prop = registry.resolve("intvalue")
    assert prop is not None
    assert prop.name == "IntValue"
    assert prop.kind == PropertyKind.INTEGER
    # Normalization happens upstream; the registry does no folding of its own.
    assert registry.resolve("IntValue") is None


def test_registry_is_cached_per_schema() -> None:
    assert TypedPropertyRegistry.for_model(AppProperties) is TypedPropertyRegistry.for_model(AppProperties)


def test_kinds_follow_declared_types() -> None:
    registry = TypedPropertyRegistry.for_model(AppProperties)
    kinds = {prop.name: prop.kind for prop in registry}

    assert kinds["AppName"] == PropertyKind.STRING
    assert kinds["DebugEnabled"] == PropertyKind.BOOLEAN
    assert kinds["DoubleValue"] == PropertyKind.FLOAT
    assert kinds["DecimalValue"] == PropertyKind.DECIMAL_FLOAT


def test_unmarked_and_read_only_fields_are_excluded() -> None:
    registry = TypedPropertyRegistry.for_model(_MixedProperties)

    assert "level" in registry
    assert "buildid" not in registry
    assert "internalnote" not in registry
    assert len(TypedPropertyRegistry.for_model(_FrozenProperties)) == 0


def test_unsupported_kind_fails_on_access() -> None:
    registry = TypedPropertyRegistry.for_model(_MixedProperties)
    prop = registry.resolve("startedat")
    assert prop is not None
    assert prop.kind is None

    target = _MixedProperties()
    with pytest.raises(UnsupportedCoercionError) as info:
        prop.read(target)
    assert info.value.property_name == "StartedAt"
    with pytest.raises(UnsupportedCoercionError):
        prop.write(target, "2026-02-02")


def test_duplicate_normalized_names_rejected() -> None:
    def _entry(name: str) -> TypedProperty:
        return TypedProperty(name=name, kind=PropertyKind.STRING, getter=lambda _t: "", setter=lambda _t, _v: None)

    with pytest.raises(StateSchemaError):
        TypedPropertyRegistry([_entry("Title"), _entry("TITLE")])


class TestReadWrite:
    def test_decimal_reads_as_float_value(self) -> None:
        prop = TypedPropertyRegistry.for_model(AppProperties).resolve("decimalvalue")
        assert prop is not None

        value = prop.read(AppProperties())
        assert value == Value(kind=ValueKind.FLOAT, data=4.5)

    def test_write_coerces_into_declared_kind(self) -> None:
        registry = TypedPropertyRegistry.for_model(AppProperties)
        target = AppProperties()

        registry.resolve("intvalue").write(target, "42")  # type: ignore[union-attr]
        registry.resolve("debugenabled").write(target, 1)  # type: ignore[union-attr]
        registry.resolve("appname").write(target, 3.5)  # type: ignore[union-attr]
        registry.resolve("decimalvalue").write(target, 0.1)  # type: ignore[union-attr]

        assert target.int_value == 42
        assert target.debug_enabled is True
        assert target.app_name == "3.5"
        assert target.decimal_value == Decimal("0.1")

    def test_failed_write_leaves_target_unchanged(self) -> None:
        prop = TypedPropertyRegistry.for_model(AppProperties).resolve("intvalue")
        assert prop is not None
        target = AppProperties()

        with pytest.raises(CoercionError):
            prop.write(target, "notanumber")
        assert target.int_value == 1

    def test_field_constraint_failure_maps_to_coercion_error(self) -> None:
        prop = TypedPropertyRegistry.for_model(_MixedProperties).resolve("lives")
        assert prop is not None
        target = _MixedProperties()

        with pytest.raises(CoercionError):
            prop.write(target, -1)
        assert target.lives == 3

    def test_explicit_table(self) -> None:
        store: dict[str, object] = {"mode": "fast"}
        prop = TypedProperty(
            name="Mode",
            kind=PropertyKind.STRING,
            getter=lambda target: target["mode"],
            setter=lambda target, value: target.__setitem__("mode", value),
        )
        registry = TypedPropertyRegistry([prop])

        registry.resolve("mode").write(store, Value.of(True))  # type: ignore[union-attr]
        assert store["mode"] == "true"
