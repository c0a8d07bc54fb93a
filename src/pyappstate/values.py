"""Script-visible values.

A :class:`Value` is a tagged scalar: exactly one of string, boolean,
64-bit integer or float. Values are immutable; changing a variable means
storing a different ``Value``.

Cross-kind reads go through the ``as_*`` accessors:

* same kind is identity;
* boolean <-> integer maps ``true``/``false`` to ``1``/``0`` and any
  nonzero integer (or float) to ``true``;
* integer <-> float widens, or narrows by truncating toward zero; narrowing
  never fails (NaN is ``0``, out-of-range values saturate at the 64-bit
  bounds);
* strings are parsed as invariant literals and raise
  :class:`~pyappstate.exceptions.CoercionError` when malformed.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator

from pyappstate.exceptions import CoercionError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_LITERAL = re.compile(r"\s*[+-]?[0-9]+\s*")
_FLOAT_LITERAL = re.compile(
    r"\s*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*"
    r"|\s*[+-]?(?:inf|infinity|nan)\s*",
    re.IGNORECASE,
)
_BOOLEAN_LITERALS: dict[str, bool] = {"true": True, "false": False}


class ValueKind(StrEnum):
    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"


def _in_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def _narrow_float(value: float) -> int:
    """Truncate toward zero, saturating at the 64-bit bounds; NaN is 0."""
    if math.isnan(value):
        return 0
    if value >= INT64_MAX:
        return INT64_MAX
    if value <= INT64_MIN:
        return INT64_MIN
    return math.trunc(value)


def _format_float(value: float) -> str:
    # repr() is locale independent and round-trips through float().
    return repr(value)


class Value(BaseModel):
    """A single immutable script value.

    Build values with :meth:`of`; the constructor validates that ``data``
    matches ``kind``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ValueKind
    data: StrictBool | StrictInt | StrictFloat | StrictStr

    @model_validator(mode="after")
    def _check_kind(self) -> Value:
        data = self.data
        if self.kind is ValueKind.STRING:
            ok = isinstance(data, str)
        elif self.kind is ValueKind.BOOLEAN:
            ok = isinstance(data, bool)
        elif self.kind is ValueKind.INTEGER:
            ok = isinstance(data, int) and not isinstance(data, bool) and _in_int64(data)
        else:
            ok = isinstance(data, float)
        if not ok:
            raise ValueError(f"{data!r} is not a valid {self.kind} value")
        return self

    @classmethod
    def of(cls, value: Any) -> Value:
        """Tag a native scalar.

        ``Decimal`` values become floats. An existing ``Value`` is returned
        as is. Anything else raises :class:`CoercionError`.
        """
        if isinstance(value, Value):
            return value
        # bool before int: bool is an int subclass.
        if isinstance(value, bool):
            return cls(kind=ValueKind.BOOLEAN, data=value)
        if isinstance(value, int):
            if not _in_int64(value):
                raise CoercionError(
                    f"Integer {value} is outside the 64-bit range.",
                    source_kind="int",
                    target_kind=ValueKind.INTEGER,
                )
            return cls(kind=ValueKind.INTEGER, data=value)
        if isinstance(value, float):
            return cls(kind=ValueKind.FLOAT, data=value)
        if isinstance(value, Decimal):
            return cls(kind=ValueKind.FLOAT, data=float(value))
        if isinstance(value, str):
            return cls(kind=ValueKind.STRING, data=value)
        raise CoercionError(
            f"Unsupported value type '{type(value).__name__}'.",
            source_kind=type(value).__name__,
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def as_string(self) -> str:
        """Canonical text form. Never fails."""
        data = self.data
        if self.kind is ValueKind.STRING:
            return str(data)
        if self.kind is ValueKind.BOOLEAN:
            return "true" if data else "false"
        if self.kind is ValueKind.INTEGER:
            return str(data)
        return _format_float(float(data))

    def as_boolean(self) -> bool:
        if self.kind is ValueKind.STRING:
            parsed = _BOOLEAN_LITERALS.get(str(self.data).strip().lower())
            if parsed is None:
                raise self._coercion_error(ValueKind.BOOLEAN)
            return parsed
        return bool(self.data)

    def as_integer(self) -> int:
        data = self.data
        if self.kind is ValueKind.STRING:
            text = str(data)
            if _INTEGER_LITERAL.fullmatch(text) is None:
                raise self._coercion_error(ValueKind.INTEGER)
            result = int(text)
            if not _in_int64(result):
                raise self._coercion_error(ValueKind.INTEGER)
            return result
        if self.kind is ValueKind.FLOAT:
            return _narrow_float(float(data))
        return int(data)

    def as_float(self) -> float:
        if self.kind is ValueKind.STRING:
            text = str(self.data)
            if _FLOAT_LITERAL.fullmatch(text) is None:
                raise self._coercion_error(ValueKind.FLOAT)
            return float(text)
        return float(self.data)

    def as_decimal(self) -> Decimal:
        """Decimal form, used by ``decimal_float`` typed properties."""
        if self.kind is ValueKind.STRING:
            text = str(self.data)
            if _FLOAT_LITERAL.fullmatch(text) is None:
                raise self._coercion_error("decimal")
            try:
                return Decimal(text.strip())
            except InvalidOperation as err:
                raise self._coercion_error("decimal") from err
        if self.kind is ValueKind.FLOAT:
            return Decimal(_format_float(float(self.data)))
        return Decimal(int(self.data))

    def _coercion_error(self, target: str) -> CoercionError:
        return CoercionError(
            f"Cannot interpret {self.kind} value '{self.as_string()}' as {target}.",
            source_kind=self.kind,
            target_kind=target,
        )

    def __str__(self) -> str:
        return self.as_string()
