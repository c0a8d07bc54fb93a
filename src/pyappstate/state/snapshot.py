"""One-way JSON export of the state.

Every value is written as a JSON string (its ``Value.as_string()`` form),
whatever its native kind, so the document carries the same text a script
would see. Loading a snapshot back is not supported.
"""

from __future__ import annotations

import json
from typing import Any

from pyappstate.exceptions import NotSupportedError
from pyappstate.state.properties import TypedProperty, TypedPropertyRegistry
from pyappstate.state.variables import VariableStore

VARIABLES_KEY = "Variables"


class StateSnapshot:
    """Serializes typed properties (and optionally variables) of one state."""

    def __init__(
        self,
        target: Any,
        registry: TypedPropertyRegistry,
        variables: VariableStore | None = None,
    ) -> None:
        self._target = target
        self._registry = registry
        self._variables = variables

    def to_dict(self) -> dict[str, Any]:
        """Flat ``{DeclaredName: text}`` mapping in declaration order.

        With variables attached, a nested ``"Variables"`` object is added.
        """
        data: dict[str, Any] = {prop.name: self._text(prop) for prop in self._registry}
        if self._variables is not None:
            data[VARIABLES_KEY] = {name: value.as_string() for name, value in self._variables.as_dict().items()}
        return data

    def _text(self, prop: TypedProperty) -> str:
        if prop.kind is None:
            # Unsupported kinds are exported through their native text form.
            return str(prop.getter(self._target))
        return prop.read(self._target).as_string()

    def to_json(self, *, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, document: str) -> StateSnapshot:
        raise NotSupportedError("State snapshots are export-only and cannot be loaded.")
