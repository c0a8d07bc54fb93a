"""Unified name-based access to typed properties and dynamic variables.

Every call normalizes the name first, then consults the typed property
registry; only on a miss does it fall through to the variable store. A
script can therefore never create a variable that shadows a typed
property.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from pyappstate.exceptions import InvalidOperationError, NotFoundError
from pyappstate.names import normalize_name
from pyappstate.state.properties import TypedPropertyRegistry
from pyappstate.state.variables import VariableStore

_logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class StateDispatcher:
    """Routes ``get``/``set``/``remove`` to a property or a variable.

    Parameters
    ----------
    target : object
        Object the typed property accessors read from and write to.
    registry : TypedPropertyRegistry
        Typed properties of *target*.
    variables : VariableStore
        Store for every name the registry does not know.
    """

    def __init__(self, target: Any, registry: TypedPropertyRegistry, variables: VariableStore) -> None:
        self._target = target
        self._registry = registry
        self._variables = variables

    def get(self, name: str, default: Any = MISSING) -> Any:
        """Resolve *name* to a :class:`Value`.

        Returns *default* for an unknown variable if one was given,
        otherwise raises :class:`NotFoundError`.
        """
        key = normalize_name(name)
        prop = self._registry.resolve(key)
        if prop is not None:
            return prop.read(self._target)

        value = self._variables.get(key)
        if value is not None:
            return value
        if default is MISSING:
            raise NotFoundError(f"Variable '{key}' does not exist.", name=key)
        return default

    def set(self, name: str, value: Any) -> None:
        """Write a typed property or add/replace/delete a variable.

        ``None`` deletes a variable and is rejected for typed properties.
        """
        key = normalize_name(name)
        prop = self._registry.resolve(key)
        if prop is None:
            self._variables.set(key, value)
            return

        if value is None:
            raise InvalidOperationError(f"Property '{prop.name}' cannot be removed.", name=key)
        prop.write(self._target, value)
        _logger.debug("Property %s set to %r", prop.name, value)

    def remove(self, name: str) -> None:
        """Delete a variable; a no-op if it does not exist."""
        key = normalize_name(name)
        prop = self._registry.resolve(key)
        if prop is not None:
            raise InvalidOperationError(f"Property '{prop.name}' cannot be removed.", name=key)
        self._variables.remove(key)

    def has(self, name: str) -> bool:
        key = normalize_name(name)
        return key in self._registry or key in self._variables

    def is_property(self, name: str) -> bool:
        return normalize_name(name) in self._registry

