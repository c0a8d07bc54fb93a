"""Stack words a scripting host can register against an :class:`AppState`.

The data stack is a plain list whose last element is the top. Items are
:class:`~pyappstate.values.Value` instances or native scalars; names are
read through their text form.

=======================  =======================
Word                     Stack effect
=======================  =======================
``GET``                  ``( name -- value )``
``SET``                  ``( value name -- )``
``REMOVE-VARIABLE``      ``( name -- )``
``GET-APP-STATE-JSON``   ``( -- json )``
``DEBUG``                ``( value -- )``
=======================  =======================
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyappstate.app import AppState
from pyappstate.exceptions import CoercionError, InvalidNameError, StackUnderflowError
from pyappstate.names import check_name
from pyappstate.values import Value

_logger = logging.getLogger(__name__)

Word = Callable[[list[Any]], None]


def _expect(stack: list[Any], word: str, expected: int) -> None:
    if len(stack) < expected:
        raise StackUnderflowError(
            f"{word} expects {expected} item(s) on the stack, found {len(stack)}.",
            word=word,
            expected=expected,
            available=len(stack),
        )


def _as_name(item: Any) -> str:
    try:
        text = Value.of(item).as_string()
    except CoercionError as err:
        raise InvalidNameError(f"A state name expected, got {type(item).__name__}.", name=item) from err
    return check_name(text)


class StateWords:
    """Binds the state words to one container."""

    def __init__(self, state: AppState) -> None:
        self._state = state

    def get(self, stack: list[Any]) -> None:
        _expect(stack, "GET", 1)
        value = self._state.get(_as_name(stack[-1]))
        stack[-1] = value

    def set(self, stack: list[Any]) -> None:
        _expect(stack, "SET", 2)
        # Validate both operands before consuming them.
        name = _as_name(stack[-1])
        value = stack[-2]
        if value is not None:
            value = Value.of(value)
        del stack[-2:]
        self._state.set(name, value)

    def remove_variable(self, stack: list[Any]) -> None:
        _expect(stack, "REMOVE-VARIABLE", 1)
        name = _as_name(stack[-1])
        stack.pop()
        self._state.remove(name)

    def get_app_state_json(self, stack: list[Any]) -> None:
        stack.append(Value.of(self._state.to_json()))

    def debug(self, stack: list[Any]) -> None:
        _expect(stack, "DEBUG", 1)
        item = Value.of(stack.pop())
        enabled = self._state.get("DebugEnabled", None)
        if enabled is not None and enabled.as_boolean():
            _logger.debug("Debug: %s", item)

    def definitions(self) -> dict[str, Word]:
        """Word name to implementation, ready for registration."""
        return {
            "GET": self.get,
            "SET": self.set,
            "REMOVE-VARIABLE": self.remove_variable,
            "GET-APP-STATE-JSON": self.get_app_state_json,
            "DEBUG": self.debug,
        }
