"""Dynamic variable store.

Insertion-ordered mapping from normalized name to :class:`Value`. An entry
is created on the first ``set`` with a value, replaced on later ``set``
calls and deleted by ``set(name, None)``; no entry ever holds ``None``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pyappstate.names import check_name
from pyappstate.state.events import ChangeKind, ChangeNotifier, VariableChangeEvent
from pyappstate.values import Value

_logger = logging.getLogger(__name__)


class VariableStore:
    """Holds script-created variables and reports their changes.

    Names passed in must already be normalized (see
    :func:`pyappstate.names.normalize_name`).
    """

    def __init__(self, notifier: ChangeNotifier | None = None) -> None:
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self._variables: dict[str, Value] = {}

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def get(self, name: str, default: Value | None = None) -> Value | None:
        return self._variables.get(name, default)

    def set(self, name: str, value: Any) -> VariableChangeEvent | None:
        """Add, replace or (for ``None``) delete a variable.

        The mutation is committed before handlers are notified. Returns the
        event that was delivered, or ``None`` if nothing changed.
        """
        check_name(name)
        previous = self._variables.get(name)

        if value is None:
            if previous is None:
                return None
            del self._variables[name]
            event = VariableChangeEvent(kind=ChangeKind.REMOVED, variable_name=name, old_value=previous)
        else:
            new_value = Value.of(value)
            self._variables[name] = new_value
            if previous is None:
                event = VariableChangeEvent(kind=ChangeKind.ADDED, variable_name=name, new_value=new_value)
            else:
                event = VariableChangeEvent(
                    kind=ChangeKind.UPDATED,
                    variable_name=name,
                    old_value=previous,
                    new_value=new_value,
                )

        _logger.debug("Variable %s %s", name, event.kind)
        self._notifier.notify(event)
        return event

    def remove(self, name: str) -> VariableChangeEvent | None:
        return self.set(name, None)

    def clear(self) -> None:
        """Remove every variable, notifying once per variable."""
        for name in list(self._variables):
            self.remove(name)

    def names(self) -> list[str]:
        return list(self._variables)

    def as_dict(self) -> dict[str, Value]:
        return dict(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"VariableStore({self._variables!r})"
