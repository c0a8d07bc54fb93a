"""The application state container."""

from __future__ import annotations

import functools
import logging
from typing import Any

from pyappstate.config import AppStateConfig
from pyappstate.state.dispatch import MISSING, StateDispatcher
from pyappstate.state.events import ChangeHandler, ChangeKind, ChangeNotifier, Subscription, log_changes
from pyappstate.state.properties import AppProperties, StateProperties, TypedPropertyRegistry
from pyappstate.state.snapshot import StateSnapshot
from pyappstate.state.variables import VariableStore

_logger = logging.getLogger(__name__)


class AppState:
    """Typed properties and dynamic variables behind one name-based API.

    Usage::

        state = AppState()
        state.set("IntValue", 42)        # typed property
        state.set("score", 10)           # dynamic variable, fires "added"
        state.get("SCORE").as_integer()  # 10

    Not thread-safe: callers must serialize access to one instance.
    """

    def __init__(
        self,
        properties: StateProperties | None = None,
        *,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._properties = properties if properties is not None else AppProperties()
        self._notifier = notifier if notifier is not None else ChangeNotifier()
        self._variables = VariableStore(self._notifier)

    @classmethod
    def from_config(cls, config: AppStateConfig) -> AppState:
        """Compose a container from *config*."""
        properties = AppProperties(
            app_name=config.app_name,
            app_version=config.app_version,
            debug_enabled=config.debug_enabled,
        )
        state = cls(properties, notifier=ChangeNotifier(error_policy=config.handler_error_policy))
        if config.log_variable_changes:
            state.subscribe(log_changes(_logger))
        return state

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def properties(self) -> StateProperties:
        return self._properties

    @property
    def variables(self) -> VariableStore:
        return self._variables

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @functools.cached_property
    def registry(self) -> TypedPropertyRegistry:
        """Typed property table, built on first use."""
        return TypedPropertyRegistry.for_model(type(self._properties))

    @functools.cached_property
    def _dispatcher(self) -> StateDispatcher:
        return StateDispatcher(self._properties, self.registry, self._variables)

    # ------------------------------------------------------------------
    # Name-based access
    # ------------------------------------------------------------------

    def get(self, name: str, default: Any = MISSING) -> Any:
        return self._dispatcher.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._dispatcher.set(name, value)

    def remove(self, name: str) -> None:
        self._dispatcher.remove(name)

    def has(self, name: str) -> bool:
        return self._dispatcher.has(name)

    def has_variable(self, name: str) -> bool:
        return self.has(name) and not self._dispatcher.is_property(name)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, handler: ChangeHandler, *kinds: ChangeKind) -> Subscription:
        return self._notifier.subscribe(handler, *kinds)

    def unsubscribe(self, subscription: Subscription) -> bool:
        return self._notifier.unsubscribe(subscription)

    def on_variable_added(self, handler: ChangeHandler) -> Subscription:
        return self._notifier.subscribe(handler, ChangeKind.ADDED)

    def on_variable_updated(self, handler: ChangeHandler) -> Subscription:
        return self._notifier.subscribe(handler, ChangeKind.UPDATED)

    def on_variable_removed(self, handler: ChangeHandler) -> Subscription:
        return self._notifier.subscribe(handler, ChangeKind.REMOVED)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self, *, include_variables: bool = False) -> StateSnapshot:
        return StateSnapshot(
            self._properties,
            self.registry,
            self._variables if include_variables else None,
        )

    def to_json(self, *, include_variables: bool = False) -> str:
        """Pretty-printed JSON of the typed properties; every value is a string."""
        return self.snapshot(include_variables=include_variables).to_json()

    def __repr__(self) -> str:
        return f"AppState(properties={type(self._properties).__name__}, variables={len(self._variables)})"
