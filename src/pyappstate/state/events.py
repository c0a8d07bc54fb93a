"""Variable change notifications.

Only dynamic variables notify; typed property writes never do. Delivery
is synchronous and ordered: handlers run in registration order, on the
caller's thread, after the store mutation has been committed.
"""

from __future__ import annotations

import dataclasses
import itertools
import logging
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pyappstate.values import Value

_logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


class HandlerErrorPolicy(StrEnum):
    """What to do when a change handler raises.

    ``LOG`` logs the failure and continues with the next handler.
    ``RAISE`` propagates it to the caller of ``set``; remaining handlers are
    skipped. The variable mutation is committed either way.
    """

    LOG = "log"
    RAISE = "raise"


class VariableChangeEvent(BaseModel):
    """A committed change of one dynamic variable."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    variable_name: str
    old_value: Value | None = None
    new_value: Value | None = None

    @field_validator("variable_name")
    @classmethod
    def _check_variable_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("variable_name must be non-empty")
        return value

    @model_validator(mode="after")
    def _check_values(self) -> VariableChangeEvent:
        has_old = self.old_value is not None
        has_new = self.new_value is not None
        expected = {
            ChangeKind.ADDED: (False, True),
            ChangeKind.UPDATED: (True, True),
            ChangeKind.REMOVED: (True, False),
        }[self.kind]
        if (has_old, has_new) != expected:
            raise ValueError(f"{self.kind} event has inconsistent old/new values")
        return self


ChangeHandler = Callable[[VariableChangeEvent], None]


@dataclasses.dataclass(frozen=True, slots=True)
class Subscription:
    """Registration handle returned by :meth:`ChangeNotifier.subscribe`."""

    id: int
    handler: ChangeHandler = dataclasses.field(compare=False, repr=False)
    kinds: frozenset[ChangeKind] = dataclasses.field(compare=False)

    def accepts(self, kind: ChangeKind) -> bool:
        return not self.kinds or kind in self.kinds


class ChangeNotifier:
    """Ordered observer list for :class:`VariableChangeEvent`."""

    def __init__(self, *, error_policy: HandlerErrorPolicy = HandlerErrorPolicy.LOG) -> None:
        self._error_policy = HandlerErrorPolicy(error_policy)
        self._subscriptions: list[Subscription] = []
        self._ids = itertools.count(1)

    @property
    def error_policy(self) -> HandlerErrorPolicy:
        return self._error_policy

    def subscribe(self, handler: ChangeHandler, *kinds: ChangeKind) -> Subscription:
        """Register *handler* for *kinds* (all kinds when none are given)."""
        subscription = Subscription(
            id=next(self._ids),
            handler=handler,
            kinds=frozenset(ChangeKind(kind) for kind in kinds),
        )
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a registration. Returns ``False`` if it was not registered."""
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            return False
        return True

    def notify(self, event: VariableChangeEvent) -> None:
        # Iterate a copy: handlers may (un)subscribe while being notified.
        for subscription in list(self._subscriptions):
            if not subscription.accepts(event.kind):
                continue
            try:
                subscription.handler(event)
            except Exception:
                if self._error_policy is HandlerErrorPolicy.RAISE:
                    raise
                _logger.warning(
                    "Change handler %r failed for %s event on '%s'",
                    subscription.handler,
                    event.kind,
                    event.variable_name,
                    exc_info=True,
                )

    def __len__(self) -> int:
        return len(self._subscriptions)


def log_changes(logger: logging.Logger, level: int = logging.INFO) -> ChangeHandler:
    """Return a handler that writes each change to *logger*."""

    def _handler(event: VariableChangeEvent) -> None:
        name = event.variable_name
        if event.kind is ChangeKind.ADDED:
            assert event.new_value is not None  # noqa: S101
            logger.log(level, "The %s variable added with value: '%s'.", name, event.new_value)
        elif event.kind is ChangeKind.UPDATED:
            assert event.old_value is not None and event.new_value is not None  # noqa: S101
            logger.log(
                level,
                "The %s variable value: '%s' updated to: '%s'.",
                name,
                event.old_value,
                event.new_value,
            )
        else:
            assert event.old_value is not None  # noqa: S101
            logger.log(level, "The %s variable removed. Its value was: '%s'.", name, event.old_value)

    return _handler
