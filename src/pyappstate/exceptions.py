"""Custom exception hierarchy for pyappstate."""

from __future__ import annotations


class AppStateError(Exception):
    """Base exception for all pyappstate errors."""


class AppStateConfigError(AppStateError):
    """Invalid or missing configuration."""


class StateSchemaError(AppStateError):
    """The declared typed-property schema is inconsistent.

    Raised when two declared properties fold to the same normalized name.
    """


class InvalidNameError(AppStateError):
    """A state name is empty, whitespace-only, or not a string."""

    def __init__(self, message: str, *, name: object = None) -> None:
        self.name = name
        super().__init__(message)


class NotFoundError(AppStateError):
    """Name is neither a typed property nor a known variable."""

    def __init__(self, message: str, *, name: str = "") -> None:
        self.name = name
        super().__init__(message)


class CoercionError(AppStateError):
    """A value cannot be interpreted as the requested kind.

    ``source_kind`` is the native kind of the value and ``target_kind``
    the kind that was requested (e.g. ``"string"`` -> ``"integer"`` for
    ``"abc"``).
    """

    def __init__(
        self,
        message: str,
        *,
        source_kind: str = "",
        target_kind: str = "",
    ) -> None:
        self.source_kind = source_kind
        self.target_kind = target_kind
        super().__init__(message)


class UnsupportedCoercionError(CoercionError):
    """A typed property declares a type outside the supported primitive kinds."""

    def __init__(
        self,
        message: str,
        *,
        property_name: str = "",
        type_name: str = "",
    ) -> None:
        self.property_name = property_name
        self.type_name = type_name
        super().__init__(message, target_kind=type_name)


class InvalidOperationError(AppStateError):
    """Operation not allowed for the resolved name.

    Typed properties can be overwritten but never deleted.
    """

    def __init__(self, message: str, *, name: str = "") -> None:
        self.name = name
        super().__init__(message)


class NotSupportedError(AppStateError):
    """Operation is deliberately unsupported (e.g. loading a snapshot)."""


class StackUnderflowError(AppStateError):
    """A script word found fewer operands on the data stack than it needs."""

    def __init__(
        self,
        message: str,
        *,
        word: str = "",
        expected: int = 0,
        available: int = 0,
    ) -> None:
        self.word = word
        self.expected = expected
        self.available = available
        super().__init__(message)
