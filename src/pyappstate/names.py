"""State name validation and normalization.

Typed properties and dynamic variables share one namespace, keyed by the
lowercase form of the name. Nothing else is folded: no trimming, no
locale-specific rules.
"""

from __future__ import annotations

from pyappstate.exceptions import InvalidNameError


def check_name(name: object) -> str:
    """Return *name* unchanged if it is usable as a state name."""
    if not isinstance(name, str):
        raise InvalidNameError(f"A state name expected, got {type(name).__name__}.", name=name)
    if not name.strip():
        raise InvalidNameError("A state name expected.", name=name)
    return name


def normalize_name(name: object) -> str:
    """Return the lookup key for *name*.

    Idempotent: ``normalize_name(normalize_name(n)) == normalize_name(n)``.
    """
    return check_name(name).lower()
