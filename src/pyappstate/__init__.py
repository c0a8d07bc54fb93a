"""pyappstate - Typed properties and script variables behind one name-based API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyappstate")
except PackageNotFoundError:
    __version__ = "0+local"
from pyappstate.app import AppState
from pyappstate.config import AppStateConfig
from pyappstate.exceptions import (
    AppStateConfigError,
    AppStateError,
    CoercionError,
    InvalidNameError,
    InvalidOperationError,
    NotFoundError,
    NotSupportedError,
    StackUnderflowError,
    StateSchemaError,
    UnsupportedCoercionError,
)
from pyappstate.names import normalize_name
from pyappstate.state.dispatch import MISSING, StateDispatcher
from pyappstate.state.events import (
    ChangeKind,
    ChangeNotifier,
    HandlerErrorPolicy,
    Subscription,
    VariableChangeEvent,
)
from pyappstate.state.properties import (
    AppProperties,
    PropertyKind,
    StateProperties,
    StateProperty,
    TypedProperty,
    TypedPropertyRegistry,
)
from pyappstate.state.snapshot import StateSnapshot
from pyappstate.state.variables import VariableStore
from pyappstate.values import Value, ValueKind
from pyappstate.words import StateWords

__all__ = [
    "__version__",
    "MISSING",
    "AppProperties",
    "AppState",
    "AppStateConfig",
    "AppStateConfigError",
    "AppStateError",
    "ChangeKind",
    "ChangeNotifier",
    "CoercionError",
    "HandlerErrorPolicy",
    "InvalidNameError",
    "InvalidOperationError",
    "NotFoundError",
    "NotSupportedError",
    "PropertyKind",
    "StackUnderflowError",
    "StateDispatcher",
    "StateProperties",
    "StateProperty",
    "StateSchemaError",
    "StateSnapshot",
    "StateWords",
    "Subscription",
    "TypedProperty",
    "TypedPropertyRegistry",
    "UnsupportedCoercionError",
    "Value",
    "ValueKind",
    "VariableChangeEvent",
    "VariableStore",
    "normalize_name",
]
