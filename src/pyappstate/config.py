"""Container configuration for pyappstate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyappstate.exceptions import AppStateConfigError
from pyappstate.state.events import HandlerErrorPolicy


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class AppStateConfig:
    """Container configuration.

    Parameters
    ----------
    app_name : str
        Initial value of the ``AppName`` property.
    app_version : str
        Initial value of the ``AppVersion`` property.
    debug_enabled : bool
        Initial value of the ``DebugEnabled`` property.
    handler_error_policy : HandlerErrorPolicy
        What a failing change handler does: ``"log"`` (default) logs and
        continues with the next handler, ``"raise"`` propagates to the
        caller of ``set``.
    log_variable_changes : bool
        Subscribe a handler that logs every variable change at INFO level.
    """

    app_name: str = "App"
    app_version: str = "1.0.0"
    debug_enabled: bool = False
    handler_error_policy: HandlerErrorPolicy = HandlerErrorPolicy.LOG
    log_variable_changes: bool = False

    def __post_init__(self) -> None:
        try:
            policy = HandlerErrorPolicy(self.handler_error_policy)
        except ValueError as err:
            raise AppStateConfigError(
                f"Unknown handler error policy '{self.handler_error_policy}'."
            ) from err
        object.__setattr__(self, "handler_error_policy", policy)

    @classmethod
    def from_env(cls, **overrides: Any) -> AppStateConfig:
        """Create configuration from environment variables.

        Reads ``APPSTATE_APP_NAME``, ``APPSTATE_APP_VERSION``,
        ``APPSTATE_DEBUG_ENABLED``, ``APPSTATE_HANDLER_ERROR_POLICY`` and
        ``APPSTATE_LOG_VARIABLE_CHANGES``. Explicit keyword arguments
        override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "APPSTATE_APP_NAME": "app_name",
            "APPSTATE_APP_VERSION": "app_version",
            "APPSTATE_HANDLER_ERROR_POLICY": "handler_error_policy",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip() if field_name == "handler_error_policy" else val

        if "debug_enabled" not in overrides:
            config_kwargs["debug_enabled"] = _env_bool(env.get("APPSTATE_DEBUG_ENABLED"), False)

        if "log_variable_changes" not in overrides:
            config_kwargs["log_variable_changes"] = _env_bool(
                env.get("APPSTATE_LOG_VARIABLE_CHANGES"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
