"""Top-level package for observable-registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .config import RegistrySettings, ensure_config_dir, load_config
    from .context import current_owner
    from .disposer import Disposer
    from .exceptions import ConfigValidationError, InvalidListenerError, ObservableError
    from .logging_utils import configure_logging
    from .observable import Observable
    from .targets import BulkMap, Empty, SinglePair, TargetKind

__all__ = [
    "BulkMap",
    "ConfigValidationError",
    "Disposer",
    "Empty",
    "InvalidListenerError",
    "Observable",
    "ObservableError",
    "RegistrySettings",
    "SinglePair",
    "TargetKind",
    "configure_logging",
    "current_owner",
    "ensure_config_dir",
    "load_config",
]


def __getattr__(name: str) -> Any:
    """Lazily import symbols so importing the package stays cheap."""
    if name == "Observable":
        from .observable import Observable

        return Observable
    if name == "Disposer":
        from .disposer import Disposer

        return Disposer
    if name == "current_owner":
        from .context import current_owner

        return current_owner
    if name in {"BulkMap", "Empty", "SinglePair", "TargetKind"}:
        from .targets import BulkMap, Empty, SinglePair, TargetKind

        return {
            "BulkMap": BulkMap,
            "Empty": Empty,
            "SinglePair": SinglePair,
            "TargetKind": TargetKind,
        }[name]
    if name in {"RegistrySettings", "ensure_config_dir", "load_config"}:
        from .config import RegistrySettings, ensure_config_dir, load_config

        return {
            "RegistrySettings": RegistrySettings,
            "ensure_config_dir": ensure_config_dir,
            "load_config": load_config,
        }[name]
    if name in {"ConfigValidationError", "InvalidListenerError", "ObservableError"}:
        from .exceptions import (
            ConfigValidationError,
            InvalidListenerError,
            ObservableError,
        )

        return {
            "ConfigValidationError": ConfigValidationError,
            "InvalidListenerError": InvalidListenerError,
            "ObservableError": ObservableError,
        }[name]
    if name == "configure_logging":
        from .logging_utils import configure_logging

        return configure_logging
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
