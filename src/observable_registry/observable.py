"""Synchronous publish/subscribe registry for stateful objects.

Usage:
    class Canvas(Observable):
        def render(self):
            ...
            self.fire("after:render", {"elapsed": 0.02})

    canvas = Canvas()
    dispose = canvas.on("after:render", lambda event: print(event["elapsed"]))
    canvas.render()
    dispose()

Every subscription call returns a ``Disposer``. ``fire`` iterates a snapshot
of the listeners registered when it was called, so listeners may subscribe,
unsubscribe or fire again without disturbing the running dispatch.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
import functools
import logging
from types import MethodType
from typing import Any, Generic, TypeVar

from .config import RegistrySettings
from .context import owner_scope
from .disposer import Disposer
from .exceptions import InvalidListenerError
from .targets import UNSET, BulkMap, Listener, TargetKind, as_target

LOGGER = logging.getLogger(__name__)

EventNameT = TypeVar("EventNameT", bound=Hashable)


def _ensure_callable(listener: Any) -> Listener:
    if not callable(listener):
        raise InvalidListenerError(
            f"Listener must be callable, got {type(listener).__name__}."
        )
    return listener


def _same_listener(candidate: Listener, listener: Listener) -> bool:
    if candidate is listener:
        return True
    # Each attribute access builds a new bound method; match on (self, func).
    return isinstance(listener, MethodType) and candidate == listener


class Observable(Generic[EventNameT]):
    """Mixin that gives its owner a private listener table.

    Listeners receive a single payload argument. While a listener runs,
    ``observable_registry.current_owner()`` returns the firing instance.
    """

    registry_settings: RegistrySettings = RegistrySettings()

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # A cooperative base may already have subscribed; keep its table.
        self._event_listeners

    @classmethod
    def configure(cls, settings: RegistrySettings | Mapping[str, Any]) -> None:
        """Apply diagnostics settings to this class and its subclasses."""
        cls.registry_settings = RegistrySettings.model_validate(settings)

    @property
    def _event_listeners(self) -> dict[EventNameT, list[Listener]]:
        # Subclasses are not required to call Observable.__init__.
        try:
            return self.__event_listeners
        except AttributeError:
            self.__event_listeners = {}
            return self.__event_listeners

    # -- subscription -------------------------------------------------------

    def on(self, event_name: Any = UNSET, handler: Listener | None = None) -> Disposer:
        """Observe ``event_name``, or every pair of a name -> handler mapping.

        Returns a disposer that removes exactly what this call registered.
        """
        target = as_target(event_name, handler)
        if target.kind is TargetKind.BULK:
            # Pairs without a handler register nothing, as on(name) does.
            registered = BulkMap(
                {
                    name: _ensure_callable(listener)
                    for name, listener in target.handlers.items()
                    if listener is not None
                }
            )
            for name, listener in registered.handlers.items():
                self._add_listener(name, listener)
            return Disposer(lambda: self.off(registered))
        if target.kind is TargetKind.SINGLE and target.listener is not None:
            name, listener = target.name, _ensure_callable(target.listener)
            self._add_listener(name, listener)
            return Disposer(lambda: self.off(name, listener))
        return Disposer.noop()

    def once(self, event_name: Any = UNSET, handler: Listener | None = None) -> Disposer:
        """Observe ``event_name`` for a single notification.

        The registered wrapper removes itself right after the listener runs.
        The returned disposer cancels the subscription if it has not fired.
        """
        target = as_target(event_name, handler)
        if target.kind is TargetKind.BULK:
            for listener in target.handlers.values():
                if listener is not None:
                    _ensure_callable(listener)
            return Disposer.combine(
                [self.once(name, listener) for name, listener in target.handlers.items()]
            )
        if target.kind is not TargetKind.SINGLE or target.listener is None:
            return Disposer.noop()

        listener = _ensure_callable(target.listener)
        fired = False

        @functools.wraps(listener)
        def once_wrapper(payload: Any) -> Any:
            nonlocal fired
            # A nested fire can reach this wrapper from an older snapshot.
            if fired:
                return None
            fired = True
            try:
                return listener(payload)
            finally:
                disposer()

        disposer = self.on(target.name, once_wrapper)
        return disposer

    def off(self, event_name: Any = UNSET, handler: Listener | None = None) -> None:
        """Unsubscribe listeners.

        ``off(name, handler)`` removes one registration of ``handler``,
        ``off(mapping)`` removes each listed pair, ``off(name)`` clears one
        event and ``off()`` clears every event.
        """
        target = as_target(event_name, handler)
        table = self._event_listeners
        if not table:
            return
        if target.kind is TargetKind.EMPTY:
            for name in table:
                self._remove_listener(name)
        elif target.kind is TargetKind.BULK:
            for name, listener in target.handlers.items():
                self._remove_listener(name, listener)
        else:
            self._remove_listener(target.name, target.listener)

    def fire(self, event_name: EventNameT, payload: Any = None) -> None:
        """Notify every listener of ``event_name`` with ``payload``.

        Listeners get an empty dict when no payload is given. Exceptions
        raised by a listener propagate and stop this dispatch.
        """
        listeners = self._event_listeners.get(event_name)
        if not listeners:
            return
        snapshot = tuple(listeners)
        if self.registry_settings.debug_events:
            LOGGER.debug(
                "observable.fire",
                extra={
                    "event": "observable.fire",
                    "event_name": repr(event_name),
                    "listener_count": len(snapshot),
                },
            )
        with owner_scope(self):
            for listener in snapshot:
                listener({} if payload is None else payload)

    subscribe = on
    subscribe_once = once
    unsubscribe = off
    publish = fire

    # -- introspection ------------------------------------------------------

    def listeners(self, event_name: EventNameT) -> tuple[Listener, ...]:
        """Return the listeners currently registered under ``event_name``."""
        return tuple(self._event_listeners.get(event_name, ()))

    def has_listeners(self, event_name: EventNameT) -> bool:
        return bool(self._event_listeners.get(event_name))

    # -- table maintenance --------------------------------------------------

    def _add_listener(self, event_name: EventNameT, listener: Listener) -> None:
        listeners = self._event_listeners.setdefault(event_name, [])
        settings = self.registry_settings
        if settings.warn_on_duplicate and any(
            _same_listener(candidate, listener) for candidate in listeners
        ):
            LOGGER.warning(
                "observable.duplicate_listener",
                extra={
                    "event": "observable.duplicate_listener",
                    "event_name": repr(event_name),
                    "listener": repr(listener),
                },
            )
        listeners.append(listener)
        if settings.max_listeners and len(listeners) == settings.max_listeners + 1:
            LOGGER.warning(
                "observable.listener_leak",
                extra={
                    "event": "observable.listener_leak",
                    "event_name": repr(event_name),
                    "listener_count": len(listeners),
                    "max_listeners": settings.max_listeners,
                },
            )
        if settings.debug_events:
            LOGGER.debug(
                "observable.subscribe",
                extra={"event": "observable.subscribe", "event_name": repr(event_name)},
            )

    def _remove_listener(
        self, event_name: EventNameT, listener: Listener | None = None
    ) -> None:
        listeners = self._event_listeners.get(event_name)
        if listeners is None:
            return
        if listener is None:
            listeners.clear()
        else:
            for index, candidate in enumerate(listeners):
                if _same_listener(candidate, listener):
                    del listeners[index]
                    break
            else:
                return
        if self.registry_settings.debug_events:
            LOGGER.debug(
                "observable.unsubscribe",
                extra={"event": "observable.unsubscribe", "event_name": repr(event_name)},
            )
