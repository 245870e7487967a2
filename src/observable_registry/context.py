"""Invocation context for listeners.

While ``Observable.fire`` runs a listener, the firing owner is available
through ``current_owner()``. Nested fires stack naturally: each one restores
the previous owner when it returns or raises.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_current_owner: ContextVar[Any] = ContextVar("observable_current_owner", default=None)


def current_owner() -> Any:
    """Return the owner whose ``fire`` is invoking the running listener."""
    return _current_owner.get()


@contextmanager
def owner_scope(owner: Any) -> Iterator[Any]:
    token = _current_owner.set(owner)
    try:
        yield owner
    finally:
        _current_owner.reset(token)
