"""Call-shape variants accepted by the registry methods.

``on``, ``once`` and ``off`` each accept several argument shapes. The public
methods coerce their arguments into one of the variants below exactly once,
then dispatch on ``kind``:

    SinglePair  -> on("tick", handler)
    BulkMap     -> on({"tick": handler, "tock": other})
    Empty       -> off()
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

Listener = Callable[[Any], Any]
EventName = Hashable


class TargetKind(str, Enum):
    """Discriminator for registry call shapes."""

    SINGLE = "SINGLE"
    BULK = "BULK"
    EMPTY = "EMPTY"


@dataclass(frozen=True)
class SinglePair:
    name: EventName
    # None means "every listener of ``name``" for off() and "nothing" for on().
    listener: Listener | None = None
    kind: TargetKind = field(default=TargetKind.SINGLE, init=False)


@dataclass(frozen=True)
class BulkMap:
    handlers: Mapping[EventName, Listener]
    kind: TargetKind = field(default=TargetKind.BULK, init=False)

    def __post_init__(self) -> None:
        # Freeze a copy so later edits to the caller's dict cannot change
        # what an aggregate disposer removes.
        object.__setattr__(self, "handlers", MappingProxyType(dict(self.handlers)))


@dataclass(frozen=True)
class Empty:
    kind: TargetKind = field(default=TargetKind.EMPTY, init=False)


Target = SinglePair | BulkMap | Empty

UNSET: Any = object()


def as_target(arg0: Any = UNSET, listener: Listener | None = None) -> Target:
    """Coerce positional registry arguments into a tagged variant."""
    if isinstance(arg0, (SinglePair, BulkMap, Empty)):
        if listener is not None:
            raise TypeError("A listener cannot be combined with an explicit target.")
        return arg0
    if arg0 is UNSET:
        if listener is not None:
            raise TypeError("A listener requires an event name.")
        return Empty()
    if isinstance(arg0, Mapping):
        if listener is not None:
            raise TypeError("A listener cannot be combined with a handler mapping.")
        return BulkMap(arg0)
    return SinglePair(arg0, listener)
