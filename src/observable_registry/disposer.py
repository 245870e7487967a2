"""Disposer capability objects returned by every subscription call."""

from __future__ import annotations

from collections.abc import Callable, Iterable


class Disposer:
    """Undo exactly one subscription action.

    The first call runs ``revoke``; every later call is a no-op, so a
    disposer can be handed around and called freely.
    """

    __slots__ = ("_revoke", "_disposed")

    def __init__(self, revoke: Callable[[], object]) -> None:
        self._revoke: Callable[[], object] | None = revoke
        self._disposed = False

    @property
    def disposed(self) -> bool:
        """Return True once the disposer has run."""
        return self._disposed

    def __call__(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        revoke, self._revoke = self._revoke, None
        if revoke is not None:
            revoke()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"<{type(self).__name__} {state}>"

    @classmethod
    def noop(cls) -> Disposer:
        """Return a disposer that revokes nothing."""
        return cls(lambda: None)

    @classmethod
    def combine(cls, disposers: Iterable[Disposer]) -> Disposer:
        """Return one disposer that calls each of ``disposers`` in order."""
        members = tuple(disposers)

        def revoke_all() -> None:
            for member in members:
                member()

        return cls(revoke_all)
