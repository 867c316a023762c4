"""Per-mode key dispatch tables."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single action callback."""

    keys: tuple[str, ...]
    handler: Callable[[], object]


class KeyRegistry:
    """Exact-match key table with an optional fallback for unbound keys."""

    def __init__(self, fallback: Callable[[str], object] | None = None) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}
        self._fallback = fallback

    def register(self, *bindings: KeyBinding) -> KeyRegistry:
        """Register bindings, overwriting earlier handlers for the same keys."""
        for binding in bindings:
            for key in binding.keys:
                self._handlers[key] = binding.handler
        return self

    def dispatch(self, key: str) -> object:
        """Invoke the handler bound to ``key``; unbound keys go to the fallback, if any."""
        handler = self._handlers.get(key)
        if handler is not None:
            return handler()
        if self._fallback is not None:
            return self._fallback(key)
        return None
