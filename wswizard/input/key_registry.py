"""Key tables for the interactive surfaces."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyHandler = Callable[[], bool | None]
TextHandler = Callable[[str], bool | None]


@dataclass(frozen=True)
class KeyComboBinding:
    """One action bound to every key token in ``combos``."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Key-token dispatch table with an optional printable-text fallback.

    The fallback receives unbound single printable characters, which is how
    the picker query and the name prompts take typed input.
    """

    def __init__(self, on_text: TextHandler | None = None) -> None:
        self._handlers: dict[str, KeyHandler] = {}
        self._on_text = on_text

    def register(self, combos: tuple[str, ...], handler: KeyHandler) -> KeyComboRegistry:
        return self.register_binding(KeyComboBinding(combos, handler))

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Later bindings replace earlier ones for the same token."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the action for ``key``; ``None`` when nothing takes it."""
        handler = self._handlers.get(key)
        if handler is not None:
            return handler()
        if self._on_text is not None and len(key) == 1 and key.isprintable():
            return self._on_text(key)
        return None


__all__ = ["KeyComboBinding", "KeyComboRegistry"]
