"""Key-binding table used by the event dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single action."""

    keys: tuple[str, ...]
    action: Callable[[], None]
    description: str = ""


class KeyBindingTable:
    """Exact-match key dispatch with registration order kept for help text."""

    def __init__(self) -> None:
        self._actions: dict[str, Callable[[], None]] = {}
        self._bindings: list[KeyBinding] = []

    def bind(self, binding: KeyBinding) -> KeyBindingTable:
        """Register one binding, overwriting earlier actions for the same keys."""
        for key in binding.keys:
            self._actions[key] = binding.action
        self._bindings.append(binding)
        return self

    def bind_all(self, *bindings: KeyBinding) -> KeyBindingTable:
        for binding in bindings:
            self.bind(binding)
        return self

    def __contains__(self, key: str) -> bool:
        return key in self._actions

    def dispatch(self, key: str) -> bool:
        """Run the action bound to ``key``; return ``False`` when unbound."""
        action = self._actions.get(key)
        if action is None:
            return False
        action()
        return True

    def help_text(self) -> str:
        parts = []
        for binding in self._bindings:
            if binding.description:
                parts.append(f"{'/'.join(binding.keys)}: {binding.description}")
        return "  ".join(parts)


__all__ = ["KeyBinding", "KeyBindingTable"]
