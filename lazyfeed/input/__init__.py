"""Input-layer public API: raw key decoding and key-binding dispatch."""

from .keys import KeyBinding, KeyBindingTable
from .reader import ESC_SEQUENCE_TIMEOUT_MS, KeyReader

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyBindingTable",
    "KeyReader",
]
