"""UI-agnostic grid editing engine for CSV text."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "editor",
    "grid",
    "keymaps",
    "operations",
    "runtime",
]

__version__ = "0.1.0"
