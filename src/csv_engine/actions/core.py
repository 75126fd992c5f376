"""Result type shared by every gesture handler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ActionResult:
    consumed: bool = False
    status: Optional[str] = None
    message: Optional[str] = None


__all__ = ["ActionResult"]
