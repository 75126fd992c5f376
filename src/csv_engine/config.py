"""Editor configuration loaded from ``CSV_ENGINE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "CSV_ENGINE_"
DEFAULT_REFRESH_DELAY_MS = 50
DEFAULT_COMPLETION_LIMIT = 20

LINE_ENDING_NAMES: Mapping[str, str] = {
    "crlf": "\r\n",
    "lf": "\n",
    "cr": "\r",
}


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    return environ.get(f"{ENV_PREFIX}{name}")


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _env(environ, name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(environ: Mapping[str, str], name: str, fallback: int) -> int:
    raw = _env(environ, name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Tunables for :class:`csv_engine.editor.CsvEditor`."""

    refresh_delay_ms: int = DEFAULT_REFRESH_DELAY_MS
    autocomplete_enabled: bool = True
    completion_limit: int = DEFAULT_COMPLETION_LIMIT
    default_line_ending: Optional[str] = None

    def __post_init__(self) -> None:
        if self.refresh_delay_ms < 0:
            raise ValueError("refresh_delay_ms cannot be negative")
        if self.completion_limit <= 0:
            raise ValueError("completion_limit must be positive")
        if (
            self.default_line_ending is not None
            and self.default_line_ending not in LINE_ENDING_NAMES.values()
        ):
            raise ValueError(
                f"Unsupported line ending {self.default_line_ending!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorConfig":
        env = os.environ if environ is None else environ
        line_ending_name = (_env(env, "LINE_ENDING") or "").strip().lower()
        if line_ending_name and line_ending_name not in LINE_ENDING_NAMES:
            raise ValueError(
                f"{ENV_PREFIX}LINE_ENDING must be one of {sorted(LINE_ENDING_NAMES)}"
            )
        return cls(
            refresh_delay_ms=_env_int(env, "REFRESH_DELAY_MS", DEFAULT_REFRESH_DELAY_MS),
            autocomplete_enabled=_env_flag(env, "AUTOCOMPLETE", True),
            completion_limit=_env_int(env, "COMPLETION_LIMIT", DEFAULT_COMPLETION_LIMIT),
            default_line_ending=LINE_ENDING_NAMES.get(line_ending_name),
        )


__all__ = ["EditorConfig", "LINE_ENDING_NAMES"]
