"""Executable Textual app that hosts the CSV editor."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use csv_engine.adapters.textual.app"
    ) from exc

from csv_engine.config import LINE_ENDING_NAMES, EditorConfig
from csv_engine.editor import CsvEditor
from csv_engine.runtime import telemetry

from .controller import GridSnapshot, TextualCsvAdapter, TextualUIHooks

APP_KEYS = frozenset({"ctrl+q", "ctrl+s"})


@dataclass
class UIState:
    grid_text: str = ""
    status_text: str = ""
    log_lines: int = 0


class CsvEditorApp(App[None]):
    """Minimal Textual UI embedding the CSV editor."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#grid-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(
        self,
        path: Optional[Path] = None,
        *,
        config: Optional[EditorConfig] = None,
    ) -> None:
        super().__init__()
        self.path = path
        self.config = config or EditorConfig.from_env()
        self._state = UIState()
        self.editor: CsvEditor | None = None
        self.adapter: TextualCsvAdapter | None = None
        self._grid_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="grid-area"):
            self._grid_widget = Static("", id="grid-view")
            yield self._grid_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.editor = CsvEditor(config=self.config)
        self.editor.initialize(self._read_file())
        hooks = TextualUIHooks(
            update_grid=self._update_grid,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualCsvAdapter(self.editor, hooks)
        self.set_interval(
            max(self.config.refresh_delay_ms, 10) / 1000.0, self._process_refresh
        )
        self._update_status(self._title_text())

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
        if self.editor:
            self.editor.dispose()

    def _process_refresh(self) -> None:
        if self.adapter:
            self.adapter.process_pending_refresh()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in APP_KEYS:
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result.consumed:
            event.stop()
            event.prevent_default()

    def action_save(self) -> None:
        if not self.editor:
            return
        if self.path is None:
            self._update_status("No file to save to")
            return
        self.path.write_text(self.editor.get_text(), encoding="utf-8", newline="")
        self.editor.reset_dirty()
        self._update_status(f"Saved {self.path}")

    def _read_file(self) -> str:
        if self.path is None or not self.path.exists():
            return ""
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def _title_text(self) -> str:
        name = self.path.name if self.path else "untitled"
        editor = self.editor
        if editor is None:
            return name
        marker = " *" if editor.is_dirty else ""
        return f"{name}{marker} ({editor.lines_count}x{editor.columns_count})"

    def _update_grid(self, snapshot: GridSnapshot) -> None:
        self._state.grid_text = "\n".join(snapshot.rows)
        if self._grid_widget:
            self._grid_widget.update(self._state.grid_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "caret_location_changed" and payload is not None:
            location = payload
            self._update_status(
                f"{self._title_text()}  row {location.line.index + 1},"
                f" col {location.column.index + 1}"
            )

    def _log_line(self, line: str) -> None:
        self._state.log_lines += 1
        telemetry.record_event(
            "textual.adapter", level="debug", data={"line": line}
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a CSV file as a grid.")
    parser.add_argument("path", nargs="?", type=Path, help="CSV file to open")
    parser.add_argument(
        "--refresh-delay-ms",
        type=int,
        default=None,
        help="Quiet period before the grid is fully re-measured",
    )
    parser.add_argument(
        "--line-ending",
        choices=sorted(LINE_ENDING_NAMES),
        default=None,
        help="Line ending for new documents (default: detected)",
    )
    parser.add_argument(
        "--no-autocomplete",
        action="store_true",
        help="Disable column value completion",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "silent"),
        default=os.environ.get("CSV_ENGINE_LOG_PRESET"),
        help="telelog preset (default: CSV_ENGINE_* environment)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EditorConfig:
    base = EditorConfig.from_env()
    return EditorConfig(
        refresh_delay_ms=(
            base.refresh_delay_ms
            if args.refresh_delay_ms is None
            else args.refresh_delay_ms
        ),
        autocomplete_enabled=base.autocomplete_enabled and not args.no_autocomplete,
        completion_limit=base.completion_limit,
        default_line_ending=(
            LINE_ENDING_NAMES[args.line_ending]
            if args.line_ending
            else base.default_line_ending
        ),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = CsvEditorApp(args.path, config=build_config(args))
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
