"""Textual front end for the CSV editor.

``app`` needs the ``textual`` package; ``controller`` does not.
"""

from .controller import GridSnapshot, TextualCsvAdapter, TextualUIHooks, render_rows

__all__ = ["GridSnapshot", "TextualCsvAdapter", "TextualUIHooks", "render_rows"]
