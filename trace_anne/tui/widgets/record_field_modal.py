"""
Full-text view of one compared field of a record.

The annotation screen truncates nothing, but long prompts and responses are
easier to read without the other pane beside them. This modal shows a
single field at full width together with where it came from (record index,
configured column, pane label) and the record's current annotation, so the
reader does not lose track of what is being labelled.
"""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Label, Static

from trace_anne.summary import display_value

NOT_ANNOTATED = "(not annotated)"


def describe_text(text: str) -> str:
    """Return a short size description such as ``"42 chars, 3 lines"``."""
    lines = text.count("\n") + 1 if text else 0
    return f"{len(text):,} chars, {lines:,} line{'' if lines == 1 else 's'}"


class RecordFieldModal(ModalScreen[None]):
    """One record field shown in full, with its annotation underneath."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("enter", "close", "Close", show=False),
        Binding("m", "close", "Close", show=False),
    ]

    CSS = """
    RecordFieldModal {
        align: center middle;
    }

    #field-box {
        width: 90%;
        height: 90%;
        border: thick $accent;
        background: $surface;
    }

    #field-title {
        width: 100%;
        background: $accent;
        text-style: bold;
        padding: 0 1;
    }

    #field-meta {
        width: 100%;
        color: $text-muted;
        padding: 0 1;
    }

    #field-body {
        height: 1fr;
        padding: 0 1;
    }

    #field-annotation {
        width: 100%;
        border-top: solid $primary;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        record_index: int,
        column: str,
        value: Any,
        panel_label: str,
        annotation_column: str,
        annotation: Any = None,
    ) -> None:
        super().__init__()
        self.record_index = record_index
        self.column = column
        self.value = value
        self.panel_label = panel_label
        self.annotation_column = annotation_column
        self.annotation = annotation

    @property
    def text(self) -> str:
        return display_value(self.value)

    @property
    def annotation_text(self) -> str:
        text = display_value(self.annotation)
        return text if text.strip() else NOT_ANNOTATED

    def compose(self) -> ComposeResult:
        with Vertical(id="field-box"):
            yield Label(
                f"Record {self.record_index}: {self.panel_label}",
                id="field-title",
                markup=False,
            )
            yield Label(
                f"column '{self.column}', {describe_text(self.text)}",
                id="field-meta",
                markup=False,
            )
            with VerticalScroll(id="field-body"):
                yield Static(self.text, markup=False)
            yield Label(
                f"{self.annotation_column}: {self.annotation_text}",
                id="field-annotation",
                markup=False,
            )

    def action_close(self) -> None:
        self.dismiss(None)
