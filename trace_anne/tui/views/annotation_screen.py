"""
Annotation Screen for side-by-side review of one record.

Shows the two configured fields of a record in left/right panels under
their display labels, with an input below for the annotation. Submitting
the input saves the label straight into the dataset file.
"""

from __future__ import annotations

from typing import Any

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Label, Static

from trace_anne.annotations import AnnotationResult, load_page, submit_annotation
from trace_anne.errors import TraceAnneError
from trace_anne.summary import display_value
from trace_anne.tui.mixins import DualPaneMixin, VimNavigationMixin
from trace_anne.tui.widgets import RecordFieldModal


class AnnotationScreen(DualPaneMixin, VimNavigationMixin, Screen):
    """Side-by-side view of one record with an annotation input."""

    CSS = """
    AnnotationScreen {
        layout: vertical;
    }

    #comparison-container {
        height: 1fr;
    }

    #left-panel, #right-panel {
        width: 50%;
        border: solid $primary-darken-2;
        padding: 0 1;
    }

    #left-panel.active, #right-panel.active {
        border: solid $accent;
    }

    .panel-header {
        dock: top;
        height: 3;
        border-bottom: solid $primary;
        text-align: center;
        text-style: bold;
        padding: 1;
    }

    #annotation-bar {
        height: auto;
        padding: 0 1;
    }

    #annotation-label {
        padding: 1 0 0 0;
        text-style: bold;
    }
    """

    BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [
        Binding("i", "edit_annotation", "Annotate", show=True),
        Binding("n", "next_record", "Next", show=True),
        Binding("p", "previous_record", "Previous", show=True),
    ]

    def __init__(
        self,
        record_index: int,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the AnnotationScreen.

        Args:
            record_index: Index of the record to display.
            name: Optional name for the screen.
            id: Optional ID for the screen.
            classes: Optional CSS classes for the screen.
        """
        super().__init__(name=name, id=id, classes=classes)
        self._record_index = record_index
        self._record: dict[str, Any] = {}
        self._saving = False

    @property
    def record_index(self) -> int:
        return self._record_index

    @property
    def current_record(self) -> dict[str, Any]:
        return self._record

    def compose(self) -> ComposeResult:
        """Compose the screen layout with side-by-side panels."""
        labels = self.app.config.labels
        yield Header()
        with Horizontal(id="comparison-container"):
            with Vertical(id="left-panel", classes="active"):
                yield Label(labels.left, classes="panel-header", markup=False)
                with VerticalScroll(id="left-scroll"):
                    yield Static("", id="left-text", markup=False)
            with Vertical(id="right-panel", classes="inactive"):
                yield Label(labels.right, classes="panel-header", markup=False)
                with VerticalScroll(id="right-scroll"):
                    yield Static("", id="right-text", markup=False)
        with Vertical(id="annotation-bar"):
            yield Label("", id="annotation-label", markup=False)
            yield Input(placeholder="Type a label and press Enter to save", id="annotation-input")
        yield Footer()

    def on_mount(self) -> None:
        """Show the record when the screen is mounted."""
        self._show_record()

    def _show_record(self) -> None:
        """Fill the panels and input from app.records[record_index]."""
        config = self.app.config
        records = self.app.records
        total = len(records)

        if 0 <= self._record_index < total:
            self._record = records[self._record_index]
        else:
            self._record = {}
            self.notify(f"Record {self._record_index} no longer exists", severity="error")

        columns = config.columns
        self.query_one("#left-text", Static).update(
            display_value(self._record.get(columns.left, ""))
        )
        self.query_one("#right-text", Static).update(
            display_value(self._record.get(columns.right, ""))
        )
        self.query_one("#annotation-label", Label).update(
            f"{config.annotation_column}:"
        )
        annotation_input = self.query_one("#annotation-input", Input)
        annotation_input.value = display_value(self._record.get(config.annotation_column))

        self.title = f"Record {self._record_index} ({self._record_index + 1}/{total})"
        self.query_one("#left-scroll", VerticalScroll).scroll_home(animate=False)
        self.query_one("#right-scroll", VerticalScroll).scroll_home(animate=False)
        self._update_panel_styles()
        annotation_input.focus()

    def _focus_active_widget(self) -> None:
        """Focus the scroll area of the active panel."""
        self.query_one(f"#{self._active_panel}-scroll", VerticalScroll).focus()

    def _active_field(self) -> tuple[str, Any, str]:
        config = self.app.config
        if self.is_left_active:
            column, label = config.columns.left, config.labels.left
        else:
            column, label = config.columns.right, config.labels.right
        return column, self._record.get(column, ""), label

    def _field_modal(self) -> RecordFieldModal:
        column, value, label = self._active_field()
        annotation_column = self.app.config.annotation_column
        return RecordFieldModal(
            record_index=self._record_index,
            column=column,
            value=value,
            panel_label=label,
            annotation_column=annotation_column,
            annotation=self._record.get(annotation_column),
        )

    def go_to(self, index: int) -> None:
        """Show the record at ``index`` if it exists."""
        if 0 <= index < len(self.app.records):
            self._record_index = index
            self._show_record()

    def action_edit_annotation(self) -> None:
        """Move focus to the annotation input."""
        self.query_one("#annotation-input", Input).focus()

    def action_next_record(self) -> None:
        """Show the next record."""
        self.go_to(self._record_index + 1)

    def action_previous_record(self) -> None:
        """Show the previous record."""
        self.go_to(self._record_index - 1)

    def action_go_back(self) -> None:
        """Leave the input first; from a panel, return to the record list."""
        annotation_input = self.query_one("#annotation-input", Input)
        if annotation_input.has_focus:
            # Panels without overflow may refuse focus; screen keys still apply.
            self.set_focus(None)
            self._focus_active_widget()
            return
        self.app.pop_screen()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Save the submitted label."""
        if self._saving:
            return
        self._saving = True
        self._save_annotation(self._record_index, event.value)

    @work(thread=True, exclusive=True)
    def _save_annotation(self, index: int, label: str) -> None:
        """Write the label to disk in a background thread, then re-read."""
        config_path = getattr(self.app, "config_path", None)
        try:
            result = submit_annotation(index, label, config_path=config_path)
        except TraceAnneError as e:
            self.app.call_from_thread(self._on_save_failed, str(e))
            return

        try:
            records = load_page(config_path).records
        except TraceAnneError as e:
            # The label is on disk; only the refreshed view is missing.
            self.app.call_from_thread(self._on_reload_failed, result, str(e))
            return
        self.app.call_from_thread(self._on_saved, result, records)

    def _on_reload_failed(self, result: AnnotationResult, message: str) -> None:
        records = self.app.records
        if 0 <= result.index < len(records):
            records[result.index] = result.record
        self.notify(
            f"Saved record {result.index}, but reloading the data file failed: {message}",
            severity="warning",
            timeout=8,
        )
        self._on_saved(result, records, notify=False)

    def _on_saved(
        self,
        result: AnnotationResult,
        records: list[dict[str, Any]],
        notify: bool = True,
    ) -> None:
        self._saving = False
        self.app.records = records
        if notify:
            self.notify(f"Saved record {result.index}: {result.label!r}")
        if result.index + 1 < len(records):
            self.go_to(result.index + 1)
        else:
            self._show_record()
            self.notify("Reached the last record")

    def _on_save_failed(self, message: str) -> None:
        self._saving = False
        self.notify(f"Save failed: {message}", severity="error", timeout=8)
