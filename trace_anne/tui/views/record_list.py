"""
Record List Screen for the annotation tool.

Displays the dataset in a DataTable: one row per record with previews of
the two compared fields and the current annotation. Select a record with
Enter to open the annotation view.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header

from trace_anne.annotations import annotation_progress
from trace_anne.summary import get_record_summary, truncate
from trace_anne.tui.mixins import VimNavigationMixin


class RecordListScreen(VimNavigationMixin, Screen):
    """Screen that lists the records of the configured dataset."""

    CSS = """
    RecordListScreen {
        layout: vertical;
    }

    DataTable {
        height: 1fr;
        border: solid $primary;
    }

    DataTable > .datatable--header {
        background: $primary;
        color: $text;
        text-style: bold;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
        color: $text;
    }
    """

    BINDINGS = VimNavigationMixin.VIM_BINDINGS + [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "reload", "Reload", show=True),
        Binding("u", "next_unannotated", "Next Unlabelled", show=True),
    ]

    class RecordSelected(Message):
        """Message posted when a record is selected."""

        def __init__(self, index: int) -> None:
            self.index = index
            super().__init__()

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Header()
        yield DataTable(id="record-table", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        """Build the table columns and fill them from the app's records."""
        config = self.app.config
        table = self.query_one("#record-table", DataTable)
        table.add_column("IDX", key="idx", width=6)
        table.add_column(truncate(config.labels.left, 30), key="left", width=32)
        table.add_column(truncate(config.labels.right, 30), key="right", width=32)
        table.add_column("ANNOTATION", key="annotation")
        self.refresh_rows()
        table.focus()

    def on_screen_resume(self) -> None:
        """Refresh rows when returning from the annotation screen."""
        self.refresh_rows()

    def refresh_rows(self) -> None:
        """Repopulate the table from app.records, keeping the cursor row."""
        config = self.app.config
        records = self.app.records
        table = self.query_one("#record-table", DataTable)
        if not table.columns:
            return
        cursor_row = table.cursor_row

        table.clear()
        if not records:
            table.add_row("--", "No records found", "--", "--")
        for idx, record in enumerate(records):
            summary = get_record_summary(record, idx, config)
            annotation = truncate(summary["annotation"], 40) if summary["annotated"] else "-"
            table.add_row(
                str(summary["index"]),
                summary["left"],
                summary["right"],
                annotation,
                key=str(idx),
            )

        if records:
            table.move_cursor(row=min(cursor_row, len(records) - 1))

        done, total = annotation_progress(records, config.annotation_column)
        self.sub_title = f"{done}/{total} annotated"

    def select_row(self, index: int) -> None:
        """Move the table cursor to ``index``."""
        table = self.query_one("#record-table", DataTable)
        if 0 <= index < table.row_count:
            table.move_cursor(row=index)

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()

    def action_reload(self) -> None:
        """Re-read the dataset from disk."""
        self.app.reload_records()

    def action_next_unannotated(self) -> None:
        """Jump to the next record without an annotation."""
        config = self.app.config
        records = self.app.records
        table = self.query_one("#record-table", DataTable)
        start = table.cursor_row + 1
        order = list(range(start, len(records))) + list(range(0, start))
        for idx in order:
            summary = get_record_summary(records[idx], idx, config)
            if not summary["annotated"]:
                table.move_cursor(row=idx)
                return
        self.notify("Every record is annotated")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Handle row selection from the DataTable (Enter key press)."""
        if event.row_key is None or event.row_key.value is None:
            return
        try:
            row_idx = int(event.row_key.value)
        except (ValueError, TypeError):
            return
        if 0 <= row_idx < len(self.app.records):
            self.post_message(self.RecordSelected(index=row_idx))
