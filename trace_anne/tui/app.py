"""
Main Textual application for the annotation tool.

Loads the settings and dataset named in config.yaml, lists the records,
and opens a side-by-side annotation view for the selected one.

Usage:
    trace-anne-tui
    trace-anne-tui --config path/to/config.yaml
"""

import argparse
import sys
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from trace_anne.annotations import load_page
from trace_anne.config import Config, default_config_path
from trace_anne.errors import TraceAnneError
from trace_anne.tui.views.annotation_screen import AnnotationScreen
from trace_anne.tui.views.record_list import RecordListScreen


class AnnotatorApp(App):
    """A Textual app for labelling pairs of texts in a JSONL dataset."""

    TITLE = "Trace Anne"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        dock: top;
        height: 3;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
    }

    Static {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False),
    ]

    def __init__(self, config_path: str | Path | None = None):
        """Initialize the app.

        Args:
            config_path: Settings file; defaults to ./config.yaml.
        """
        super().__init__()
        self.config_path = config_path
        self.config: Config | None = None
        self.records: list[dict] = []

    def on_mount(self) -> None:
        """Load data and show the record list."""
        try:
            page = load_page(self.config_path)
        except TraceAnneError as e:
            self.exit(return_code=1, message=f"Error: {e}")
            return

        self.config = page.config
        self.records = page.records
        self.title = f"Trace Anne - {Path(self.config.data_path).name}"
        self.push_screen(RecordListScreen())

    def reload_records(self) -> None:
        """Re-read configuration and dataset; keep the old data on failure."""
        try:
            page = load_page(self.config_path)
        except TraceAnneError as e:
            self.notify(f"Reload failed: {e}", severity="error", timeout=8)
            return

        self.config = page.config
        self.records = page.records
        if isinstance(self.screen, RecordListScreen):
            self.screen.refresh_rows()
        self.notify(f"Loaded {len(self.records):,} records")

    def on_record_list_screen_record_selected(
        self, message: RecordListScreen.RecordSelected
    ) -> None:
        """Open the annotation view for the selected record."""
        self.push_screen(AnnotationScreen(message.index))


def main() -> None:
    """Parse arguments and run the application."""
    parser = argparse.ArgumentParser(
        description="Annotate paired text records in a JSONL file in a terminal UI."
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to the settings file (default: ./config.yaml)",
    )
    args = parser.parse_args()

    config_path = Path(args.config) if args.config else default_config_path()
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    app = AnnotatorApp(config_path=config_path)
    app.run()
    if app.return_code:
        sys.exit(app.return_code)


if __name__ == "__main__":
    main()
