"""TUI widgets for the annotation tool."""

from trace_anne.tui.widgets.record_field_modal import RecordFieldModal

__all__ = ["RecordFieldModal"]
