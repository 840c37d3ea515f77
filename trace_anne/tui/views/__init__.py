"""TUI views for the annotation tool."""

from trace_anne.tui.views.annotation_screen import AnnotationScreen
from trace_anne.tui.views.record_list import RecordListScreen

__all__ = ["AnnotationScreen", "RecordListScreen"]
