"""
TUI annotation tool.

A Textual-based terminal UI for labelling pairs of texts stored in a JSONL
file, showing both texts side by side.

Usage:
    python -m trace_anne.tui.app --config config.yaml

Components:
    - AnnotatorApp: Main application class
    - RecordListScreen: Record selection view
    - AnnotationScreen: Side-by-side view with the annotation input
    - RecordFieldModal: Full text of one field with its annotation
"""
