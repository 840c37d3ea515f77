"""
Display helpers shared by the terminal UI and the command line.

Records are schema-less, so everything here works off the configured
column names and tolerates missing fields and non-string values.
"""

from __future__ import annotations

import json
from typing import Any

from trace_anne.config import Config

PREVIEW_LENGTH = 40
MISSING = "-"


def truncate(text: str, max_len: int) -> str:
    """
    Truncate text to a maximum length, adding ellipsis if truncated.

    Args:
        text: The text to truncate.
        max_len: Maximum length of the output string (including ellipsis).

    Returns:
        The truncated string with ellipsis if it exceeded max_len,
        otherwise the original string.

    Examples:
        >>> truncate("Hello, World!", 10)
        'Hello, ...'
        >>> truncate("Short", 10)
        'Short'
    """
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."


def display_value(value: Any) -> str:
    """Render a field value as text.

    Strings are returned unchanged, None becomes an empty string, and
    anything else is shown as JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def preview(value: Any, max_len: int = PREVIEW_LENGTH) -> str:
    """Single-line, truncated rendering of a field value."""
    text = " ".join(display_value(value).split())
    return truncate(text, max_len) if text else ""


def get_record_summary(
    record: dict[str, Any],
    idx: int,
    config: Config,
    max_len: int = PREVIEW_LENGTH,
) -> dict[str, Any]:
    """
    Summarize a record for list views.

    Args:
        record: The record to summarize.
        idx: Position of the record in the store.
        config: Settings naming the compared and annotation columns.
        max_len: Maximum length of each preview.

    Returns:
        A dictionary containing:
            - index: The record index
            - left: Preview of the left column ('-' if the field is absent)
            - right: Preview of the right column ('-' if the field is absent)
            - annotation: The current annotation, untruncated
            - annotated: Whether the annotation is non-empty
    """
    columns = config.columns

    def field_preview(name: str) -> str:
        if name not in record:
            return MISSING
        return preview(record[name], max_len)

    annotation = display_value(record.get(config.annotation_column))
    return {
        "index": idx,
        "left": field_preview(columns.left),
        "right": field_preview(columns.right),
        "annotation": annotation,
        "annotated": bool(annotation.strip()),
    }
