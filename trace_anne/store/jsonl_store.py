"""
JSONL record store.

A JSONL (JSON Lines) file holds one JSON object per line. Blank and
whitespace-only lines are ignored and do not take up a record index, so
record ``i`` is the ``i``-th non-blank line of the file.

Writes replace the whole file: the new content goes to a temporary file in
the same directory which is then moved over the original, so a failed
write never leaves a truncated store behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from trace_anne.errors import (
    StoreNotFound,
    StoreParseError,
    StoreReadError,
    StoreWriteError,
)
from trace_anne.logging_config import get_logger
from trace_anne.store.base import Record, RecordStore

# Compact separators keep one record per line and match the usual JSONL style.
JSON_SEPARATORS = (",", ":")

logger = get_logger()


def _resolve(path: str | Path) -> Path:
    path = Path(path)
    if path.is_absolute():
        return path
    return Path.cwd() / path


def parse_records(text: str, path: str | Path = "<string>") -> list[Record]:
    """Parse JSONL text into an ordered list of records.

    Args:
        text: The full file content.
        path: Source path, used in error messages only.

    Returns:
        One record per non-blank line, in file order.

    Raises:
        StoreParseError: If a non-blank line is not valid JSON or does not
            hold a JSON object. Nothing is returned in that case.

    Examples:
        >>> parse_records('{"a": "1"}\\n\\n{"a": "2"}\\n')
        [{'a': '1'}, {'a': '2'}]
    """
    records: list[Record] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise StoreParseError(path, line_number, e.msg) from e
        if not isinstance(record, dict):
            raise StoreParseError(
                path, line_number, f"expected a JSON object, got {type(record).__name__}"
            )
        records.append(record)
    return records


def serialize_records(records: Iterable[Record]) -> str:
    """Serialize records to JSONL text with a single trailing newline.

    Raises:
        TypeError: If a record holds a value JSON cannot represent.
        ValueError: If a record is circular or holds NaN-like floats.
    """
    lines = [
        json.dumps(record, ensure_ascii=False, separators=JSON_SEPARATORS)
        for record in records
    ]
    return "\n".join(lines) + "\n"


def _line_of_byte(raw: bytes, offset: int) -> int:
    return raw.count(b"\n", 0, offset) + 1


def read_store(path: str | Path) -> list[Record]:
    """Read a JSONL record store into memory.

    Args:
        path: Path to the store; relative paths resolve against the
            current working directory.

    Returns:
        The records in file order.

    Raises:
        StoreNotFound: If the path does not exist or is not a file.
        StoreReadError: If the file exists but cannot be read.
        StoreParseError: If any non-blank line is not a JSON object.
    """
    resolved = _resolve(path)
    try:
        raw = resolved.read_bytes()
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
        raise StoreNotFound(resolved) from e
    except OSError as e:
        raise StoreReadError(resolved, e.strerror or str(e)) from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        line_number = _line_of_byte(raw, e.start)
        raise StoreParseError(resolved, line_number, "invalid UTF-8") from e

    records = parse_records(text, resolved)
    logger.debug("Read %d records from %s", len(records), resolved)
    return records


def write_store(path: str | Path, records: Iterable[Record]) -> None:
    """Replace a JSONL record store with ``records``.

    The content is written to a temporary file next to the store, flushed
    to disk, and renamed over the store in one step.

    Args:
        path: Path to the store; relative paths resolve against the
            current working directory.
        records: The full ordered sequence to persist. Records not in it
            are dropped from the store.

    Raises:
        StoreWriteError: If a record cannot be serialized or the file
            cannot be written. The previous content is left in place.
    """
    resolved = _resolve(path)
    records = list(records)
    try:
        content = serialize_records(records)
    except (TypeError, ValueError) as e:
        raise StoreWriteError(resolved, f"record is not JSON serializable: {e}") from e

    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{resolved.name}.", suffix=".tmp", dir=resolved.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if resolved.exists():
            os.chmod(tmp_name, resolved.stat().st_mode & 0o777)
        os.replace(tmp_name, resolved)
        tmp_name = None
    except OSError as e:
        raise StoreWriteError(resolved, e.strerror or str(e)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Wrote %d records to %s", len(records), resolved)


class JSONLStore(RecordStore):
    """Record store backed by a JSONL file.

    Attributes:
        path: Path to the JSONL file.
        format_name: Returns 'jsonl'.

    Examples:
        >>> store = JSONLStore("data/sample.jsonl")
        >>> records = store.read_all()
        >>> records[0]["label"] = "good"
        >>> store.write_all(records)
    """

    @property
    def format_name(self) -> str:
        """Return the format name."""
        return "jsonl"

    @property
    def resolved_path(self) -> Path:
        """Return the store path resolved against the working directory."""
        return _resolve(self.path)

    def read_all(self) -> list[Record]:
        """Read every record from the JSONL file."""
        return read_store(self.path)

    def write_all(self, records: list[Record]) -> None:
        """Replace the JSONL file's content with ``records``."""
        write_store(self.path, records)

    def get(self, index: int) -> dict[str, Any]:
        """Return the record at ``index``.

        Raises:
            IndexError: If the index is negative or past the end.
        """
        if index < 0:
            raise IndexError(f"Record index {index} cannot be negative")
        return super().get(index)
