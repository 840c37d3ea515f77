"""
Annotation update service.

The two entry points a front end needs:

    load_page()                      -> PageData(config, records)
    submit_annotation(index, label)  -> AnnotationResult

Both resolve the configuration and read the store from scratch on every
call. submit_annotation() performs one read-modify-write cycle: it sets the
configured annotation field of exactly one record and writes the whole
store back. Cycles against the same store are serialized within a process;
separate processes still race, and the last write wins.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from trace_anne.config import Config, load_config
from trace_anne.errors import InvalidIndex
from trace_anne.logging_config import get_logger
from trace_anne.store import JSONLStore, Record

logger = get_logger()

INDEX_PATTERN = re.compile(r"^-?[0-9]+$")

_locks_guard = threading.Lock()
_store_locks: dict[Path, threading.Lock] = {}


@dataclass(frozen=True)
class PageData:
    """Everything the display layer needs to render the dataset."""

    config: Config
    records: list[Record]


@dataclass(frozen=True)
class AnnotationResult:
    """Acknowledgment of a saved annotation."""

    index: int
    column: str
    label: str
    record: Record
    total: int

    @property
    def success(self) -> bool:
        return True


def _store_lock(path: Path) -> threading.Lock:
    """Return the process-wide lock guarding the store at ``path``."""
    key = path.resolve()
    with _locks_guard:
        lock = _store_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _store_locks[key] = lock
        return lock


def parse_index(raw: Any) -> int:
    """Parse a submitted row index.

    Accepts an int or a base-10 integer string (surrounding whitespace is
    ignored). Negative values parse; the bounds check happens later against
    the freshly read store.

    Raises:
        InvalidIndex: If the value is not an integer.

    Examples:
        >>> parse_index("3")
        3
        >>> parse_index(" 12 ")
        12
    """
    if isinstance(raw, bool):
        raise InvalidIndex(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if INDEX_PATTERN.match(text):
            return int(text, 10)
    raise InvalidIndex(raw)


def load_page(config_path: str | Path | None = None) -> PageData:
    """Resolve configuration and read the full current record sequence.

    Raises:
        ConfigNotFound, ConfigParseError: From the configuration resolver.
        StoreNotFound, StoreParseError: From the record store.
    """
    config = load_config(config_path)
    store = JSONLStore(config.resolve_data_path())
    return PageData(config=config, records=store.read_all())


def apply_annotation(
    records: list[Record], index: int, column: str, label: str
) -> Record:
    """Set ``records[index][column] = label`` in place.

    Every other field and record is left alone.

    Raises:
        InvalidIndex: If index is outside ``0 <= index < len(records)``.
    """
    if index < 0 or index >= len(records):
        raise InvalidIndex(index, size=len(records))
    record = records[index]
    record[column] = label
    return record


def submit_annotation(
    index: int | str,
    label: str,
    config_path: str | Path | None = None,
) -> AnnotationResult:
    """Save ``label`` into the annotation field of record ``index``.

    Args:
        index: Zero-based record position, as an int or decimal string.
        label: The annotation text.
        config_path: Settings file to use instead of the default location.

    Returns:
        An AnnotationResult describing the saved change.

    Raises:
        ConfigNotFound, ConfigParseError: From the configuration resolver,
            which runs first.
        InvalidIndex: If index does not parse or is out of bounds for the
            store as it is on disk right now. The store is not written.
        StoreNotFound, StoreParseError: From reading the store.
        StoreWriteError: From writing the store.
        TypeError: If label is not a string.
    """
    if not isinstance(label, str):
        raise TypeError(f"label must be a string, got {type(label).__name__}")
    config = load_config(config_path)
    position = parse_index(index)
    store = JSONLStore(config.resolve_data_path())

    with _store_lock(store.path):
        records = store.read_all()
        record = apply_annotation(records, position, config.annotation_column, label)
        store.write_all(records)

    logger.info(
        "Saved annotation for record %d/%d in %s",
        position,
        len(records),
        store.path,
    )
    return AnnotationResult(
        index=position,
        column=config.annotation_column,
        label=label,
        record=dict(record),
        total=len(records),
    )


def annotation_progress(records: list[Record], column: str) -> tuple[int, int]:
    """Count records whose annotation field holds a non-empty value.

    Returns:
        A tuple of (annotated_count, total_count).
    """
    done = 0
    for record in records:
        value = record.get(column)
        if value is not None and str(value).strip():
            done += 1
    return done, len(records)
