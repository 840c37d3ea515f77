"""
Record store module.

Reads and writes the line-oriented JSON file that holds the dataset being
annotated.

Usage:
    from trace_anne.store import read_store, write_store

    records = read_store("data/sample.jsonl")
    records[0]["label"] = "good"
    write_store("data/sample.jsonl", records)
"""

from trace_anne.store.base import Record, RecordStore
from trace_anne.store.jsonl_store import (
    JSONLStore,
    parse_records,
    read_store,
    serialize_records,
    write_store,
)

__all__ = [
    # Base class
    "Record",
    "RecordStore",
    # JSONL
    "JSONLStore",
    "parse_records",
    "serialize_records",
    "read_store",
    "write_store",
]
