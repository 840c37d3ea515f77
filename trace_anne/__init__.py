"""
Trace Anne: a small tool for annotating paired text records.

Usage:
    from trace_anne import load_page, submit_annotation

    page = load_page()               # reads ./config.yaml and the dataset
    submit_annotation("0", "good")   # writes the label into record 0
"""

from trace_anne.annotations import (
    AnnotationResult,
    PageData,
    annotation_progress,
    load_page,
    parse_index,
    submit_annotation,
)
from trace_anne.config import ColumnPair, Config, load_config
from trace_anne.errors import (
    ConfigError,
    ConfigNotFound,
    ConfigParseError,
    ConfigReadError,
    InvalidIndex,
    StoreError,
    StoreNotFound,
    StoreParseError,
    StoreReadError,
    StoreWriteError,
    TraceAnneError,
    UpdateError,
)
from trace_anne.store import read_store, write_store

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "load_page",
    "submit_annotation",
    "parse_index",
    "annotation_progress",
    "PageData",
    "AnnotationResult",
    # Configuration
    "load_config",
    "Config",
    "ColumnPair",
    # Store
    "read_store",
    "write_store",
    # Errors
    "TraceAnneError",
    "ConfigError",
    "ConfigNotFound",
    "ConfigParseError",
    "ConfigReadError",
    "StoreError",
    "StoreNotFound",
    "StoreParseError",
    "StoreReadError",
    "StoreWriteError",
    "UpdateError",
    "InvalidIndex",
]
