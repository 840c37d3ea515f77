"""
Exception types raised by the configuration, store and update layers.

Every error derives from TraceAnneError so front ends can catch the whole
family in one place. Each concrete class also subclasses the closest
built-in exception (FileNotFoundError, ValueError, OSError, IndexError),
so callers that only know the standard library still handle them sensibly.
"""

from __future__ import annotations

from pathlib import Path


class TraceAnneError(Exception):
    """Base class for all errors raised by trace_anne."""


# ============== Configuration ==============


class ConfigError(TraceAnneError):
    """The settings document could not be used."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class ConfigNotFound(ConfigError, FileNotFoundError):
    """The settings document does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "Config file not found")


class ConfigParseError(ConfigError, ValueError):
    """The settings document is not valid YAML or lacks a required field."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"Invalid config ({reason})")


class ConfigReadError(ConfigError, OSError):
    """The settings document exists but could not be read."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"Could not read config file ({reason})")


# ============== Record store ==============


class StoreError(TraceAnneError):
    """The record store could not be read or written."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"{message}: {self.path}")


class StoreNotFound(StoreError, FileNotFoundError):
    """The record store file does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "Data file not found")


class StoreParseError(StoreError, ValueError):
    """A non-blank line of the record store is not a JSON object.

    Attributes:
        line_number: 1-based physical line number of the offending line.
        reason: Short description of what was wrong with it.
    """

    def __init__(self, path: str | Path, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(path, f"Invalid record on line {line_number} ({reason})")


class StoreReadError(StoreError, OSError):
    """The record store file exists but could not be read."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"Could not read data file ({reason})")


class StoreWriteError(StoreError, OSError):
    """Writing the replacement content of the record store failed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"Could not write data file ({reason})")


# ============== Updates ==============


class UpdateError(TraceAnneError):
    """An annotation update was rejected."""


class InvalidIndex(UpdateError, IndexError):
    """The submitted row index does not parse or is out of bounds.

    Attributes:
        index: The raw value that was submitted.
        size: Number of records in the store at update time, or None when
            the index was rejected before the store was read.
    """

    def __init__(self, index: object, size: int | None = None) -> None:
        self.index = index
        self.size = size
        if size is None:
            message = f"Invalid record index: {index!r}"
        elif size == 0:
            message = f"Record index {index} out of range (store is empty)"
        else:
            message = f"Record index {index} out of range (0-{size - 1})"
        super().__init__(message)
