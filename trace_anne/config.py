"""
Configuration loader for the annotation tool.

Reads the YAML settings document that says where the dataset lives, which
two fields hold the texts being compared, how to label them on screen, and
which field receives the annotation.

Example config.yaml:

    dataPath: data/sample.jsonl
    columns:
      left: input
      right: output
    labels:
      left: Prompt
      right: Response
    annotationColumn: label

The document is re-read on every call; there is no cached instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from trace_anne.errors import ConfigNotFound, ConfigParseError, ConfigReadError
from trace_anne.logging_config import get_logger

CONFIG_FILENAME = "config.yaml"
CONFIG_ENV_VAR = "TRACE_ANNE_CONFIG"

logger = get_logger()


@dataclass(frozen=True)
class ColumnPair:
    """A left/right pair of strings (field names or display labels)."""

    left: str
    right: str


@dataclass(frozen=True)
class Config:
    """Resolved annotation settings."""

    data_path: str
    columns: ColumnPair
    labels: ColumnPair
    annotation_column: str
    source: Path | None = None

    def resolve_data_path(self, base: str | Path | None = None) -> Path:
        """Return data_path as an absolute path.

        Relative paths are resolved against ``base``, defaulting to the
        current working directory.
        """
        path = Path(self.data_path)
        if path.is_absolute():
            return path
        return Path(base or Path.cwd()) / path

    def to_dict(self) -> dict[str, Any]:
        """Return the settings in the document's own key layout."""
        return {
            "dataPath": self.data_path,
            "columns": {"left": self.columns.left, "right": self.columns.right},
            "labels": {"left": self.labels.left, "right": self.labels.right},
            "annotationColumn": self.annotation_column,
        }


def default_config_path() -> Path:
    """Return the well-known settings location.

    ``$TRACE_ANNE_CONFIG`` wins when set; otherwise ``config.yaml`` in the
    current working directory.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / CONFIG_FILENAME


def _require_string(
    data: dict[str, Any],
    key: str,
    path: Path,
    prefix: str = "",
    allow_blank: bool = False,
) -> str:
    name = f"{prefix}{key}"
    if key not in data:
        raise ConfigParseError(path, f"missing required key '{name}'")
    value = data[key]
    if not isinstance(value, str):
        raise ConfigParseError(path, f"'{name}' must be a string")
    if not allow_blank and not value.strip():
        raise ConfigParseError(path, f"'{name}' must be a non-empty string")
    return value


def _require_pair(data: dict[str, Any], key: str, path: Path) -> ColumnPair:
    if key not in data:
        raise ConfigParseError(path, f"missing required key '{key}'")
    section = data[key]
    if not isinstance(section, dict):
        raise ConfigParseError(path, f"'{key}' must be a mapping with 'left' and 'right'")
    return ColumnPair(
        left=_require_string(section, "left", path, prefix=f"{key}."),
        right=_require_string(section, "right", path, prefix=f"{key}."),
    )


def parse_config(data: Any, path: str | Path) -> Config:
    """Build a Config from an already-parsed settings document.

    Args:
        data: The result of parsing the YAML document.
        path: Where the document came from (used in error messages).

    Returns:
        A fully populated Config.

    Raises:
        ConfigParseError: If the document is not a mapping, a required key
            is missing or not a string, a value other than annotationColumn
            is blank, or the annotation column would overwrite one of the
            compared columns.
    """
    path = Path(path)
    if not isinstance(data, dict):
        raise ConfigParseError(path, "document must be a mapping")

    data_path = _require_string(data, "dataPath", path)
    columns = _require_pair(data, "columns", path)
    labels = _require_pair(data, "labels", path)
    # Any string names a valid field, the empty one included.
    annotation_column = _require_string(data, "annotationColumn", path, allow_blank=True)

    if annotation_column in (columns.left, columns.right):
        raise ConfigParseError(
            path,
            f"annotationColumn '{annotation_column}' would overwrite a compared column",
        )

    return Config(
        data_path=data_path,
        columns=columns,
        labels=labels,
        annotation_column=annotation_column,
        source=path,
    )


def load_config(path: str | Path | None = None) -> Config:
    """Load and validate the settings document.

    Args:
        path: Settings file to read. Defaults to default_config_path().

    Returns:
        A fully populated Config.

    Raises:
        ConfigNotFound: If the file does not exist.
        ConfigReadError: If the file exists but cannot be read.
        ConfigParseError: If it is not valid YAML or fails validation.
    """
    config_path = Path(path) if path is not None else default_config_path()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
        raise ConfigNotFound(config_path) from e
    except yaml.YAMLError as e:
        raise ConfigParseError(config_path, f"YAML error: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(config_path, "file is not valid UTF-8") from e
    except OSError as e:
        raise ConfigReadError(config_path, e.strerror or str(e)) from e

    config = parse_config(data, config_path)
    logger.debug(
        "Loaded config from %s (data=%s, annotation column=%s)",
        config_path,
        config.data_path,
        config.annotation_column,
    )
    return config
