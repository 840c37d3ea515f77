"""Pytest configuration and shared fixtures for trace_anne tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml


def write_jsonl(path: Path, records: list[dict[str, Any]]) -> None:
    """Helper to write records to a JSONL file."""
    with open(path, 'w', encoding='utf-8') as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + '\n')


def read_jsonl(path: Path) -> list[dict[str, Any]]:
    """Helper to read records from a JSONL file."""
    records = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records


def make_config_data(**overrides: Any) -> dict[str, Any]:
    """Return a valid settings document, with top-level keys overridden."""
    data: dict[str, Any] = {
        "dataPath": "data/records.jsonl",
        "columns": {"left": "input", "right": "output"},
        "labels": {"left": "Prompt", "right": "Response"},
        "annotationColumn": "label",
    }
    data.update(overrides)
    return data


def write_config(path: Path, data: Any) -> Path:
    """Helper to write a settings document as YAML."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, sort_keys=False)
    return path


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Return three unannotated records."""
    return [
        {"input": "What is 2 + 2?", "output": "4", "label": ""},
        {"input": "Capital of Italy?", "output": "Rome", "label": ""},
        {"input": "Say hi in French", "output": "Salut ☺", "label": ""},
    ]


@pytest.fixture
def workspace(tmp_path, monkeypatch, sample_records) -> Path:
    """A working directory holding config.yaml and data/records.jsonl.

    The process working directory is switched to it for the test.
    """
    (tmp_path / "data").mkdir()
    write_jsonl(tmp_path / "data" / "records.jsonl", sample_records)
    write_config(tmp_path / "config.yaml", make_config_data())
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TRACE_ANNE_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def data_file(workspace) -> Path:
    """Path to the workspace's record store."""
    return workspace / "data" / "records.jsonl"
