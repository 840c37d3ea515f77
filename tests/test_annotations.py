"""Tests for the annotation update service and page-load entry point."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from trace_anne.annotations import (
    AnnotationResult,
    PageData,
    annotation_progress,
    apply_annotation,
    load_page,
    parse_index,
    submit_annotation,
)
from trace_anne.errors import (
    ConfigNotFound,
    ConfigParseError,
    InvalidIndex,
    StoreNotFound,
    StoreParseError,
    StoreReadError,
    StoreWriteError,
    TraceAnneError,
    UpdateError,
)
from trace_anne.store import jsonl_store

from conftest import make_config_data, read_jsonl, write_config, write_jsonl


class TestParseIndex:
    """Parsing the submitted index."""

    @pytest.mark.parametrize("raw, expected", [
        ("0", 0),
        ("7", 7),
        (" 12 ", 12),
        ("007", 7),
        ("-1", -1),
        (3, 3),
    ])
    def test_valid(self, raw, expected):
        assert parse_index(raw) == expected

    @pytest.mark.parametrize("raw", ["", "  ", "abc", "1.5", "1e3", "0x10", "12abc", "1_0", "+-1", None, 2.0, True])
    def test_invalid(self, raw):
        with pytest.raises(InvalidIndex) as exc_info:
            parse_index(raw)
        assert exc_info.value.index == raw
        assert exc_info.value.size is None


class TestLoadPage:
    """The page-load entry point."""

    def test_returns_config_and_records(self, workspace, sample_records):
        page = load_page()

        assert isinstance(page, PageData)
        assert page.config.annotation_column == "label"
        assert page.records == sample_records

    def test_explicit_config_path(self, tmp_path, sample_records):
        write_jsonl(tmp_path / "set.jsonl", sample_records[:1])
        data_path = str(tmp_path / "set.jsonl")
        config_path = write_config(tmp_path / "alt.yaml", make_config_data(dataPath=data_path))

        page = load_page(config_path)
        assert page.records == sample_records[:1]

    def test_missing_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TRACE_ANNE_CONFIG", raising=False)
        with pytest.raises(ConfigNotFound):
            load_page()

    def test_missing_store(self, workspace, data_file):
        data_file.unlink()
        with pytest.raises(StoreNotFound):
            load_page()

    def test_unreadable_store(self, workspace, data_file, monkeypatch):
        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_bytes", deny)
        with pytest.raises(TraceAnneError) as exc_info:
            load_page()
        assert isinstance(exc_info.value, StoreReadError)
        assert exc_info.value.path == data_file

    def test_reads_fresh_each_time(self, workspace, data_file):
        assert len(load_page().records) == 3
        write_jsonl(data_file, [{"input": "only", "output": "one"}])
        assert len(load_page().records) == 1


class TestSubmitAnnotation:
    """The read-modify-write cycle."""

    def test_single_field_mutation(self, workspace, data_file):
        """Only the addressed record's annotation field changes."""
        data_file.write_text(
            '{"input":"x","label":""}\n{"input":"y","label":""}\n', encoding="utf-8"
        )

        result = submit_annotation(1, "good")

        assert result.success
        assert data_file.read_text(encoding="utf-8") == (
            '{"input":"x","label":""}\n{"input":"y","label":"good"}\n'
        )

    def test_string_index(self, workspace, data_file, sample_records):
        submit_annotation("2", "correct")

        records = read_jsonl(data_file)
        assert records[2]["label"] == "correct"
        assert records[:2] == sample_records[:2]

    def test_result(self, workspace):
        result = submit_annotation("0", "wrong")

        assert isinstance(result, AnnotationResult)
        assert result.index == 0
        assert result.column == "label"
        assert result.label == "wrong"
        assert result.total == 3
        assert result.record["label"] == "wrong"
        assert result.record["input"] == "What is 2 + 2?"

    def test_adds_missing_annotation_field(self, workspace, data_file):
        write_jsonl(data_file, [{"input": "a", "output": "b"}])

        submit_annotation(0, "ok")
        assert read_jsonl(data_file) == [{"input": "a", "output": "b", "label": "ok"}]

    def test_other_fields_untouched(self, workspace, data_file):
        write_jsonl(data_file, [{"input": "a", "output": "b", "meta": {"k": [1, 2]}, "label": "old"}])

        submit_annotation(0, "new")
        assert read_jsonl(data_file) == [
            {"input": "a", "output": "b", "meta": {"k": [1, 2]}, "label": "new"}
        ]

    def test_empty_label_clears(self, workspace, data_file):
        submit_annotation(0, "x")
        submit_annotation(0, "")
        assert read_jsonl(data_file)[0]["label"] == ""

    def test_blank_lines_do_not_shift_index(self, workspace, data_file):
        data_file.write_text(
            '{"input":"a","label":""}\n\n   \n{"input":"b","label":""}\n', encoding="utf-8"
        )

        submit_annotation(1, "second")
        assert read_jsonl(data_file) == [
            {"input": "a", "label": ""},
            {"input": "b", "label": "second"},
        ]

    def test_idempotent(self, workspace, data_file):
        submit_annotation(1, "good")
        once = data_file.read_bytes()
        submit_annotation(1, "good")
        assert data_file.read_bytes() == once

    def test_blank_annotation_column(self, workspace, data_file):
        write_config(workspace / "config.yaml", make_config_data(annotationColumn=""))

        submit_annotation(0, "pass")
        assert read_jsonl(data_file)[0][""] == "pass"

    def test_uses_configured_annotation_column(self, workspace, data_file):
        write_config(workspace / "config.yaml", make_config_data(annotationColumn="verdict"))

        submit_annotation(0, "pass")
        record = read_jsonl(data_file)[0]
        assert record["verdict"] == "pass"
        assert record["label"] == ""

    def test_explicit_config_path(self, tmp_path):
        data_path = tmp_path / "elsewhere.jsonl"
        write_jsonl(data_path, [{"input": "a", "output": "b", "label": ""}])
        config_path = write_config(
            tmp_path / "alt.yaml", make_config_data(dataPath=str(data_path))
        )

        submit_annotation(0, "yes", config_path=config_path)
        assert read_jsonl(data_path)[0]["label"] == "yes"

    def test_label_must_be_string(self, workspace, data_file):
        before = data_file.read_bytes()
        with pytest.raises(TypeError):
            submit_annotation(0, 5)
        assert data_file.read_bytes() == before


class TestSubmitAnnotationBounds:
    """Out-of-range and unparseable indices leave the store unmodified."""

    @pytest.mark.parametrize("index", [3, -1, "3", "-1", 100])
    def test_out_of_bounds(self, workspace, data_file, index):
        before = data_file.read_bytes()

        with pytest.raises(InvalidIndex) as exc_info:
            submit_annotation(index, "anything")

        assert exc_info.value.size == 3
        assert data_file.read_bytes() == before

    @pytest.mark.parametrize("index", ["", "one", "1.0"])
    def test_unparseable(self, workspace, data_file, index):
        before = data_file.read_bytes()
        with pytest.raises(InvalidIndex):
            submit_annotation(index, "anything")
        assert data_file.read_bytes() == before

    def test_stale_index_after_store_shrinks(self, workspace, data_file):
        """Bounds are checked against the store as read at update time."""
        page = load_page()
        last = len(page.records) - 1
        write_jsonl(data_file, page.records[:1])

        with pytest.raises(InvalidIndex):
            submit_annotation(last, "late")
        assert len(read_jsonl(data_file)) == 1

    def test_empty_store(self, workspace, data_file):
        data_file.write_text("", encoding="utf-8")
        with pytest.raises(InvalidIndex) as exc_info:
            submit_annotation(0, "x")
        assert "empty" in str(exc_info.value)
        assert data_file.read_text(encoding="utf-8") == ""

    def test_invalid_index_is_update_and_index_error(self, workspace):
        with pytest.raises(UpdateError):
            submit_annotation(99, "x")
        with pytest.raises(IndexError):
            submit_annotation(99, "x")


class TestSubmitAnnotationErrors:
    """Errors from the lower layers propagate unchanged."""

    def test_config_not_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TRACE_ANNE_CONFIG", raising=False)
        with pytest.raises(ConfigNotFound):
            submit_annotation(0, "x")

    def test_config_resolved_before_index(self, tmp_path, monkeypatch):
        """A bad index with no settings file reports the missing file."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TRACE_ANNE_CONFIG", raising=False)
        with pytest.raises(ConfigNotFound):
            submit_annotation("not-a-number", "x")

    def test_config_parse_error(self, workspace, data_file):
        (workspace / "config.yaml").write_text("dataPath: [\n", encoding="utf-8")
        before = data_file.read_bytes()

        with pytest.raises(ConfigParseError):
            submit_annotation(0, "x")
        assert data_file.read_bytes() == before

    def test_store_not_found(self, workspace, data_file):
        data_file.unlink()
        with pytest.raises(StoreNotFound):
            submit_annotation(0, "x")
        assert not data_file.exists()

    def test_store_parse_error(self, workspace, data_file):
        data_file.write_text('{"input": "a", "label": ""}\n{broken\n', encoding="utf-8")
        before = data_file.read_bytes()

        with pytest.raises(StoreParseError) as exc_info:
            submit_annotation(0, "x")
        assert exc_info.value.line_number == 2
        assert data_file.read_bytes() == before

    def test_store_write_error(self, workspace, data_file, monkeypatch):
        before = data_file.read_bytes()

        def fail_replace(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(jsonl_store.os, "replace", fail_replace)
        with pytest.raises(StoreWriteError):
            submit_annotation(0, "x")
        assert data_file.read_bytes() == before

    def test_store_read_error(self, workspace, data_file, monkeypatch):
        before = data_file.read_bytes()

        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_bytes", deny)
        with pytest.raises(StoreReadError):
            submit_annotation(0, "x")
        with open(data_file, "rb") as f:
            assert f.read() == before


class TestConcurrentSubmissions:
    """Updates from threads of one process are serialized."""

    def test_no_lost_updates(self, workspace, data_file):
        records = [{"input": str(i), "output": str(i), "label": ""} for i in range(20)]
        write_jsonl(data_file, records)
        errors: list[Exception] = []

        def annotate(i: int) -> None:
            try:
                submit_annotation(i, f"label-{i}")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=annotate, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert [r["label"] for r in read_jsonl(data_file)] == [f"label-{i}" for i in range(20)]


class TestApplyAnnotation:
    """The in-memory mutation step."""

    def test_mutates_in_place(self):
        records = [{"a": "1"}, {"a": "2"}]
        record = apply_annotation(records, 0, "label", "x")
        assert record is records[0]
        assert records == [{"a": "1", "label": "x"}, {"a": "2"}]

    @pytest.mark.parametrize("index", [-1, 2])
    def test_out_of_range(self, index):
        records = [{"a": "1"}, {"a": "2"}]
        with pytest.raises(InvalidIndex):
            apply_annotation(records, index, "label", "x")
        assert records == [{"a": "1"}, {"a": "2"}]


class TestAnnotationProgress:
    """Counting annotated records."""

    def test_counts_non_empty(self):
        records = [
            {"label": "good"},
            {"label": ""},
            {"label": "   "},
            {},
            {"label": None},
            {"label": "bad"},
        ]
        assert annotation_progress(records, "label") == (2, 6)

    def test_empty(self):
        assert annotation_progress([], "label") == (0, 0)
