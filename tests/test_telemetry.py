from pathlib import Path

import pytest

from sitterpay.telemetry import RunTelemetryLogger, append_jsonl, read_jsonl


def test_append_jsonl_creates_parent_dirs(tmp_path: Path):
    path = tmp_path / "nested" / "runs.jsonl"
    append_jsonl(path, {"a": 1})
    append_jsonl(path, {"b": 2})
    assert read_jsonl(path) == [{"a": 1}, {"b": 2}]


def test_read_jsonl_skips_malformed_lines(tmp_path: Path):
    path = tmp_path / "runs.jsonl"
    path.write_text('{"ok": true}\n\nnot-json\n[1, 2]\n', encoding="utf-8")
    assert read_jsonl(path) == [{"ok": True}]


def test_read_jsonl_missing_file(tmp_path: Path):
    assert read_jsonl(tmp_path / "missing.jsonl") == []


def test_run_logger_writes_single_record(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with RunTelemetryLogger(log_path=log_path, command="calc", config={"x": 1}) as run:
        run.finalize(metrics={"pay": 108.0})
    records = read_jsonl(log_path)
    assert len(records) == 1
    record = records[0]
    assert record["command"] == "calc"
    assert record["status"] == "ok"
    assert record["metrics"] == {"pay": 108.0}
    assert record["config"] == {"x": 1}
    assert record["run_id"] == run.run_id
    assert run.closed


def test_run_logger_records_errors(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with pytest.raises(RuntimeError):
        with RunTelemetryLogger(log_path=log_path, command="batch"):
            raise RuntimeError("boom")
    record = read_jsonl(log_path)[0]
    assert record["status"] == "error"
    assert "boom" in record["error"]


def test_run_logger_without_finalize_records_ok(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    with RunTelemetryLogger(log_path=log_path, command="hours"):
        pass
    assert read_jsonl(log_path)[0]["status"] == "ok"
