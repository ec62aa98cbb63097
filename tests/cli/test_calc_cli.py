import json
import re
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from sitterpay.cli.main import app
from sitterpay.telemetry import read_jsonl

runner = CliRunner()

_ANSI_RE = re.compile(r"\x1B\[[0-9;?]*[ -/]*[@-~]")


def _invoke(args: list[str]):
    return runner.invoke(app, args, prog_name="sitterpay", env={"SITTERPAY_CONFIG": None})


def _plain(result) -> str:
    return _ANSI_RE.sub("", result.output)


def test_calc_json_output():
    result = _invoke(["calc", "18", "3", "--bed", "21", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["success"] is True
    assert payload["pay"] == 108
    assert payload["hours"] == {"pre_bedtime": 3, "bedtime_to_midnight": 3, "midnight_to_end": 3}
    assert payload["message"] == "3h@$12 +  3h@$8 + 3h@$16"
    assert payload["warnings"] == []


def test_calc_accepts_twelve_hour_clock():
    result = _invoke(["calc", "6pm", "3am", "--bed", "9 PM", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["pay"] == 108


def test_calc_table_output():
    result = _invoke(["calc", "17", "19", "--bed", "18"])
    assert result.exit_code == 0, result.output
    assert "Shift Pay Breakdown" in _plain(result)
    assert "Total: $20" in _plain(result)
    assert "1h@$12 +  1h@$8 + 0h@$16" in _plain(result)


def test_calc_table_output_past_midnight():
    result = _invoke(["calc", "18", "3", "--bed", "21"])
    assert result.exit_code == 0, result.output
    assert "Midnight → end" in _plain(result)
    assert "Total: $108" in _plain(result)
    assert "3h@$12 +  3h@$8 + 3h@$16" in _plain(result)


def test_calc_invalid_range_exits_nonzero():
    result = _invoke(["calc", "18", "17"])
    assert result.exit_code == 1
    assert "End time cannot be earler than start time." in _plain(result)


def test_calc_invalid_range_json():
    result = _invoke(["calc", "18", "17", "--json"])
    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["success"] is False
    assert payload["hours"] == {}


def test_calc_rejects_unparseable_hour():
    result = _invoke(["calc", "25", "3"])
    assert result.exit_code == 2


def test_calc_rate_override():
    result = _invoke(["calc", "18", "3", "--bed", "21", "--rate", "midnight=20", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["pay"] == 3 * 12 + 3 * 8 + 3 * 20


def test_calc_rate_override_invalid():
    result = _invoke(["calc", "18", "3", "--rate", "midnight"])
    assert result.exit_code == 2
    result = _invoke(["calc", "18", "3", "--rate", "weekend=3"])
    assert result.exit_code == 2


def test_calc_with_config_file(tmp_path: Path):
    config = tmp_path / "rates.yaml"
    config.write_text("pay_rate:\n  start_to_bedtime: 15\n", encoding="utf-8")
    result = _invoke(["calc", "17", "18", "--bed", "18", "--config", str(config), "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["pay"] == 15


def test_calc_warns_outside_window():
    result = _invoke(["calc", "15", "16", "--json"])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["warnings"]) == 2


def test_calc_telemetry_log(tmp_path: Path):
    log_path = tmp_path / "telemetry" / "runs.jsonl"
    result = _invoke(["calc", "18", "3", "--bed", "21", "--json", "--telemetry-log", str(log_path)])
    assert result.exit_code == 0, result.output
    records = read_jsonl(log_path)
    assert len(records) == 1
    assert records[0]["command"] == "calc"
    assert records[0]["status"] == "ok"
    assert records[0]["metrics"]["pay"] == 108
    assert records[0]["context"]["bed"] == 21


def test_calc_telemetry_log_invalid(tmp_path: Path):
    log_path = tmp_path / "runs.jsonl"
    result = _invoke(["calc", "18", "17", "--telemetry-log", str(log_path)])
    assert result.exit_code == 1
    assert read_jsonl(log_path)[0]["status"] == "invalid"


def test_batch_command_writes_output(tmp_path: Path):
    shifts = tmp_path / "shifts.csv"
    shifts.write_text("start_hour,end_hour,bed_hour\n18,3,21\n18,17,\n", encoding="utf-8")
    out = tmp_path / "out" / "priced.csv"
    log_path = tmp_path / "runs.jsonl"
    result = _invoke(
        ["batch", str(shifts), "--out", str(out), "--telemetry-log", str(log_path)]
    )
    assert result.exit_code == 0, result.output
    priced = pd.read_csv(out)
    assert priced["pay"].tolist() == [108.0, 0.0]
    assert priced["success"].tolist() == [True, False]
    assert "1 of 2 shift(s) priced" in _plain(result)
    assert read_jsonl(log_path)[0]["metrics"]["total_pay"] == 108.0


def test_batch_command_missing_columns(tmp_path: Path):
    shifts = tmp_path / "shifts.csv"
    shifts.write_text("start,end\n18,3\n", encoding="utf-8")
    result = _invoke(["batch", str(shifts)])
    assert result.exit_code == 2


def test_hours_command():
    result = _invoke(["hours"])
    assert result.exit_code == 0, result.output
    assert "None specified" in _plain(result)
    assert "5 PM" in _plain(result)
    assert "4 AM" in _plain(result)


def test_rates_command_with_override():
    result = _invoke(["rates", "--rate", "overnight=20.5"])
    assert result.exit_code == 0, result.output
    assert "midnight_to_end" in _plain(result)
    assert "20.5" in _plain(result)
