import csv
import json
import sys

import pytest

import cli
from attendance_core.outputs import LEDGER_HEADER
from attendance_core.records import RunInputError, load_run_input, run_input_from_dict
from attendance_core.run import run
from attendance_core.schedules import ScheduleError


def test_load_run_input(run_file):
    ri = load_run_input(run_file)
    assert ri.month == "2026-09"
    assert ri.schedule.grace_min == 5
    assert ri.policy.meal_trigger_min == 0
    assert ri.holiday_kind("2026-09-02") == "holiday"
    assert ri.holiday_kind("2026-09-01") == "none"
    assert ri.records[0].punches[0].times[-1] == "18:00"


def test_load_run_input_errors(tmp_path, run_payload):
    with pytest.raises(RunInputError):
        load_run_input(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(RunInputError):
        load_run_input(bad)
    with pytest.raises(RunInputError):
        run_input_from_dict({"records": "nope"})
    with pytest.raises(RunInputError):
        run_input_from_dict({"records": [{"name": "no id"}]})
    run_payload["overtimeSchedule"] = {"type": "ROTATING"}
    with pytest.raises(ScheduleError):
        run_input_from_dict(run_payload)


@pytest.mark.parametrize("mutate", [
    lambda p: p["records"][0]["punches"][0].update(times=5),
    lambda p: p["records"][0].update(punches=5),
    lambda p: p.update(schedule="start"),
])
def test_wrong_shapes_are_input_errors(run_payload, mutate):
    mutate(run_payload)
    with pytest.raises(RunInputError):
        run_input_from_dict(run_payload)


def test_unknown_holiday_kind_ignored(run_payload):
    run_payload["holidays"]["2026-09-03"] = "fiesta"
    ri = run_input_from_dict(run_payload)
    assert ri.holiday_kind("2026-09-03") == "none"


def test_run_totals_and_ledger(run_file, tmp_path):
    out_dir = tmp_path / "out"
    result = run(run_file, out_dir=out_dir)

    rep = result.reports[0]
    assert rep.office == "Treasury"
    day1, day2, day3 = rep.rows
    assert day1.overtime.ot_post == 60
    assert day1.presence_min == 542
    assert day2.day.tardy_min == 55
    assert day2.overtime.ot_holiday == 180
    assert day3.day.exception == "Missing punch"

    s = result.totals.summary
    assert (s.present, s.tardy_count, s.tardy_min, s.under_count, s.under_min, s.exceptions) == \
        (2, 1, 55, 1, 300, 1)
    assert result.totals.ot_total == 240
    assert "Employees: 1" in result.summary_text
    assert "Overtime: 4:00" in result.summary_text
    assert "EMPLOYEE: Ana Cruz (101)" in result.employee_output_text

    with open(result.ledger_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == LEDGER_HEADER
    assert len(rows) == 4
    assert rows[2][LEDGER_HEADER.index("holiday_kind")] == "holiday"


def test_run_policy_override(run_file):
    result = run(run_file, min_block_min=90)
    assert result.totals.ot_total == 180


def test_run_without_overtime_schedule(tmp_path, run_payload):
    del run_payload["overtimeSchedule"]
    path = tmp_path / "plain.json"
    path.write_text(json.dumps(run_payload), encoding="utf-8")
    result = run(path)
    assert result.totals.ot_total == 0
    assert result.totals.summary.tardy_min == 55


def test_run_workbook(run_file, tmp_path):
    openpyxl = pytest.importorskip("openpyxl")
    result = run(run_file, out_dir=tmp_path / "xl", xlsx=True)
    wb = openpyxl.load_workbook(result.workbook_path)
    assert wb.sheetnames == ["Summary", "Days"]
    assert wb["Days"].max_row == 4


def test_cli_prints_summary(run_file, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["attendance-core", str(run_file), "--rounding", "nearest30"])
    assert cli.main() == 0
    out = capsys.readouterr().out
    assert "Employee-days: 3" in out
    assert "--- EMPLOYEES ---" in out


def test_cli_missing_input(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["attendance-core", str(tmp_path / "none.json")])
    assert cli.main() == 1
    assert "input file not found" in capsys.readouterr().err


def test_cli_bad_input(tmp_path, monkeypatch, capsys):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"records": 3}), encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["attendance-core", str(path)])
    assert cli.main() == 1
    assert "Error:" in capsys.readouterr().err
