import json

import pytest


@pytest.fixture
def run_payload():
    return {
        "month": "2026-09",
        "schedule": {"start": "08:00", "end": "17:00", "graceMin": 5},
        "overtimeSchedule": {"type": "FIXED", "startTime": "08:00", "endTime": "17:00"},
        "policy": {"rounding": "none", "minBlockMin": 0, "mealTriggerMin": 0},
        "holidays": {"2026-09-02": "holiday"},
        "offices": {"OFF1": "Treasury"},
        "records": [
            {
                "bioUserId": "101",
                "name": "Ana Cruz",
                "officeHint": "OFF1",
                "punches": [
                    {"date": "2026-09-01", "times": ["07:58", "12:00", "13:00", "18:00"]},
                    {"date": "2026-09-02", "times": ["09:00", "12:00"]},
                    {"date": "2026-09-03", "times": []},
                ],
            }
        ],
    }


@pytest.fixture
def run_file(tmp_path, run_payload):
    path = tmp_path / "september.json"
    path.write_text(json.dumps(run_payload), encoding="utf-8")
    return path
