from __future__ import annotations

import pytest

from laptracker.schemas import LapCount, RunnerRecord
from laptracker.views import (
    TOAST_DELETED,
    TOAST_ERROR,
    TOAST_FORBIDDEN,
    TOAST_NOT_FOUND,
    RunnerTable,
    client_config,
    delete_toast,
    toast_for_notice,
)


def _runner(number: int, laps: int = 0) -> RunnerRecord:
    return RunnerRecord(number=number, first_name="A", last_name="B", count=LapCount(laps=laps))


@pytest.mark.parametrize(
    "status, toast",
    [(200, TOAST_DELETED), (403, TOAST_FORBIDDEN), (404, TOAST_NOT_FOUND), (500, TOAST_ERROR), (401, TOAST_ERROR), (0, TOAST_ERROR)],
)
def test_delete_toast_per_status(status: int, toast) -> None:
    assert delete_toast(status) is toast


def test_empty_only_at_zero_rows() -> None:
    assert RunnerTable().is_empty
    assert not RunnerTable([_runner(1)]).is_empty


def test_to_json_uses_wire_names() -> None:
    row = RunnerTable([_runner(1), _runner(2, laps=5)]).to_json()[1]
    assert row["firstName"] == "A"
    assert row["_count"] == {"laps": 5}


def test_notices_and_client_config() -> None:
    assert toast_for_notice("deleted") is TOAST_DELETED
    assert toast_for_notice("nope") is None
    assert toast_for_notice(None) is None

    cfg = client_config()
    assert cfg["deleteToasts"]["200"] == {"message": "Läufer erfolgreich gelöscht", "appearance": "success"}
    assert cfg["deleteToasts"]["404"]["message"] == "Läufer nicht gefunden"
    assert cfg["errorToast"]["appearance"] == "error"
    assert cfg["emptyMessage"] == "Keine Läufer vorhanden"
