"""Tests for core.execution_history.ExecutionHistoryStore."""

import json

from core.execution_history import ExecutionHistoryStore


def test_load_without_history_file(tmp_path):
    history = ExecutionHistoryStore(str(tmp_path)).load()
    assert history.last_successful is None
    assert history.watermark == 0


def test_record_then_load(tmp_path):
    store = ExecutionHistoryStore(str(tmp_path))
    path = store.record_success(1718000000000)

    with open(path) as f:
        saved = json.load(f)
    assert saved["last_successful"] == {"started_on": 1718000000000}
    assert "updated_at" in saved

    assert store.load().watermark == 1718000000000


def test_record_creates_output_dir(tmp_path):
    store = ExecutionHistoryStore(str(tmp_path / "nested" / "output"))
    store.record_success(1)
    assert (tmp_path / "nested" / "output" / "execution_history.json").exists()


def test_corrupt_history_means_full_sync(tmp_path, capsys):
    (tmp_path / "execution_history.json").write_text("{not json")
    assert ExecutionHistoryStore(str(tmp_path)).load().watermark == 0
    assert "Warning" in capsys.readouterr().out


def test_non_integer_started_on_ignored(tmp_path):
    (tmp_path / "execution_history.json").write_text(json.dumps({"last_successful": {"started_on": "yesterday"}}))
    assert ExecutionHistoryStore(str(tmp_path)).load().last_successful is None


def test_company_snapshot_round_trip(tmp_path):
    store = ExecutionHistoryStore(str(tmp_path))
    store.record_success(1718000000000, [
        {"id": "5001", "name": "Analytical Engines Ltd", "owner_id": "101"},
        {"id": "5002", "name": "Compiler Corp", "owner_id": "102"},
    ])

    history = store.load()

    assert sorted(history.companies) == ["5001", "5002"]
    assert history.companies["5001"]["owner_id"] == "101"


def test_watermark_without_company_snapshot_means_full_sync(tmp_path, capsys):
    (tmp_path / "execution_history.json").write_text(
        json.dumps({"last_successful": {"started_on": 1718000000000}})
    )

    history = ExecutionHistoryStore(str(tmp_path)).load()

    assert history.watermark == 0
    assert history.companies == {}
    assert "no company snapshot" in capsys.readouterr().out
