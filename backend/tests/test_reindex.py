from __future__ import annotations

import json
from dataclasses import replace

import pytest

from flightarchive.jobs.archive.storage.shards import ShardStore
from flightarchive.jobs.archive.storage.snapshots import SnapshotStore
from flightarchive.jobs.reindex.reindex_shards import main, rebuild_indexes


def test_rebuild_from_snapshots_dedups_sorts_and_caps(cfg, make_record):
    snapshots = SnapshotStore(cfg.daily_dir)
    day1 = make_record(date="2025-01-14", time="13:45", status="Landed 13:40")
    day2_late = make_record(date="2025-01-15", time="20:00")
    day2 = make_record(date="2025-01-15", time="13:45")
    dep = make_record("CX 500", date="2025-01-15", time="09:00", is_arrival=False, gate="23")
    snapshots.write("2025-01-15", [day2_late, day2, dep])
    snapshots.write("2025-01-14", [day1])
    # re-archived copy of day1 with a newer status in a later snapshot
    snapshots.write("2025-01-16", [replace(day1, status="Landed 13:41")])

    result = rebuild_indexes(cfg)

    assert result.snapshots_read == 3
    assert result.flight_shards_written == 2
    assert result.gate_shards_written == 1
    flights = ShardStore(cfg.flights_index_dir)
    assert [(r.date, r.time) for r in flights.read("CX888")] == [
        ("2025-01-14", "13:45"),
        ("2025-01-15", "13:45"),
        ("2025-01-15", "20:00"),
    ]
    assert flights.read("CX888")[0].status == "Landed 13:41"
    assert ShardStore(cfg.gates_index_dir).read("23") == [dep]


def test_rebuild_keeps_only_latest_entries(cfg, make_record):
    cfg = replace(cfg, max_shard_entries=2)
    SnapshotStore(cfg.daily_dir).write("2025-01-15", [make_record(time=f"0{i}:00") for i in range(5)])

    rebuild_indexes(cfg)

    assert [r.time for r in ShardStore(cfg.flights_index_dir).read("CX888")] == ["03:00", "04:00"]


def test_unreadable_snapshot_is_skipped(cfg, make_record):
    SnapshotStore(cfg.daily_dir).write("2025-01-15", [make_record()])
    (cfg.daily_dir / "2025-01-16.json").write_text("{broken")

    result = rebuild_indexes(cfg)

    assert result.snapshots_read == 1
    assert result.snapshots_skipped == 1
    assert result.flight_shards_written == 1


@pytest.mark.parametrize(
    "content",
    ['[1, 2]', '{"flights": 5}', '{"flights": [{"flight": 5, "_raw": "ab"}]}'],
)
def test_malformed_snapshot_does_not_abort_rebuild(cfg, make_record, content):
    SnapshotStore(cfg.daily_dir).write("2025-01-15", [make_record()])
    (cfg.daily_dir / "2025-01-16.json").write_text(content)

    result = rebuild_indexes(cfg)

    assert result.flight_shards_written == 1
    assert result.snapshots_read + result.snapshots_skipped == 2


def test_clean_removes_stale_shards(cfg, make_record):
    ShardStore(cfg.flights_index_dir).upsert("ZZ999", make_record("ZZ 999"))
    SnapshotStore(cfg.daily_dir).write("2025-01-15", [make_record()])

    rebuild_indexes(cfg, clean=True)

    assert ShardStore(cfg.flights_index_dir).keys() == ["CX888"]


def test_cli_rebuilds_under_data_dir(tmp_path, make_record, capsys):
    SnapshotStore(tmp_path / "daily").write("2025-01-15", [make_record()])

    assert main(["--data-dir", str(tmp_path)]) == 0

    shard = json.loads((tmp_path / "indexes" / "flights" / "CX888.json").read_text())
    assert shard[0]["origin_dest"] == "NRT"
    assert "flight_shards_written=1" in capsys.readouterr().out
