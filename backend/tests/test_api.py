"""Tests for the read-only archive API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from flightarchive.core.deps import get_config
from flightarchive.jobs.archive.storage.shards import ShardStore
from flightarchive.jobs.archive.storage.snapshots import SnapshotStore
from flightarchive.main import app


@pytest.fixture
def client(cfg):
    app.dependency_overrides[get_config] = lambda: cfg
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def archived(cfg, make_record):
    arrival = make_record()
    departure = make_record("CX 500", time="09:00", is_arrival=False, gate="23", counterpart="HND")
    SnapshotStore(cfg.daily_dir).write("2025-01-15", [arrival, departure], generated_at="2025-01-16T00:00:00+00:00")
    ShardStore(cfg.flights_index_dir).upsert("CX888", arrival)
    ShardStore(cfg.gates_index_dir).upsert("23", departure)


class TestArchiveAPI:
    def test_health(self, client):
        resp = client.get("/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_list_dates(self, client, archived):
        resp = client.get("/v1/daily")
        assert resp.status_code == 200
        assert resp.json() == ["2025-01-15"]

    def test_daily_snapshot(self, client, archived):
        resp = client.get("/v1/daily/2025-01-15")
        assert resp.status_code == 200
        data = resp.json()
        assert data["totalFlights"] == 2
        assert data["arrivals"] == 1
        assert data["departures"] == 1
        assert data["generatedAt"] == "2025-01-16T00:00:00+00:00"
        assert data["flights"][0]["origin_dest"] == "NRT"
        assert data["flights"][0]["_raw"] == {}

    def test_daily_missing_is_404(self, client):
        assert client.get("/v1/daily/2025-01-15").status_code == 404

    def test_daily_bad_date_is_400(self, client):
        assert client.get("/v1/daily/15-01-2025").status_code == 400

    def test_flight_shard_uses_sanitized_key(self, client, archived):
        resp = client.get("/v1/flights/CX 888")
        assert resp.status_code == 200
        data = resp.json()
        assert data["key"] == "CX888"
        assert data["kind"] == "flight"
        assert [e["status"] for e in data["entries"]] == ["Est 13:50"]

    def test_gate_shard(self, client, archived):
        resp = client.get("/v1/gates/23")
        assert resp.status_code == 200
        assert [e["flight"][0]["no"] for e in resp.json()["entries"]] == ["CX 500"]

    def test_unknown_shard_is_404(self, client, archived):
        assert client.get("/v1/flights/ZZ999").status_code == 404
        assert client.get("/v1/gates/99").status_code == 404

    def test_corrupt_flight_shard_reads_as_empty(self, client, cfg, archived):
        (cfg.flights_index_dir / "CX888.json").write_text("[{oops")
        resp = client.get("/v1/flights/CX888")
        assert resp.status_code == 200
        assert resp.json()["entries"] == []
