"""
Capped, key-addressed shard files: indexes/flights/<NO>.json, indexes/gates/<GATE>.json.

Each shard is a JSON array of flight records in insertion order. An upsert
skips records whose flight key is already present, otherwise appends and
evicts from the front until the shard fits max_entries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flightarchive.jobs.archive.storage.files import read_json, write_json_atomic
from flightarchive.jobs.archive.types import FlightRecord, ShardUpsertResult
from flightarchive.jobs.archive.utils.flight_key import make_flight_key, sanitize_key

logger = logging.getLogger(__name__)


class ShardStore:
    def __init__(self, directory: Path, max_entries: int = 50):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.directory = Path(directory)
        self.max_entries = max_entries

    def path_for(self, shard_key: str) -> Path:
        key = sanitize_key(shard_key)
        if not key:
            raise ValueError(f"Shard key {shard_key!r} is empty after sanitizing")
        return self.directory / f"{key}.json"

    def _load_entries(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = read_json(path)
        except (OSError, ValueError) as e:
            logger.warning("Could not read shard %s, treating as empty: %r", path, e)
            return []
        if not isinstance(data, list):
            logger.warning("Shard %s is not a JSON array, treating as empty", path)
            return []
        return [x for x in data if isinstance(x, dict)]

    def read(self, shard_key: str) -> list[FlightRecord]:
        return [FlightRecord.from_dict(x) for x in self._load_entries(self.path_for(shard_key))]

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    def upsert(self, shard_key: str, record: FlightRecord) -> ShardUpsertResult:
        path = self.path_for(shard_key)
        key = path.stem
        entries = self._load_entries(path)

        new_key = make_flight_key(record)
        if any(make_flight_key(FlightRecord.from_dict(x)) == new_key for x in entries):
            return ShardUpsertResult(shard_key=key, added=False)

        entries.append(record.to_dict())
        evicted = max(0, len(entries) - self.max_entries)
        if evicted:
            entries = entries[evicted:]

        # OSError here is fatal for the run
        write_json_atomic(path, entries)
        return ShardUpsertResult(shard_key=key, added=True, evicted=evicted)

    def replace(self, shard_key: str, records: list[FlightRecord]) -> None:
        """Overwrite a shard wholesale, keeping the last max_entries records."""
        write_json_atomic(self.path_for(shard_key), [r.to_dict() for r in records[-self.max_entries:]], indent=2)

    def clear(self) -> int:
        removed = 0
        for name in self.keys():
            (self.directory / f"{name}.json").unlink()
            removed += 1
        return removed
