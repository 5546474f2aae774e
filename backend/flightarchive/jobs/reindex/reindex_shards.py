"""
Rebuild flight and gate shards from the daily snapshots on disk.

Shards are derived data: a pure function of the snapshot history plus the
eviction policy. Use this after schema changes or when shard files are damaged.

Usage:
  flightarchive-reindex [--clean]
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from flightarchive.core.config import ArchiveConfig, load_config
from flightarchive.jobs.archive.sources.hkia.http import configure_logging_if_needed
from flightarchive.jobs.archive.storage.shards import ShardStore
from flightarchive.jobs.archive.storage.snapshots import SnapshotStore
from flightarchive.jobs.archive.types import FlightRecord
from flightarchive.jobs.archive.utils.flight_key import make_flight_key, sanitize_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReindexResult:
    snapshots_read: int
    snapshots_skipped: int
    flight_shards_written: int
    gate_shards_written: int


def _chronological(entries: dict[str, FlightRecord]) -> list[FlightRecord]:
    return sorted(entries.values(), key=lambda r: f"{r.date} {r.time}")


def rebuild_indexes(cfg: ArchiveConfig, *, clean: bool = False) -> ReindexResult:
    snapshots = SnapshotStore(cfg.daily_dir)
    flights = ShardStore(cfg.flights_index_dir, cfg.max_shard_entries)
    gates = ShardStore(cfg.gates_index_dir, cfg.max_shard_entries)

    if clean:
        logger.info("Cleaning existing indexes: flights=%d gates=%d", flights.clear(), gates.clear())

    flight_index: dict[str, dict[str, FlightRecord]] = {}
    gate_index: dict[str, dict[str, FlightRecord]] = {}
    read = 0
    skipped = 0

    dates = snapshots.dates()
    logger.info("Found %d daily snapshot files", len(dates))

    for d in dates:
        try:
            snapshot = snapshots.read(d)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Skipping unreadable snapshot %s: %r", d, e)
            skipped += 1
            continue
        if snapshot is None:
            continue
        read += 1

        for record in snapshot.flights:
            key = make_flight_key(record)
            for fn in record.flight_numbers:
                flight_no = sanitize_key(fn.number)
                if flight_no:
                    flight_index.setdefault(flight_no, {})[key] = record

            if not record.is_arrival and record.gate_or_baggage:
                gate_no = sanitize_key(record.gate_or_baggage)
                if gate_no:
                    gate_index.setdefault(gate_no, {})[key] = record

    logger.info("Writing %d flight shards and %d gate shards", len(flight_index), len(gate_index))
    for flight_no, entries in flight_index.items():
        flights.replace(flight_no, _chronological(entries))
    for gate_no, entries in gate_index.items():
        gates.replace(gate_no, _chronological(entries))

    return ReindexResult(
        snapshots_read=read,
        snapshots_skipped=skipped,
        flight_shards_written=len(flight_index),
        gate_shards_written=len(gate_index),
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Rebuild flight/gate shard indexes from daily snapshots")
    p.add_argument("--clean", action="store_true", help="Remove all existing index files before rebuilding")
    p.add_argument("--data-dir", help="Archive root (default: ARCHIVE_DATA_DIR or public/data)")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging_if_needed()

    result = rebuild_indexes(load_config(data_dir=args.data_dir), clean=args.clean)
    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
