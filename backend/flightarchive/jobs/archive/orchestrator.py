import logging
import time
from typing import Callable, Optional, Sequence

import httpx
from sqlalchemy.orm import Session

from flightarchive.core.config import ArchiveConfig
from flightarchive.jobs.archive.sources.hkia.http import fetch_category, make_client
from flightarchive.jobs.archive.sources.hkia.normalize import normalize
from flightarchive.jobs.archive.storage.shards import ShardStore
from flightarchive.jobs.archive.storage.snapshots import SnapshotStore
from flightarchive.jobs.archive.types import (
    CATEGORIES,
    ArchiveResult,
    CategoryOutcome,
    FetchFailure,
    FlightRecord,
)
from flightarchive.jobs.archive.utils.dates import validate_date
from flightarchive.jobs.archive.utils.flight_key import sanitize_key
from flightarchive.jobs.mirror.loader import mirror_snapshot

logger = logging.getLogger(__name__)

# courtesy delay between category requests to the upstream; not configurable
CATEGORY_DELAY_SECONDS = 1.0


def update_shard_indexes(
    records: Sequence[FlightRecord],
    flights: ShardStore,
    gates: ShardStore,
) -> tuple[int, int]:
    """
    Upsert every record into its flight-number shards and, for departures with
    a gate, its gate shard. Returns (flight shards updated, gate shards updated).
    """
    flight_updated = 0
    gate_updated = 0

    for record in records:
        for fn in record.flight_numbers:
            key = sanitize_key(fn.number)
            if key and flights.upsert(key, record).added:
                flight_updated += 1

        if not record.is_arrival and record.gate_or_baggage:
            key = sanitize_key(record.gate_or_baggage)
            if key and gates.upsert(key, record).added:
                gate_updated += 1

    return flight_updated, gate_updated


def archive_date(
    cfg: ArchiveConfig,
    date: str,
    *,
    client: Optional[httpx.Client] = None,
    db: Optional[Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ArchiveResult:
    """
    Fetch all four categories for one date, then write the daily snapshot and
    update the flight/gate shards. Failed categories contribute no records.
    Storage write errors propagate.
    """
    date = validate_date(date)
    result = ArchiveResult(date=date)

    logger.info("Archive start date=%s data_dir=%s", date, cfg.data_dir)

    records: list[FlightRecord] = []
    own_client = client is None
    http = client or make_client(cfg)
    try:
        for idx, category in enumerate(CATEGORIES):
            if idx > 0:
                sleep(CATEGORY_DELAY_SECONDS)

            logger.info("Fetching %s for %s ...", category.label, date)
            payload = fetch_category(cfg, http, date, category)
            if isinstance(payload, FetchFailure):
                result.categories.append(CategoryOutcome(label=category.label, error=payload.error))
                logger.warning("No data retrieved for %s: %s", category.label, payload.error)
                continue

            found = normalize(payload, category.is_arrival, category.is_cargo)
            result.categories.append(CategoryOutcome(label=category.label, flights=len(found)))
            logger.info("  %s: found %d flights", category.label, len(found))
            records.extend(found)
    finally:
        if own_client:
            http.close()

    result.flights_total = len(records)
    logger.info("Total flights collected for %s: %d", date, len(records))

    if not records:
        # keep any earlier snapshot rather than clobbering it with an empty one
        logger.info("No flights found for %s; nothing written", date)
        return result

    SnapshotStore(cfg.daily_dir).write(date, records)
    result.snapshot_written = True

    result.flight_shards_updated, result.gate_shards_updated = update_shard_indexes(
        records,
        ShardStore(cfg.flights_index_dir, cfg.max_shard_entries),
        ShardStore(cfg.gates_index_dir, cfg.max_shard_entries),
    )
    logger.info(
        "Shards updated for %s: flights=%d gates=%d",
        date,
        result.flight_shards_updated,
        result.gate_shards_updated,
    )

    if db is not None:
        result.mirror = mirror_snapshot(db, date, records)
        logger.info("SQL mirror for %s: %s", date, result.mirror)

    logger.info("Archive done date=%s result=%s", date, result.as_dict())
    return result
