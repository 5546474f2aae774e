from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from flightarchive.api.v1.schemas.archive import DailySnapshotOut, ShardOut
from flightarchive.core.config import ArchiveConfig
from flightarchive.core.deps import get_config
from flightarchive.jobs.archive.storage.shards import ShardStore
from flightarchive.jobs.archive.storage.snapshots import SnapshotStore
from flightarchive.jobs.archive.utils.dates import InvalidDateError, validate_date
from flightarchive.jobs.archive.utils.flight_key import sanitize_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["archive"])


@router.get("/daily", response_model=list[str])
def list_daily(cfg: ArchiveConfig = Depends(get_config)):
    return SnapshotStore(cfg.daily_dir).dates()


@router.get("/daily/{date_str}", response_model=DailySnapshotOut)
def get_daily(date_str: str, cfg: ArchiveConfig = Depends(get_config)):
    try:
        d = validate_date(date_str)
    except InvalidDateError:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD")

    try:
        data = SnapshotStore(cfg.daily_dir).read_raw(d)
    except (OSError, ValueError) as e:
        logger.error("Unreadable snapshot %s: %r", d, e)
        raise HTTPException(status_code=500, detail=f"Snapshot for {d} is unreadable")

    if data is None:
        raise HTTPException(status_code=404, detail=f"No snapshot for {d}")
    return data


def _shard(store: ShardStore, raw_key: str, kind: str) -> dict:
    key = sanitize_key(raw_key)
    if not key:
        raise HTTPException(status_code=400, detail=f"Invalid {kind} key")
    if not store.path_for(key).exists():
        raise HTTPException(status_code=404, detail=f"No {kind} shard for {key}")
    return {"key": key, "kind": kind, "entries": [r.to_dict() for r in store.read(key)]}


@router.get("/flights/{flight_no}", response_model=ShardOut)
def get_flight_shard(flight_no: str, cfg: ArchiveConfig = Depends(get_config)):
    return _shard(ShardStore(cfg.flights_index_dir, cfg.max_shard_entries), flight_no, "flight")


@router.get("/gates/{gate}", response_model=ShardOut)
def get_gate_shard(gate: str, cfg: ArchiveConfig = Depends(get_config)):
    return _shard(ShardStore(cfg.gates_index_dir, cfg.max_shard_entries), gate, "gate")
