import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from flightarchive.jobs.archive.storage.files import read_json, write_json_atomic
from flightarchive.jobs.archive.types import DailySnapshot, FlightRecord
from flightarchive.jobs.archive.utils.dates import validate_date

logger = logging.getLogger(__name__)


class SnapshotStore:
    """One daily/<YYYY-MM-DD>.json per date; writes replace, never merge."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, date: str) -> Path:
        return self.directory / f"{validate_date(date)}.json"

    def write(self, date: str, flights: Sequence[FlightRecord], *, generated_at: Optional[str] = None) -> DailySnapshot:
        snapshot = DailySnapshot(
            date=date,
            generated_at=generated_at or datetime.now(timezone.utc).isoformat(),
            flights=tuple(flights),
        )
        path = self.path_for(date)
        write_json_atomic(path, snapshot.to_dict())
        logger.info("Daily snapshot saved: %s (%s)", path, snapshot.counts)
        return snapshot

    def read_raw(self, date: str) -> Optional[dict]:
        path = self.path_for(date)
        if not path.exists():
            return None
        return read_json(path)

    def read(self, date: str) -> Optional[DailySnapshot]:
        data = self.read_raw(date)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot {date} is not a JSON object")
        flights = data.get("flights")
        return DailySnapshot(
            date=str(data.get("date") or date),
            generated_at=str(data.get("generatedAt") or ""),
            flights=tuple(FlightRecord.from_dict(x) for x in (flights if isinstance(flights, list) else []) if isinstance(x, dict)),
        )

    def dates(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
