from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Category:
    is_arrival: bool
    is_cargo: bool

    @property
    def label(self) -> str:
        direction = "Arrival" if self.is_arrival else "Departure"
        kind = "Cargo" if self.is_cargo else "Passenger"
        return f"{direction}-{kind}"


# fetch order matters: shard upserts follow category order, then list order
CATEGORIES = (
    Category(is_arrival=True, is_cargo=False),
    Category(is_arrival=True, is_cargo=True),
    Category(is_arrival=False, is_cargo=False),
    Category(is_arrival=False, is_cargo=True),
)


@dataclass(frozen=True)
class FlightNumber:
    number: str          # "CX 888"
    airline_code: str    # ICAO, "CPA"


@dataclass(frozen=True)
class FlightRecord:
    date: str                                  # "YYYY-MM-DD"
    time: str                                  # "HH:MM" or ""
    flight_numbers: tuple[FlightNumber, ...]   # first entry is the operating carrier
    counterpart_airport: str                   # origin (arrival) / destination (departure)
    status: str
    gate_or_baggage: str                       # baggage belt (arrival) / gate (departure)
    terminal: str
    is_arrival: bool
    is_cargo: bool
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        """On-disk shape shared by snapshots and shards."""
        return {
            "date": self.date,
            "time": self.time,
            "flight": [{"no": f.number, "airline": f.airline_code} for f in self.flight_numbers],
            "origin_dest": self.counterpart_airport,
            "status": self.status,
            "gate_baggage": self.gate_or_baggage,
            "terminal": self.terminal,
            "isArrival": self.is_arrival,
            "isCargo": self.is_cargo,
            "_raw": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlightRecord":
        raw_flights = data.get("flight")
        raw_extra = data.get("_raw")
        flights = tuple(
            FlightNumber(number=str(f.get("no") or ""), airline_code=str(f.get("airline") or ""))
            for f in (raw_flights if isinstance(raw_flights, list) else [])
            if isinstance(f, dict)
        )
        return cls(
            date=str(data.get("date") or ""),
            time=str(data.get("time") or ""),
            flight_numbers=flights,
            counterpart_airport=str(data.get("origin_dest") or ""),
            status=str(data.get("status") or ""),
            gate_or_baggage=str(data.get("gate_baggage") or ""),
            terminal=str(data.get("terminal") or ""),
            is_arrival=bool(data.get("isArrival")),
            is_cargo=bool(data.get("isCargo")),
            extra=dict(raw_extra) if isinstance(raw_extra, dict) else {},
        )


@dataclass(frozen=True)
class FetchFailure:
    category: Category
    error: str


@dataclass(frozen=True)
class ShardUpsertResult:
    shard_key: str
    added: bool
    evicted: int = 0


@dataclass(frozen=True)
class DailySnapshot:
    date: str
    generated_at: str
    flights: tuple[FlightRecord, ...]

    @property
    def counts(self) -> dict[str, int]:
        arrivals = sum(1 for f in self.flights if f.is_arrival)
        cargo = sum(1 for f in self.flights if f.is_cargo)
        return {
            "totalFlights": len(self.flights),
            "arrivals": arrivals,
            "departures": len(self.flights) - arrivals,
            "cargo": cargo,
            "passenger": len(self.flights) - cargo,
        }

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "generatedAt": self.generated_at,
            **self.counts,
            "flights": [f.to_dict() for f in self.flights],
        }


@dataclass
class CategoryOutcome:
    label: str
    flights: int = 0
    error: Optional[str] = None


@dataclass
class ArchiveResult:
    date: str
    categories: list[CategoryOutcome] = field(default_factory=list)
    flights_total: int = 0
    snapshot_written: bool = False
    flight_shards_updated: int = 0
    gate_shards_updated: int = 0
    mirror: Optional[dict] = None

    @property
    def failed_categories(self) -> int:
        return sum(1 for c in self.categories if c.error is not None)

    @property
    def ok(self) -> bool:
        # every category failing is a failed run; zero flights otherwise is a soft no-op
        return not self.categories or self.failed_categories < len(self.categories)

    @property
    def skipped_empty(self) -> bool:
        return self.flights_total == 0

    def as_dict(self) -> dict:
        return {
            "date": self.date,
            "ok": self.ok,
            "categories": {c.label: (c.error or c.flights) for c in self.categories},
            "flights_total": self.flights_total,
            "failed_categories": self.failed_categories,
            "snapshot_written": self.snapshot_written,
            "flight_shards_updated": self.flight_shards_updated,
            "gate_shards_updated": self.gate_shards_updated,
            **({"mirror": self.mirror} if self.mirror is not None else {}),
        }


@dataclass
class RollingResult:
    dates: list[str] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def as_dict(self) -> dict:
        return {
            "dates": self.dates,
            "success": len(self.succeeded),
            "failed": len(self.failed),
            "failures": self.failed,
        }
