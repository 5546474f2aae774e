import logging
from typing import Any

from flightarchive.jobs.archive.types import FlightNumber, FlightRecord

logger = logging.getLogger(__name__)


def as_text(x: Any) -> str:
    if x is None:
        return ""
    if isinstance(x, list):
        return ",".join(str(v) for v in x if v is not None)
    return str(x)


def _flight_numbers(entry: dict) -> tuple[FlightNumber, ...]:
    raw = entry.get("flight")
    if not isinstance(raw, list):
        return ()
    out = []
    for f in raw:
        if not isinstance(f, dict):
            continue
        out.append(FlightNumber(number=as_text(f.get("no")), airline_code=as_text(f.get("airline"))))
    return tuple(out)


def entry_to_record(date: str, entry: dict, *, is_arrival: bool, is_cargo: bool) -> FlightRecord:
    # arrivals carry origin/baggage, departures destination/gate
    return FlightRecord(
        date=date,
        time=as_text(entry.get("time")),
        flight_numbers=_flight_numbers(entry),
        counterpart_airport=as_text(entry.get("origin") if is_arrival else entry.get("destination")),
        status=as_text(entry.get("status")),
        gate_or_baggage=as_text(entry.get("baggage") if is_arrival else entry.get("gate")),
        terminal=as_text(entry.get("terminal")),
        is_arrival=is_arrival,
        is_cargo=is_cargo,
        extra={
            "aisle": as_text(entry.get("aisle")),
            "hall": as_text(entry.get("hall")),
        },
    )


def normalize(payload: Any, is_arrival: bool, is_cargo: bool) -> list[FlightRecord]:
    """
    Flatten an upstream response ([{date, list: [...]}, ...]) into FlightRecords,
    preserving input order. Anything not shaped like that yields no records.
    """
    if not isinstance(payload, list):
        if payload is not None:
            logger.debug("Ignoring payload of type %s", type(payload).__name__)
        return []

    records: list[FlightRecord] = []
    for group in payload:
        if not isinstance(group, dict):
            continue
        date = as_text(group.get("date"))
        entries = group.get("list") or []
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            records.append(entry_to_record(date, entry, is_arrival=is_arrival, is_cargo=is_cargo))
    return records
