import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete
from sqlalchemy.orm import Session

from flightarchive.jobs.archive.types import FlightRecord
from flightarchive.jobs.archive.utils.flight_key import make_flight_key
from flightarchive.models.archived_flights import Airline, ArchivedFlight

logger = logging.getLogger(__name__)

DELETE_CHUNK = 500


def airline_mappings(records: Sequence[FlightRecord]) -> dict[str, tuple[str, str]]:
    """
    ICAO -> (IATA, sample flight no) from operating carriers, e.g. CPA -> ("CX", "CX 888").
    Two-letter IATA prefixes win over longer ones.
    """
    out: dict[str, tuple[str, str]] = {}
    for r in records:
        if not r.flight_numbers:
            continue
        primary = r.flight_numbers[0]
        icao = primary.airline_code.strip()
        prefix, sep, _ = primary.number.partition(" ")
        if not (icao and sep and prefix):
            continue
        if icao not in out or len(prefix) <= 2:
            out[icao] = (prefix, primary.number)
    return out


def mirror_snapshot(db: Session, date: str, records: Sequence[FlightRecord]) -> dict:
    """
    Replace one date's rows in archived_flights with the given records and
    refresh the airlines mapping. Same flight key seen twice: the later record wins.
    """
    rows: dict[str, ArchivedFlight] = {}
    for r in records:
        if not r.flight_numbers:
            continue
        primary = r.flight_numbers[0]
        key = make_flight_key(r)
        rows[key] = ArchivedFlight(
            date=r.date,
            time=r.time,
            flight_no=primary.number,
            airline=primary.airline_code,
            origin_dest=r.counterpart_airport,
            status=r.status,
            gate_baggage=r.gate_or_baggage,
            terminal=r.terminal,
            is_arrival=r.is_arrival,
            is_cargo=r.is_cargo,
            codeshares=[f.number for f in r.flight_numbers[1:]] or None,
            flight_key=key,
        )

    deleted = db.execute(delete(ArchivedFlight).where(ArchivedFlight.date == date)).rowcount or 0

    # records grouped under a neighbouring date can collide with rows from another run
    keys = list(rows)
    for i in range(0, len(keys), DELETE_CHUNK):
        chunk = keys[i:i + DELETE_CHUNK]
        deleted += db.execute(delete(ArchivedFlight).where(ArchivedFlight.flight_key.in_(chunk))).rowcount or 0

    db.add_all(rows.values())

    now = datetime.now(timezone.utc)
    mappings = airline_mappings(records)
    for icao, (iata, sample) in mappings.items():
        airline = db.get(Airline, icao)
        if airline is None:
            db.add(Airline(icao_code=icao, iata_code=iata, sample_flight=sample, updated_at=now))
        else:
            airline.iata_code = iata
            airline.sample_flight = sample
            airline.updated_at = now

    db.commit()
    return {"deleted": deleted, "inserted": len(rows), "airlines": len(mappings)}
