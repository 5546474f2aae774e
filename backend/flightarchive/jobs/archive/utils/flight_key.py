import hashlib
import re

from flightarchive.jobs.archive.types import FlightRecord

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def make_flight_key(record: FlightRecord) -> str:
    """Identity of one flight observation. Status, gate and terminal are not part of it."""
    numbers = ",".join(f.number for f in record.flight_numbers)
    raw = f"{record.date}|{record.time}|{numbers}|{str(record.is_arrival).lower()}"
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def sanitize_key(value: str) -> str:
    return _NON_ALNUM.sub("", str(value or ""))
