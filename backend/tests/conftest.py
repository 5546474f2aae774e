"""
Shared fixtures: a config rooted in tmp_path, a record factory, and a fake
upstream built on httpx.MockTransport.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from flightarchive.core.config import ArchiveConfig
from flightarchive.jobs.archive.types import FlightNumber, FlightRecord

BASE_URL = "https://upstream.test/flightinfo-rest/rest/flights/past"


@pytest.fixture
def cfg(tmp_path: Path) -> ArchiveConfig:
    return ArchiveConfig(
        base_url=BASE_URL,
        lang="en",
        user_agent="Mozilla/5.0 (test)",
        request_timeout=30.0,
        data_dir=tmp_path / "data",
        max_shard_entries=50,
        rolling_days=6,
        rolling_delay=2.0,
        timezone="Asia/Hong_Kong",
    )


@pytest.fixture
def make_record() -> Callable[..., FlightRecord]:
    def _make(
        number: str = "CX 888",
        *,
        date: str = "2025-01-15",
        time: str = "13:45",
        airline: str = "CPA",
        codeshares: tuple[str, ...] = (),
        counterpart: str = "NRT",
        status: str = "Est 13:50",
        gate: str = "",
        terminal: str = "T1",
        is_arrival: bool = True,
        is_cargo: bool = False,
    ) -> FlightRecord:
        numbers = (FlightNumber(number, airline),) + tuple(FlightNumber(c, "") for c in codeshares)
        return FlightRecord(
            date=date,
            time=time,
            flight_numbers=numbers,
            counterpart_airport=counterpart,
            status=status,
            gate_or_baggage=gate,
            terminal=terminal,
            is_arrival=is_arrival,
            is_cargo=is_cargo,
        )

    return _make


def flight_entry(no: str, time: str, *, arrival: bool, airport: str = "NRT", status: str = "", slot: str = "") -> dict:
    entry = {
        "time": time,
        "flight": [{"no": no, "airline": "CPA"}],
        "status": status,
        "terminal": "T1",
    }
    if arrival:
        entry.update({"origin": [airport], "baggage": slot, "hall": "A"})
    else:
        entry.update({"destination": [airport], "gate": slot, "aisle": "B"})
    return entry


@pytest.fixture
def upstream():
    """
    Fake upstream. Map (arrival, cargo) to a JSON payload, an int status code,
    or an exception instance; unmapped categories return [].
    """

    class Upstream:
        def __init__(self):
            self.responses: dict[tuple[bool, bool], object] = {}
            self.requests: list[httpx.Request] = []

        def set(self, arrival: bool, cargo: bool, response) -> None:
            self.responses[(arrival, cargo)] = response

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            key = (request.url.params["arrival"] == "true", request.url.params["cargo"] == "true")
            response = self.responses.get(key, [])
            if isinstance(response, Exception):
                raise response
            if isinstance(response, int):
                return httpx.Response(response, text="upstream unavailable")
            return httpx.Response(200, json=response)

        def client(self) -> httpx.Client:
            return httpx.Client(transport=httpx.MockTransport(self.handler))

    return Upstream()


@pytest.fixture
def entry():
    return flight_entry


@pytest.fixture
def no_sleep():
    calls: list[float] = []

    def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
