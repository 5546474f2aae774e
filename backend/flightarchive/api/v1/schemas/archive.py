from pydantic import BaseModel, ConfigDict, Field
from typing import Any

class FlightNumberOut(BaseModel):
    no: str
    airline: str = ""

class FlightRecordOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    time: str = ""
    flight: list[FlightNumberOut] = Field(default_factory=list)
    origin_dest: str = ""
    status: str = ""
    gate_baggage: str = ""
    terminal: str = ""
    isArrival: bool
    isCargo: bool
    raw: dict[str, Any] = Field(default_factory=dict, alias="_raw")

class DailySnapshotOut(BaseModel):
    date: str
    generatedAt: str = Field(..., description="ISO timestamp of the archive run")

    totalFlights: int
    arrivals: int
    departures: int
    cargo: int
    passenger: int

    flights: list[FlightRecordOut]

class ShardOut(BaseModel):
    key: str
    kind: str
    entries: list[FlightRecordOut]
