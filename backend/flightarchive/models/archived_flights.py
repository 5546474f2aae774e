from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Text
from sqlalchemy.sql import func
from flightarchive.core.db import Base

class ArchivedFlight(Base):
    __tablename__ = "archived_flights"

    id = Column(Integer, primary_key=True, autoincrement=True)

    date = Column(Text, nullable=False, index=True)
    time = Column(Text, nullable=False)
    flight_no = Column(Text, nullable=False, index=True)
    airline = Column(Text, nullable=False)

    origin_dest = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
    gate_baggage = Column(Text, nullable=False, index=True)
    terminal = Column(Text, nullable=False)

    is_arrival = Column(Boolean, nullable=False)
    is_cargo = Column(Boolean, nullable=False)
    codeshares = Column(JSON, nullable=True)

    flight_key = Column(Text, nullable=False, unique=True)
    archived_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Airline(Base):
    __tablename__ = "airlines"

    icao_code = Column(Text, primary_key=True)
    iata_code = Column(Text, nullable=False)
    sample_flight = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
