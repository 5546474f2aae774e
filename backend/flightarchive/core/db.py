from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    return create_engine(database_url, future=True)


def make_session_factory(database_url: str) -> sessionmaker:
    """Build a session factory and make sure the mirror tables exist."""
    # models must be imported so their tables register on Base.metadata
    from flightarchive.models import archived_flights, job_runs  # noqa: F401

    engine = make_engine(database_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)
