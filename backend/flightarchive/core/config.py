import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_BASE_URL = "https://www.hongkongairport.com/flightinfo-rest/rest/flights/past"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


@dataclass(frozen=True)
class ArchiveConfig:
    base_url: str
    lang: str
    user_agent: str
    request_timeout: float

    data_dir: Path
    max_shard_entries: int

    rolling_days: int
    rolling_delay: float

    timezone: str
    database_url: Optional[str] = None

    @property
    def daily_dir(self) -> Path:
        return self.data_dir / "daily"

    @property
    def flights_index_dir(self) -> Path:
        return self.data_dir / "indexes" / "flights"

    @property
    def gates_index_dir(self) -> Path:
        return self.data_dir / "indexes" / "gates"


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from None


def load_config(data_dir: Optional[Path] = None) -> ArchiveConfig:
    max_entries = _env_number("ARCHIVE_MAX_SHARD_ENTRIES", "50", int)
    if max_entries < 1:
        raise RuntimeError("ARCHIVE_MAX_SHARD_ENTRIES must be at least 1")

    return ArchiveConfig(
        base_url=os.getenv("ARCHIVE_API_BASE_URL", DEFAULT_BASE_URL),
        lang=os.getenv("ARCHIVE_API_LANG", "en"),
        user_agent=os.getenv("ARCHIVE_USER_AGENT", DEFAULT_USER_AGENT),
        request_timeout=_env_number("ARCHIVE_REQUEST_TIMEOUT_SECONDS", "30", float),
        data_dir=Path(data_dir or os.getenv("ARCHIVE_DATA_DIR", "public/data")),
        max_shard_entries=max_entries,
        rolling_days=_env_number("ARCHIVE_ROLLING_DAYS", "6", int),
        rolling_delay=_env_number("ARCHIVE_ROLLING_DELAY_SECONDS", "2", float),
        timezone=os.getenv("ARCHIVE_TIMEZONE", "Asia/Hong_Kong"),
        database_url=os.getenv("ARCHIVE_DATABASE_URL") or None,
    )
