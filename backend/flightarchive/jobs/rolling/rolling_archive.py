"""
Rolling re-archive: re-run the single-date archiver for D-1 .. D-N.

Flights scheduled on day D can reach their final status ("Dep"/"Landed")
several days later. Re-archiving the trailing window refreshes each daily
snapshot; shard upserts are keyed without status, so entries already in a
shard keep the status they were first archived with.

Usage:
  flightarchive-rolling [days]
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import date, datetime
from typing import Callable, Optional

import httpx

from flightarchive.core.config import ArchiveConfig, load_config
from flightarchive.jobs.archive.orchestrator import archive_date
from flightarchive.jobs.archive.sources.hkia.http import configure_logging_if_needed, make_client
from flightarchive.jobs.archive.types import RollingResult
from flightarchive.jobs.archive.utils.dates import today_in, trailing_dates

logger = logging.getLogger(__name__)


def rolling_archive(
    cfg: ArchiveConfig,
    days: Optional[int] = None,
    *,
    today: Optional[date] = None,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
    archive: Optional[Callable] = None,
) -> RollingResult:
    archive = archive or archive_date
    days = cfg.rolling_days if days is None else days
    if days < 1:
        raise ValueError("days must be at least 1")

    dates = trailing_dates(today or today_in(cfg.timezone), days)
    result = RollingResult(dates=dates)
    logger.info("Rolling archive for %d days: %s", days, ", ".join(dates))

    own_client = client is None
    http = client or make_client(cfg)
    try:
        for idx, d in enumerate(dates):
            if idx > 0 and cfg.rolling_delay > 0:
                logger.info("Waiting %.1fs before next archive...", cfg.rolling_delay)
                sleep(cfg.rolling_delay)

            logger.info("Archiving %s (%d/%d)", d, idx + 1, len(dates))
            try:
                outcome = archive(cfg, d, client=http, sleep=sleep)
            except Exception as e:
                logger.exception("Archive failed for %s: %r", d, e)
                result.failed[d] = repr(e)
                continue

            if outcome.ok:
                result.succeeded.append(d)
            else:
                logger.error("Archive failed for %s: all %d categories failed", d, outcome.failed_categories)
                result.failed[d] = "all categories failed"
    finally:
        if own_client:
            http.close()

    logger.info("Rolling archive complete: success=%d/%d failed=%d", len(result.succeeded), len(dates), len(result.failed))
    return result


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"days must be an integer, got {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError("days must be at least 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Re-archive the trailing window of days so delayed flights get their final status."
    )
    p.add_argument("days", nargs="?", type=positive_int, help="Trailing window size (default: ARCHIVE_ROLLING_DAYS or 6)")
    p.add_argument("--data-dir", help="Archive root (default: ARCHIVE_DATA_DIR or public/data)")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging_if_needed()
    cfg = load_config(data_dir=args.data_dir)

    print("Starting rolling archive at:", datetime.now().isoformat(timespec="seconds"))
    result = rolling_archive(cfg, args.days)
    print(result.as_dict())
    print("Finished rolling archive at:", datetime.now().isoformat(timespec="seconds"))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
