import argparse
import sys
import uuid
from datetime import datetime, timezone
from typing import Optional

from flightarchive.core.config import load_config
from flightarchive.core.db import make_session_factory
from flightarchive.jobs.archive.orchestrator import archive_date
from flightarchive.jobs.archive.sources.hkia.http import configure_logging_if_needed
from flightarchive.jobs.archive.utils.dates import InvalidDateError, today_in, validate_date
from flightarchive.models.job_runs import JobRun


def parse_date_arg(value: str) -> str:
    try:
        return validate_date(value)
    except InvalidDateError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Archive one day of flights into daily snapshot + shard indexes")
    p.add_argument("date", nargs="?", type=parse_date_arg, help="YYYY-MM-DD (default: today in ARCHIVE_TIMEZONE)")
    p.add_argument("--data-dir", help="Archive root (default: ARCHIVE_DATA_DIR or public/data)")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging_if_needed()

    cfg = load_config(data_dir=args.data_dir)
    target = args.date or today_in(cfg.timezone).isoformat()

    if not cfg.database_url:
        result = archive_date(cfg, target)
        print(result.as_dict())
        return 0 if result.ok else 1

    db = make_session_factory(cfg.database_url)()
    run_id = uuid.uuid4()

    job = JobRun(
        run_id=run_id,
        job_name="archive_flights",
        status="running",
        meta={"args": {"date": target, "data_dir": str(cfg.data_dir)}},
    )
    db.add(job)
    db.commit()

    try:
        result = archive_date(cfg, target, db=db)

        job = db.get(JobRun, run_id)
        job.status = "success" if result.ok else "fail"
        job.ended_at = datetime.now(timezone.utc)
        job.meta = {**(job.meta or {}), **result.as_dict()}
        db.commit()

        print(result.as_dict())
        return 0 if result.ok else 1

    except Exception as e:
        db.rollback()
        job = db.get(JobRun, run_id)
        job.status = "fail"
        job.ended_at = datetime.now(timezone.utc)
        job.meta = {**(job.meta or {}), "error": repr(e)}
        db.commit()
        raise

    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
