import logging
import os
import time
from typing import Any, Union

import httpx

from flightarchive.core.config import ArchiveConfig
from flightarchive.jobs.archive.types import Category, FetchFailure

logger = logging.getLogger(__name__)

RawPayload = Any


def configure_logging_if_needed() -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, request.url)


def make_client(cfg: ArchiveConfig, **kwargs) -> httpx.Client:
    # the upstream rejects requests without a browser-like User-Agent
    return httpx.Client(
        timeout=httpx.Timeout(cfg.request_timeout),
        headers={"User-Agent": cfg.user_agent, "Accept": "application/json"},
        event_hooks={"request": [log_request]},
        **kwargs,
    )


def fetch_category(
    cfg: ArchiveConfig,
    client: httpx.Client,
    date: str,
    category: Category,
) -> Union[RawPayload, FetchFailure]:
    """
    One GET for one category of one date. Never raises: transport errors,
    timeouts, non-2xx responses and undecodable bodies come back as FetchFailure.
    """
    params = {
        "date": date,
        "lang": cfg.lang,
        "arrival": str(category.is_arrival).lower(),
        "cargo": str(category.is_cargo).lower(),
    }
    t0 = time.perf_counter()
    try:
        r = client.get(cfg.base_url, params=params)
        elapsed = time.perf_counter() - t0
        r.raise_for_status()
        payload = r.json()

    except httpx.TimeoutException as e:
        elapsed = time.perf_counter() - t0
        logger.warning("%s fetching %s for %s after %.2fs", e.__class__.__name__, category.label, date, elapsed)
        return FetchFailure(category=category, error=f"timeout: {e.__class__.__name__}")

    except httpx.HTTPStatusError as e:
        snippet = (e.response.text or "")[:300]
        logger.error(
            "HTTP %d fetching %s for %s body_snippet=%r",
            e.response.status_code,
            category.label,
            date,
            snippet,
        )
        return FetchFailure(category=category, error=f"HTTP {e.response.status_code}")

    except httpx.HTTPError as e:
        logger.warning("Request failed fetching %s for %s error=%r", category.label, date, e)
        return FetchFailure(category=category, error=str(e) or e.__class__.__name__)

    except ValueError as e:
        logger.warning("Undecodable response for %s on %s error=%r", category.label, date, e)
        return FetchFailure(category=category, error=f"invalid JSON: {e}")

    if isinstance(payload, dict) and "problemNo" in payload:
        logger.error("Upstream error for %s on %s: %s", category.label, date, payload.get("message"))
        return FetchFailure(category=category, error=f"upstream error {payload.get('problemNo')}: {payload.get('message')}")

    if elapsed > 10:
        logger.info("GET %s completed in %.2fs status=%d (slow)", category.label, elapsed, r.status_code)
    else:
        logger.debug("GET %s completed in %.2fs status=%d", category.label, elapsed, r.status_code)
    return payload
