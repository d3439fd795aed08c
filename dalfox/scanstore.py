"""Bookkeeping for scans started through the REST API or the tool server."""

from __future__ import annotations

import hashlib
import logging
import secrets
from collections.abc import Callable, Iterable
from dataclasses import replace

from dalfox.models import Options, PoC, Scan

__all__ = [
    "Scanner",
    "get_scan",
    "get_scans",
    "clean_url",
    "new_scan_id",
    "scan_from_api",
]

logger = logging.getLogger(__name__)

Scanner = Callable[[str, Options, str], Iterable[PoC]]
"""A scan engine: called with the target URL, the options and the scan id."""


def get_scan(sid: str, options: Options) -> Scan:
    """Return the scan stored under ``sid``, or an empty scan if there is none."""
    return options.scan.get(sid, Scan())


def get_scans(options: Options) -> list[str]:
    """Return the identifiers of every stored scan."""
    return list(options.scan)


def clean_url(url: str) -> str:
    """Remove newline and carriage-return characters from ``url``."""
    return url.replace("\n", "").replace("\r", "")


def new_scan_id(url: str) -> str:
    """Return a fresh random identifier for a scan of ``url``."""
    digest = hashlib.sha256()
    digest.update(url.encode("utf-8"))
    digest.update(secrets.token_bytes(32))
    return digest.hexdigest()


def scan_from_api(
    url: str,
    rq_options: Options,
    options: Options,
    sid: str,
    scanner: Scanner,
) -> None:
    """Run ``scanner`` on ``url`` and store its findings under ``sid``.

    The request options are used with the server's scan store. A failing scan
    is logged and leaves nothing stored.
    """
    method = options.method if rq_options.method else "GET"
    scan_options = replace(rq_options, scan=options.scan, method=method)

    logger.debug("[%s] %s", sid, clean_url(url))
    logger.debug("[%s] %s", sid, scan_options)
    try:
        results = list(scanner(url, scan_options, sid))
    except Exception as err:  # the engine may fail in any way; the API keeps running
        logger.error("[%s] Scan failed for URL: %s : %s", sid, clean_url(url), err)
        return
    options.scan[sid] = Scan(url=url, results=results)
    logger.info("[%s] Scan completed successfully", sid)