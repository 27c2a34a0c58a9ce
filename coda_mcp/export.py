"""
Page content export workflow.

Coda renders page content asynchronously, so reading a page as markdown takes
three steps:
  1. begin an export of the page in markdown format (returns a request id)
  2. poll the export status until it reports "complete" (bounded attempts)
  3. download the rendered markdown from the returned link

Only "not yet complete" is retried. A failed begin call, a failed status
check and a failed download end the call immediately.
"""

import asyncio
import logging
import math
from typing import Optional

from .client import CodaClient
from .config import MAX_POLL_ATTEMPTS, POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

EXPORT_FORMAT = "markdown"

STATUS_COMPLETE = "complete"
STATUS_FAILED = "failed"


class ExportError(Exception):
    """Base exception for the content export workflow."""
    pass


class ExportStartFailed(ExportError):
    """The begin-export call failed or returned no request id."""
    pass


class ExportStatusCheckFailed(ExportError):
    """A status check failed (distinct from "not ready yet")."""
    pass


class ExportTimedOut(ExportError):
    """The export did not complete within the attempt budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Page content export did not complete after {attempts} retries.")


class DownloadFailed(ExportError):
    """The rendered content could not be downloaded."""

    def __init__(self, link: str, cause: Exception):
        self.link = link
        self.cause = cause
        super().__init__(f"Failed to download exported page content from {link}: {cause}")


async def begin_export(client: CodaClient, doc_id: str, page_id_or_name: str) -> str:
    """Start a markdown export and return its request id."""
    try:
        resp = await client.begin_page_content_export(doc_id, page_id_or_name, output_format=EXPORT_FORMAT)
    except Exception as e:
        raise ExportStartFailed(f"Failed to begin page content export: {e}") from e

    request_id = resp.get("id") if isinstance(resp, dict) else None
    if not request_id:
        raise ExportStartFailed("Failed to begin page content export: no request id returned")

    logger.info(f"Started export {request_id} for page {page_id_or_name!r} in doc {doc_id}")
    return request_id


async def wait_for_export(
    client: CodaClient,
    doc_id: str,
    page_id_or_name: str,
    request_id: str,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    max_attempts: int = MAX_POLL_ATTEMPTS,
) -> str:
    """Poll the export status and return the download link once complete."""
    for attempt in range(1, max_attempts + 1):
        await asyncio.sleep(poll_interval)

        try:
            status = await client.get_page_content_export_status(doc_id, page_id_or_name, request_id)
        except Exception as e:
            raise ExportStatusCheckFailed(f"Failed to get page content export status: {e}") from e

        status = status or {}
        state = status.get("status")
        logger.debug(f"Export {request_id} attempt {attempt}/{max_attempts}: {state}")

        if state == STATUS_COMPLETE:
            link = status.get("downloadLink")
            if not link:
                raise ExportStatusCheckFailed("Export completed without a download link")
            return link

        if state == STATUS_FAILED:
            raise ExportStatusCheckFailed(f"Page content export failed: {status.get('error', 'unknown error')}")

    logger.warning(f"Export {request_id} still pending after {max_attempts} attempts")
    raise ExportTimedOut(max_attempts)


async def download_export(client: CodaClient, link: str) -> str:
    try:
        return await client.download_text(link)
    except Exception as e:
        raise DownloadFailed(link, e) from e


async def fetch_page_markdown(
    client: CodaClient,
    doc_id: str,
    page_id_or_name: str,
    poll_interval: Optional[float] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """
    Return the content of a page as markdown.

    An empty string is a valid result (the page may be empty).
    Raises an ExportError subclass on failure.
    """
    if poll_interval is None:
        poll_interval = POLL_INTERVAL_SECONDS
    if max_attempts is None:
        max_attempts = MAX_POLL_ATTEMPTS
    if not math.isfinite(poll_interval) or poll_interval <= 0:
        raise ValueError(f"poll_interval must be a finite number of seconds greater than 0, got {poll_interval}")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    request_id = await begin_export(client, doc_id, page_id_or_name)
    link = await wait_for_export(
        client,
        doc_id,
        page_id_or_name,
        request_id,
        poll_interval=poll_interval,
        max_attempts=max_attempts,
    )
    return await download_export(client, link)
