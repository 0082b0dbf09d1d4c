"""Download the source CSV over HTTP."""

import logging
import random
import re
import time
from pathlib import Path

import httpx

from .errors import FetchError

log = logging.getLogger(__name__)

_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


def is_valid_url(url: str) -> bool:
    """Check that ``url`` is an http(s) URL."""
    return bool(url) and bool(_URL_RE.match(url))


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


def _download_once(client: httpx.Client, url: str, output_path: Path) -> int:
    """Stream ``url`` into ``output_path``, returning the number of bytes written."""
    written = 0
    with client.stream("GET", url) as response:
        response.raise_for_status()
        with open(output_path, "wb") as f:
            for chunk in response.iter_bytes():
                f.write(chunk)
                written += len(chunk)
    return written


def download(
    url: str,
    output_path: str | Path,
    client: httpx.Client | None = None,
    timeout: float = 30.0,
    max_attempts: int = 3,
    base_seconds: float = 1.0,
    max_seconds: float = 10.0,
) -> Path:
    """Download ``url`` to ``output_path`` and return the path.

    Transport errors and 5xx responses are retried with exponential backoff.
    The parent directory of ``output_path`` must already exist.
    """
    if not is_valid_url(url):
        raise FetchError(f"Invalid URL: '{url}'")

    output_path = Path(output_path)
    if not output_path.parent.is_dir():
        raise FetchError(f"Output directory does not exist: '{output_path.parent}'")

    log.info("Downloading CSV from %s to %s", url, output_path)

    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    try:
        max_attempts = max(max_attempts, 1)
        for attempt in range(max_attempts):
            try:
                written = _download_once(client, url, output_path)
                break
            except (httpx.TransportError, httpx.HTTPStatusError) as e:
                if not _is_retryable(e) or attempt + 1 >= max_attempts:
                    raise FetchError(f"Failed to download CSV from '{url}': {e}") from e
                delay = min(base_seconds * (2**attempt), max_seconds)
                wait = delay + random.uniform(0, delay * 0.25)
                log.warning(
                    "Download of %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    url,
                    attempt + 1,
                    max_attempts,
                    wait,
                    e,
                )
                time.sleep(wait)
            except OSError as e:
                raise FetchError(f"Cannot write downloaded file '{output_path}': {e}") from e
    finally:
        if owns_client:
            client.close()

    if output_path.suffix.lower() != ".csv":
        log.warning("Downloaded file does not have a .csv extension: %s", output_path)
    if written == 0:
        log.warning("Downloaded file is empty: %s", output_path)

    log.info("CSV downloaded successfully to %s (%d bytes)", output_path, written)
    return output_path
