"""Download distributions from a CPAN mirror into the Client's work dir."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

import requests

from constants import Constants
from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled, Timer
from .errors import FetchError
from .progress import Progress

logger = logging.getLogger(__name__)


class Fetcher:
    """Fetches artifacts with bounded retry and a path-keyed file cache.

    The cache location of a distribution is ``work_dir/<dist path>``. An
    existing file there is returned as-is, without any freshness check.
    """

    def __init__(
        self,
        work_dir: str,
        mirror_url: Optional[str] = None,
        attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        progress: Optional[Progress] = None,
    ):
        self.work_dir = work_dir
        self.mirror_url = mirror_url or Constants.MIRROR_URL
        self.attempts = attempts if attempts is not None else Constants.FETCH_ATTEMPTS
        self.retry_delay = retry_delay if retry_delay is not None else Constants.FETCH_RETRY_DELAY_SEC
        self.progress = progress or Progress()

    def cache_path(self, dist_path: str) -> str:
        return os.path.join(self.work_dir, dist_path)

    def fetch(self, dist_path: str) -> str:
        """Return the local file for ``dist_path``, downloading on a cache miss.

        Raises:
            FetchError: If every attempt failed or the body could not be
                written out completely.
        """
        fullpath = self.cache_path(dist_path)
        if os.path.exists(fullpath):
            if is_debug_enabled(logger):
                logger.debug(
                    "Fetch cache hit",
                    extra=extra_context(event="cache_hit", component="fetcher", target=fullpath)
                )
            return fullpath

        url = self.mirror_url + dist_path
        self.progress.note("Fetching %s...", url)

        def _on_retry(attempt: int, reason: str) -> None:
            self.progress.note("failed to download from %s: %s", url, reason)

        res = robust_get(
            url,
            context="mirror",
            attempts=self.attempts,
            delay=self.retry_delay,
            on_retry=_on_retry,
            stream=True,
        )
        if res is None:
            raise FetchError(f"Failed to download from {url} after {self.attempts} attempts")

        with res:
            self._store(res, url, fullpath)
        return fullpath

    def _store(self, res: requests.Response, url: str, fullpath: str) -> None:
        """Stream the body next to ``fullpath`` and move it into place when complete.

        Each call writes its own temp file, so concurrent downloads of one
        distribution never share partial bytes; the last rename wins.
        """
        partial = None
        try:
            parent = os.path.dirname(fullpath)
            os.makedirs(parent, exist_ok=True)
            with Timer() as t:
                fd, partial = tempfile.mkstemp(dir=parent, suffix=".part")
                with os.fdopen(fd, "wb") as fh:
                    for chunk in res.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
            os.replace(partial, fullpath)
        except (OSError, requests.RequestException) as exc:
            if partial is not None and os.path.exists(partial):
                os.remove(partial)
            raise FetchError(f"Failed to store download from {url}: {exc}") from exc

        if is_debug_enabled(logger):
            logger.debug(
                "Download stored",
                extra=extra_context(
                    event="download",
                    component="fetcher",
                    target=fullpath,
                    duration_ms=t.duration_ms()
                )
            )
