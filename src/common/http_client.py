"""Shared HTTP helpers used by the resolver and the fetcher.

Encapsulates request/timeout handling and the bounded retry loop so the
install engine avoids duplicating try/except blocks. Errors are raised or
reported to the caller; nothing here terminates the process.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

RetryHook = Callable[[int, str], None]


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent timeout handling and DEBUG traces.

    Raises:
        requests.RequestException: On timeout or connection failure.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout:
            logger.debug(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            raise
        except requests.RequestException as exc:  # includes ConnectionError
            logger.debug("%s connection error: %s", context, exc)
            raise
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def robust_get(
    url: str,
    *,
    context: str,
    attempts: int = Constants.FETCH_ATTEMPTS,
    delay: float = Constants.FETCH_RETRY_DELAY_SEC,
    on_retry: Optional[RetryHook] = None,
    **kwargs: Any
) -> Optional[requests.Response]:
    """GET ``url`` until a 200 arrives or ``attempts`` are used up.

    A transport error or a non-200 status consumes one attempt. The caller
    owns (and must close) the returned response.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g. "mirror").
        attempts: Total number of attempts.
        delay: Seconds to sleep between attempts.
        on_retry: Called with (attempt number, reason) after each failure.
        **kwargs: Passed through to requests.get.

    Returns:
        The first successful response, or None when every attempt failed.
    """
    for attempt in range(1, attempts + 1):
        try:
            res = safe_get(url, context=context, **kwargs)
        except requests.RequestException as exc:
            reason = str(exc)
        else:
            if res.status_code == 200:
                return res
            reason = f"status code = {res.status_code}"
            res.close()

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP attempt failed",
                extra=extra_context(
                    event="http_retry",
                    component="http_client",
                    action="GET",
                    attempt=attempt,
                    outcome=reason,
                    target=safe_url(url),
                    context=context
                )
            )
        if on_retry is not None:
            on_retry(attempt, reason)
        if attempt < attempts and delay > 0:
            time.sleep(delay)

    return None
