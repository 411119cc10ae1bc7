"""Verbosity-gated progress notes."""

from __future__ import annotations

import logging
from typing import Any

from constants import Constants

logger = logging.getLogger(Constants.PROGRESS_LOGGER)


class Progress:
    """Emits user-facing progress lines only while enabled.

    With verbosity off nothing is logged at all; the only visible outcome is
    the error returned from a top-level install.
    """

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def note(self, msg: str, *args: Any) -> None:
        if self.enabled:
            logger.info(msg.rstrip("\n"), *args)
