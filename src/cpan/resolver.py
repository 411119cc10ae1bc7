"""Package name to distribution path resolution via cpanmetadb."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests
import yaml

from constants import Constants
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from .errors import ResolutionError
from .progress import Progress

logger = logging.getLogger(__name__)


class NameResolver:
    """Maps package names to registry-relative distribution paths.

    Results are cached for the lifetime of the owning Client; there is no
    expiry since a Client is short-lived.
    """

    def __init__(
        self,
        cache: Optional[Dict[str, str]] = None,
        base_url: Optional[str] = None,
        progress: Optional[Progress] = None,
    ):
        self.cache = cache if cache is not None else {}
        self.base_url = base_url or Constants.METADB_URL
        self.progress = progress or Progress()

    def resolve(self, name: str) -> str:
        """Return the distribution path (``distfile``) for ``name``.

        Raises:
            ResolutionError: If the lookup fails, cannot be decoded, or the
                document has no ``distfile``.
        """
        distfile = self.cache.get(name)
        if distfile is not None:
            return distfile

        url = self.base_url + name
        try:
            res = safe_get(url, context="cpanmetadb")
        except requests.RequestException as exc:
            raise ResolutionError(f"lookup of {name} failed: {exc}") from exc
        if res.status_code != 200:
            raise ResolutionError(
                f"lookup of {name} failed: status code = {res.status_code}"
            )

        try:
            doc = yaml.safe_load(res.text)
        except yaml.YAMLError as exc:
            raise ResolutionError(f"could not decode lookup result for {name}: {exc}") from exc

        distfile = doc.get("distfile") if isinstance(doc, dict) else None
        if not distfile:
            raise ResolutionError(f"could not find where {name} can be found")
        distfile = str(distfile)

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved distribution",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    package=name,
                    target=safe_url(url),
                    outcome=distfile
                )
            )
        self.progress.note("cpanmetadb says we can get %s from %s", name, distfile)
        self.cache[name] = distfile
        return distfile
