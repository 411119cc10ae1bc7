"""Runtime tunables: YAML config file, environment and CLI overrides.

Extracted from cpanfast.py to keep the entrypoint slim. Overrides are applied
onto ``Constants`` in increasing precedence: config file, environment, CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, type)
_TUNABLES = {
    "metadb_url": ("METADB_URL", str),
    "mirror_url": ("MIRROR_URL", str),
    "builder": ("BUILDER", str),
    "meta_file": ("META_FILE", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "fetch_attempts": ("FETCH_ATTEMPTS", int),
    "fetch_retry_delay": ("FETCH_RETRY_DELAY_SEC", float),
    "heartbeat_interval": ("HEARTBEAT_INTERVAL_SEC", float),
}

_ENV = {
    Constants.ENV_METADB_URL: "METADB_URL",
    Constants.ENV_MIRROR_URL: "MIRROR_URL",
    Constants.ENV_BUILDER: "BUILDER",
}


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the ``cpanfast`` section of a YAML config file.

    Args:
        config_path: Path to a YAML file; a missing path yields ``{}``.

    Returns:
        The configuration mapping (the whole document if it has no
        ``cpanfast`` section).
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}
    section = data.get("cpanfast", data)
    return section if isinstance(section, dict) else {}


def apply_config(config: Dict[str, Any]) -> None:
    """Apply known tunables from a config mapping onto Constants."""
    for key, value in config.items():
        entry = _TUNABLES.get(key)
        if entry is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, kind = entry
        try:
            setattr(Constants, attr, kind(value))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for %s: %r", key, value)


def apply_env_overrides(environ: Optional[Dict[str, str]] = None) -> None:
    """Apply CPANFAST_* environment overrides onto Constants."""
    env = os.environ if environ is None else environ
    for var, attr in _ENV.items():
        value = env.get(var)
        if value and value.strip():
            setattr(Constants, attr, value.strip())


def apply_cli_overrides(args) -> None:
    """Apply CLI flags, which take precedence over everything else."""
    if getattr(args, "METADB_URL", None):
        Constants.METADB_URL = args.METADB_URL
    if getattr(args, "MIRROR_URL", None):
        Constants.MIRROR_URL = args.MIRROR_URL
    if getattr(args, "BUILDER", None):
        Constants.BUILDER = args.BUILDER
