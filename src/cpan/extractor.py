"""Streaming extraction of distribution tarballs."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from typing import Optional

from common.logging_utils import extra_context, is_debug_enabled
from .errors import UnpackError

logger = logging.getLogger(__name__)


def _entry_path(member: tarfile.TarInfo) -> str:
    name = member.name
    # tarfile strips the trailing slash of directory names
    if member.isdir() and not name.endswith("/"):
        name += "/"
    while name.startswith("./"):
        name = name[2:]
    return name


def _root_of(path: str) -> Optional[str]:
    if "/" not in path:
        return None
    return path.split("/", 1)[0] or None


def _target(dest_dir: str, path: str) -> str:
    target = os.path.abspath(os.path.join(dest_dir, path))
    base = os.path.abspath(dest_dir)
    if os.path.isabs(path) or os.path.commonpath([base, target]) != base:
        raise UnpackError(f"entry {path} escapes the extraction directory")
    return target


def extract_archive(local_file: str, dest_dir: str) -> str:
    """Unpack a (compressed) tar archive under ``dest_dir``.

    The archive's root is the first path segment of the first entry that
    contains a separator. If extraction fails after that root was created it
    is removed again; nothing is removed on success.

    Args:
        local_file: Path of the archive.
        dest_dir: Directory entries are extracted relative to.

    Returns:
        Absolute path of the root directory, or of ``dest_dir`` if the
        entries share no common directory.

    Raises:
        UnpackError: On unreadable archives and unsupported entry types.
    """
    root = ""
    done = False
    try:
        with tarfile.open(local_file, mode="r|*") as archive:
            for member in archive:
                path = _entry_path(member)
                target = _target(dest_dir, path)
                if not root:
                    root = _root_of(path) or ""

                if member.isdir():
                    os.makedirs(target, exist_ok=True)
                elif member.isfile():
                    os.makedirs(os.path.dirname(target), exist_ok=True)
                    src = archive.extractfile(member)
                    with open(target, "wb") as out:
                        shutil.copyfileobj(src, out)
                else:
                    raise UnpackError(f"unknown type for entry {member.name}")
        done = True
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise UnpackError(f"failed to unpack {local_file}: {exc}") from exc
    finally:
        if not done and root:
            shutil.rmtree(os.path.join(dest_dir, root), ignore_errors=True)

    root_dir = os.path.abspath(os.path.join(dest_dir, root))
    if is_debug_enabled(logger):
        logger.debug(
            "Archive extracted",
            extra=extra_context(
                event="unpack",
                component="extractor",
                target=local_file,
                outcome=root_dir
            )
        )
    return root_dir
