"""Shared fixtures: tarball builders, fake HTTP responses, Constants isolation."""

import io
import tarfile
from unittest.mock import MagicMock

import pytest

from constants import Constants


def tarball_bytes(entries):
    """Build a gzip tarball in memory.

    ``entries`` is a list of ``(name, content)``; content ``None`` makes a
    directory, a ``("symlink", target)`` tuple makes a symlink, anything else
    is file content (str or bytes).
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in entries:
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            elif isinstance(content, tuple):
                info.type = tarfile.SYMTYPE
                info.linkname = content[1]
                tar.addfile(info)
            else:
                data = content.encode("utf-8") if isinstance(content, str) else content
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def dist_entries(root, meta_yml, extra=None):
    """Entries for a minimal distribution rooted at ``root``."""
    entries = [(f"{root}/", None), (f"{root}/META.yml", meta_yml)]
    entries.extend(extra or [])
    return entries


def fake_response(status_code=200, text="", body=b""):
    """A MagicMock standing in for requests.Response."""
    res = MagicMock()
    res.status_code = status_code
    res.text = text
    res.iter_content.return_value = [body] if body else []
    return res


@pytest.fixture
def make_tarball(tmp_path):
    """Write a gzip tarball under tmp_path and return its path."""
    def _make(filename, entries):
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(tarball_bytes(entries))
        return str(path)
    return _make


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any tunable overrides a test applies onto Constants."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    Constants.FETCH_RETRY_DELAY_SEC = 0
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)
