"""Data models for install requests and distributions."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .sync import WaitGroup

if TYPE_CHECKING:
    from .distmeta import Distmeta


@dataclass
class Dependency:
    """A named package with an advisory version constraint.

    Identity is the name alone; the version is never compared. ``succeeded``
    and ``error`` are written once, when the owning attempt terminates.
    """
    name: str
    version: str = ""
    succeeded: bool = False
    error: Optional[Exception] = None


@dataclass
class Request:
    """One call site's ask for a Dependency, plus its completion handle."""
    dependency: Dependency
    wait: WaitGroup = field(default_factory=lambda: WaitGroup(1))

    @property
    def name(self) -> str:
        return self.dependency.name


@dataclass
class Distribution:
    """A registry artifact: its relative path, extracted root and metadata."""
    path: str
    work_dir: str = ""
    meta: Optional["Distmeta"] = None

    def cleanup(self) -> None:
        """Remove the extracted tree. Never called by the engine itself."""
        if self.work_dir:
            shutil.rmtree(self.work_dir, ignore_errors=True)
