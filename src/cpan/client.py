"""Process-facing facade over the install engine."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Dict, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .builder import Builder, InstallOptions
from .dispatcher import RequestDispatcher
from .fetcher import Fetcher
from .models import Dependency, Request
from .processor import DependencyProcessor
from .progress import Progress
from .resolver import NameResolver

logger = logging.getLogger(__name__)

__all__ = ["Client", "InstallOptions"]


class Client:
    """Owns the dispatcher, the admission and resolution tables, and a work dir.

    A Client is meant to be short-lived: one per command invocation. The work
    dir is created once at construction and is never removed by the Client.
    """

    def __init__(
        self,
        work_dir: Optional[str] = None,
        options: Optional[InstallOptions] = None,
        metadb_url: Optional[str] = None,
        mirror_url: Optional[str] = None,
        builder: Optional[str] = None,
    ):
        if work_dir:
            os.makedirs(work_dir, exist_ok=True)
            self.work_dir = os.path.abspath(work_dir)
        else:
            self.work_dir = tempfile.mkdtemp(prefix=Constants.WORKDIR_PREFIX)
        self.options = options or InstallOptions()
        self.progress = Progress(self.options.verbose)
        self.distribution_names: Dict[str, str] = {}

        self.resolver = NameResolver(self.distribution_names, metadb_url, self.progress)
        self.fetcher = Fetcher(self.work_dir, mirror_url, progress=self.progress)
        self.builder = Builder(self.options, builder, self.progress)
        self.dispatcher = RequestDispatcher(self._process, self.progress).start()

    @property
    def dependencies(self):
        """Admission table: package name -> canonical completion handle."""
        return self.dispatcher.admitted

    def set_notest(self, notest: bool) -> None:
        self.options.notest = notest

    def set_verbose(self, verbose: bool) -> None:
        self.options.verbose = verbose
        self.progress.enabled = verbose

    def set_local_lib(self, path: str) -> None:
        self.options.local_lib = os.path.abspath(path) if path else ""

    def set_local_lib_contained(self, path: str) -> None:
        self.options.local_lib_contained = os.path.abspath(path) if path else ""

    def install(self, name: str) -> Dependency:
        """Install ``name`` and its prerequisite closure; block until done.

        Returns:
            The terminal Dependency for this call.

        Raises:
            InstallError: The error this call's Dependency ended with.
            OSError: If the work dir cannot be entered.
        """
        return self.install_dependency(Dependency(name))

    def install_dependency(self, dependency: Dependency) -> Dependency:
        previous = os.getcwd()
        os.chdir(self.work_dir)
        try:
            request = Request(dependency)
            self.dispatcher.submit(request)
            request.wait.wait()
        finally:
            os.chdir(previous)

        if is_debug_enabled(logger):
            logger.debug(
                "Install finished",
                extra=extra_context(
                    event="function_exit",
                    component="client",
                    action="install",
                    package=dependency.name,
                    outcome="success" if dependency.succeeded else "failure"
                )
            )
        if not dependency.succeeded and dependency.error is not None:
            raise dependency.error
        return dependency

    def close(self) -> None:
        """Stop the dispatcher. The work dir is left in place."""
        self.dispatcher.stop()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _process(self, request: Request) -> None:
        DependencyProcessor(self, request).run()
