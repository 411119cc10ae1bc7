"""The unit of work for one admitted package name."""

from __future__ import annotations

import enum
import logging
import os
from typing import TYPE_CHECKING, List

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .distmeta import load_distmeta
from .errors import InstallError, ResolutionError
from .extractor import extract_archive
from .models import Dependency, Distribution, Request
from .sync import Heartbeat, WaitGroup

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)


class State(enum.Enum):
    """Lifecycle of an admitted request."""
    ADMITTED = "admitted"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    PARSING_METADATA = "parsing_metadata"
    INSTALLING_PREREQUISITES = "installing_prerequisites"
    BUILDING = "building"
    DONE = "done"


class DependencyProcessor:
    """Resolves, fetches, extracts, recurses into and builds one package.

    Runs on its own thread. Whatever happens, it ends by signalling the
    request's completion handle exactly once.
    """

    def __init__(self, client: "Client", request: Request):
        self.client = client
        self.request = request
        self.state = State.ADMITTED
        self.distribution: Distribution = Distribution("")

    @property
    def dependency(self) -> Dependency:
        return self.request.dependency

    def _enter(self, state: State) -> None:
        self.state = state
        if is_debug_enabled(logger):
            logger.debug(
                "Processor state change",
                extra=extra_context(
                    event="state",
                    component="processor",
                    package=self.dependency.name,
                    outcome=state.value
                )
            )

    def run(self) -> None:
        progress = self.client.progress
        name = self.dependency.name
        heartbeat = Heartbeat(
            Constants.HEARTBEAT_INTERVAL_SEC,
            lambda: progress.note("Still waiting for %s...", self.distribution.path or name),
        )
        if progress.enabled:
            heartbeat.start()
        try:
            self._install()
        except InstallError as exc:
            self.dependency.error = exc
            progress.note("failed to install %s: %s", self.distribution.path or name, exc)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Unexpected failure while installing %s", name)
            self.dependency.error = InstallError(f"unexpected failure installing {name}: {exc}")
            self.dependency.error.__cause__ = exc
        else:
            self.dependency.succeeded = True
        finally:
            heartbeat.stop()
            self._enter(State.DONE)
            progress.note("DONE: %s", self.distribution.path or name)
            self.request.wait.done()

    def _install(self) -> None:
        client = self.client
        name = self.dependency.name

        self._enter(State.RESOLVING)
        path = client.resolver.resolve(name)
        if Constants.EXCLUDED_PATH_FRAGMENT in path:
            raise ResolutionError(f"{name} is provided by the core distribution {path}, skipping")
        self.distribution = Distribution(path)
        client.progress.note("Installing %s...", path)

        self._enter(State.FETCHING)
        local_file = client.fetcher.fetch(path)

        self._enter(State.EXTRACTING)
        self.distribution.work_dir = extract_archive(local_file, client.work_dir)

        self._enter(State.PARSING_METADATA)
        meta_file = os.path.join(self.distribution.work_dir, Constants.META_FILE)
        self.distribution.meta = load_distmeta(meta_file, path)

        self._enter(State.INSTALLING_PREREQUISITES)
        self._install_prerequisites()

        self._enter(State.BUILDING)
        client.builder.run(self.distribution.work_dir)

    def _install_prerequisites(self) -> List[Request]:
        """Fan out one request per declared prerequisite and wait for all.

        Failed prerequisites do not stop the dependent build.
        """
        meta = self.distribution.meta
        fan_in = WaitGroup()
        issued = []
        for prereqs in meta.all_prerequisites():
            for line in prereqs.describe():
                self.client.progress.note("%s: %s", self.dependency.name, line)
            for dep in prereqs:
                fan_in.add(1)
                request = Request(dep, fan_in)
                issued.append(request)
                self.client.dispatcher.submit(request)
        fan_in.wait()
        return issued
