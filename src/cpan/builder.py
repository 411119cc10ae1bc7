"""Invocation of the external builder (cpanm) on an extracted distribution."""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from .errors import BuildInvocationError
from .progress import Progress

logger = logging.getLogger(__name__)


@dataclass
class InstallOptions:
    """Per-Client builder options. Both prefixes are optional and independent."""
    notest: bool = False
    local_lib: str = ""
    local_lib_contained: str = ""
    verbose: bool = False


def build_command(options: InstallOptions, work_dir: str, executable: Optional[str] = None) -> List[str]:
    """Assemble the builder argv; the distribution root is always last."""
    cmd = [executable or Constants.BUILDER]
    if options.notest:
        cmd.append("--notest")
    if options.local_lib:
        cmd.extend(["--local-lib", options.local_lib])
    if options.local_lib_contained:
        cmd.extend(["--local-lib-contained", options.local_lib_contained])
    cmd.append(work_dir)
    return cmd


class Builder:
    """Runs the builder synchronously and forwards its combined output.

    A non-zero exit status is logged and otherwise ignored; only a failure
    to start the process is an error.
    """

    def __init__(
        self,
        options: InstallOptions,
        executable: Optional[str] = None,
        progress: Optional[Progress] = None,
    ):
        self.options = options
        self.executable = executable
        self.progress = progress or Progress()

    def run(self, work_dir: str) -> int:
        """Build the distribution extracted at ``work_dir``.

        Returns:
            The builder's exit status.

        Raises:
            BuildInvocationError: If the builder could not be started.
        """
        cmd = build_command(self.options, work_dir, self.executable or Constants.BUILDER)
        self.progress.note("%s", cmd)
        with Timer() as t:
            try:
                result = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    check=False,
                )
            except OSError as exc:
                raise BuildInvocationError(f"could not run {cmd[0]}: {exc}") from exc

        output = result.stdout or b""
        if output:
            sys.stdout.write(output.decode("utf-8", errors="replace"))
            sys.stdout.flush()

        if result.returncode != 0:
            self.progress.note("%s exited with status %s for %s", cmd[0], result.returncode, work_dir)
        if is_debug_enabled(logger):
            logger.debug(
                "Builder finished",
                extra=extra_context(
                    event="build",
                    component="builder",
                    target=work_dir,
                    status_code=result.returncode,
                    duration_ms=t.duration_ms()
                )
            )
        return result.returncode
