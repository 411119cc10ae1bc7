"""cpanfast - concurrent CPAN dependency installer

Resolves each named package, installs its prerequisite closure concurrently
and hands every distribution to the builder once its prerequisites are done.

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_cli_overrides, apply_config, apply_env_overrides, load_config
from cpan import Client, InstallError, InstallOptions


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        ))
        logging.getLogger().addHandler(file_handler)
        logging.info("Logging to file: %s", log_file)


def build_client(args) -> Client:
    """Create a Client configured from parsed arguments."""
    options = InstallOptions(notest=args.NOTEST, verbose=args.VERBOSE)
    client = Client(work_dir=getattr(args, "WORKDIR", None), options=options)
    client.set_local_lib(args.LOCAL_LIB)
    client.set_local_lib_contained(args.LOCAL_LIB_CONTAINED)
    return client


def install_all(client: Client, names) -> int:
    """Install each name in turn, continuing past failures.

    Returns:
        The number of top-level installs that failed.
    """
    failed = 0
    for name in names:
        try:
            client.install(name)
        except InstallError as exc:
            failed += 1
            logging.error("Failed to install %s: %s", name, exc)
    return failed


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    _setup_logging(args)

    apply_config(load_config(getattr(args, "CONFIG", None)))
    apply_env_overrides()
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main",
                                count=len(args.packages))
        )

    try:
        client = build_client(args)
    except OSError as e:
        logging.error("Could not create work directory: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    with client:
        logger.debug("Using work directory %s", client.work_dir)
        failed = install_all(client, args.packages)

    if failed:
        sys.exit(ExitCodes.INSTALL_FAILED.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
