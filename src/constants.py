"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INSTALL_FAILED = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    METADB_URL = "http://cpanmetadb.plackperl.org/v1.0/package/"
    MIRROR_URL = "http://cpan.metacpan.org/authors/id/"
    META_FILE = "META.yml"
    BUILDER = "cpanm"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    PROGRESS_FORMAT = "%(asctime)s %(message)s"
    PROGRESS_DATEFMT = "%Y/%m/%d %H:%M:%S"
    PROGRESS_LOGGER = "cpanfast.progress"
    ENV_LOG_LEVEL = "CPANFAST_LOG_LEVEL"
    ENV_METADB_URL = "CPANFAST_METADB_URL"
    ENV_MIRROR_URL = "CPANFAST_MIRROR_URL"
    ENV_BUILDER = "CPANFAST_BUILDER"
    WORKDIR_PREFIX = "cpanfast-"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    FETCH_ATTEMPTS = 5
    FETCH_RETRY_DELAY_SEC = 0.3
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    HEARTBEAT_INTERVAL_SEC = 5
    QUEUE_SIZE = 1

    # The runtime itself is never installable on its own
    EXCLUDED_NAME = "perl"
    EXCLUDED_PATH_FRAGMENT = "/perl-5."
