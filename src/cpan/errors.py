"""Exception taxonomy for the install engine.

Each error is terminal for the processor that raised it and is recorded on
that processor's Dependency. None of them abort sibling installs.
"""


class InstallError(Exception):
    """Base class for every failure an install attempt can end with."""


class ResolutionError(InstallError):
    """A package name could not be mapped to a distribution path."""


class FetchError(InstallError):
    """A distribution could not be downloaded from the mirror."""


class UnpackError(InstallError):
    """An archive is malformed or holds an unsupported entry."""


class MetadataParseError(InstallError):
    """A distribution's metadata file is missing, unreadable or malformed."""


class BuildInvocationError(InstallError):
    """The external builder could not be started at all."""
