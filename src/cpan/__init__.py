"""Concurrent dependency-closure installer for CPAN distributions."""

from .client import Client, InstallOptions
from .errors import (
    BuildInvocationError,
    FetchError,
    InstallError,
    MetadataParseError,
    ResolutionError,
    UnpackError,
)
from .models import Dependency, Distribution, Request

__all__ = [
    "Client",
    "InstallOptions",
    "Dependency",
    "Distribution",
    "Request",
    "InstallError",
    "ResolutionError",
    "FetchError",
    "UnpackError",
    "MetadataParseError",
    "BuildInvocationError",
]
