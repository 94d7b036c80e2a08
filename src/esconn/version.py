"""Centralized package information for esconn.

This module provides a single source of truth for the package name
and version, avoiding duplication across the codebase.
"""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["PACKAGE_NAME", "PACKAGE_VERSION", "get_package_info"]

PACKAGE_NAME = "esconn"

try:
    PACKAGE_VERSION = version(PACKAGE_NAME)
except PackageNotFoundError:
    PACKAGE_VERSION = "unknown"


def get_package_info() -> tuple[str, str]:
    """Get the package name and version as a tuple.

    Returns:
        A tuple of (package_name, package_version)
    """
    return PACKAGE_NAME, PACKAGE_VERSION
