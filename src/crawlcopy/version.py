"""Version detection for installed and development builds."""

from __future__ import annotations

import os
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version

DISTRIBUTION_NAME = "crawlcopy"

# Fallback version if nothing else works
_FALLBACK_VERSION = "unknown"


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. Installed distribution metadata
    3. Fallback to "unknown"
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version and build_version.strip():
        return build_version.strip()

    try:
        return distribution_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _FALLBACK_VERSION


# Cache the version on module load
__version__ = get_version()
