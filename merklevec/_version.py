"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Version information for Merklevec.

Source checkouts and editable installs read the VERSION file at the project
root; regular installs fall back to the installed distribution metadata.
"""

from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "merklevec"


def get_version() -> str:
    """
    Resolve the package version.

    Returns:
        str: The version string (e.g., "0.1.0"), or "unknown"
    """
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


__version__ = get_version()
