"""Build version reported by the dashboard API."""

import os
from pathlib import Path

# Written into the container image at build time
VERSION_FILE = Path("/app/VERSION")


def get_version() -> str:
    """Return the deployed dashboard API version.

    The image's VERSION file wins over APP_VERSION; "unknown" when neither is set.
    """
    if VERSION_FILE.exists():
        try:
            version = VERSION_FILE.read_text().strip()
        except OSError:
            version = ""
        if version:
            return version

    return os.environ.get("APP_VERSION", "unknown")
