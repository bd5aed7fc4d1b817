"""
Build type flag: dev vs release.

- Release: packaged frontend served by the backend
- Dev: frontend loaded from a local dev server, checked for reachability before the window shows
"""

import os
from functools import lru_cache


BUILD_TYPE_VAR = "MARGINALIA_BUILD_TYPE"


@lru_cache(maxsize=1)
def is_dev_build() -> bool:
    """
    Check if this is a dev build.

    Determined by MARGINALIA_BUILD_TYPE environment variable:
    - "dev" -> True
    - "release" or unset -> False

    Only the source-checkout entry point (`python launcher.py`, `marginalia-dev`)
    sets "dev"; installed and packaged builds never wait on the dev server.
    """
    build_type = os.getenv(BUILD_TYPE_VAR, "release").lower()
    return build_type == "dev"


def get_build_type() -> str:
    """Get current build type as string."""
    return "dev" if is_dev_build() else "release"
