"""
Marginalia desktop launcher entrypoint for source checkouts.

Run: `python launcher.py [open] [path] [--bundle-dir DIR] [--principles FILE] [--out FILE]`
Delegates to `app/launcher.py` as a dev build (frontend from the dev server).
Set MARGINALIA_BUILD_TYPE=release to use the built frontend instead.
"""

from app.launcher import main_dev


if __name__ == "__main__":
    main_dev()
