"""
Build a packaged Marginalia executable using PyInstaller.

Bundles the built frontend (frontend/dist) so release builds don't need the dev server.
Outputs to build/, which is gitignored.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent


def build_command(
    frontend_dir: Path,
    dist_dir: Path,
    work_dir: Path,
    onefile: bool = False,
    console: bool = False,
) -> list[str]:
    """PyInstaller command line for the desktop launcher."""

    # PyInstaller --add-data uses ';' on Windows and ':' elsewhere.
    def add_data(src: Path, dest: str) -> list[str]:
        return ["--add-data", f"{src}{os.pathsep}{dest}"]

    cmd: list[str] = [
        sys.executable,
        "-m",
        "PyInstaller",
        "--noconfirm",
        "--clean",
        "--name",
        "Marginalia",
        "--distpath",
        str(dist_dir),
        "--workpath",
        str(work_dir),
        "--specpath",
        str(work_dir),
    ]
    cmd.append("--onefile" if onefile else "--onedir")
    cmd.append("--console" if console else "--windowed")

    icon_path = project_root / "docs" / "images" / "marginalia.ico"
    if icon_path.exists():
        cmd.extend(["--icon", str(icon_path)])

    cmd.extend(add_data(frontend_dir, "frontend/dist"))
    cmd.append(str(project_root / "app" / "launcher.py"))
    return cmd


def main(argv=None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--onefile", action="store_true", help="Build a single-file executable.")
    parser.add_argument("--console", action="store_true", help="Keep a console window (debug builds).")
    args = parser.parse_args(argv)

    sys.path.insert(0, str(project_root))
    from marginalia_version import __version__

    frontend_dir = project_root / "frontend" / "dist"
    if not (frontend_dir / "index.html").exists():
        print(f"Frontend build not found: {frontend_dir}")
        print("Fix: build the frontend first (`npm run build`).")
        return 2

    # Versioned output directories (gitignored)
    dist_dir = project_root / "build" / "dist" / f"marginalia-{__version__}"
    work_dir = project_root / "build" / "work" / f"marginalia-{__version__}"
    dist_dir.mkdir(parents=True, exist_ok=True)
    work_dir.mkdir(parents=True, exist_ok=True)

    cmd = build_command(frontend_dir, dist_dir, work_dir, args.onefile, args.console)

    print(f"Marginalia version: {__version__}")
    print(f"Build output (gitignored): {dist_dir}")
    print("Running PyInstaller:")
    print(" ".join(cmd))

    result = subprocess.run(cmd, cwd=str(project_root))
    if result.returncode != 0:
        return result.returncode

    print(f"Build complete: {dist_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
