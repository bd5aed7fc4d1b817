"""
Filesystem commands used by the editor frontend.
"""
from pathlib import Path
from typing import Dict


class ShellCommandError(Exception):
    """A shell command failed; the message is shown to the user as-is."""


def read_file(path: str) -> str:
    """Read a file from the filesystem."""
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ShellCommandError(f"Failed to read file: {e}") from e


def write_file(path: str, content: str) -> None:
    """Write a file to the filesystem, creating parent directories."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ShellCommandError(f"Failed to create directory: {e}") from e
    try:
        target.write_text(content, encoding='utf-8')
    except OSError as e:
        raise ShellCommandError(f"Failed to write file: {e}") from e


def save_bundle(bundle_dir: str, bundle_name: str, files: Dict[str, str]) -> str:
    """Save a bundle (a directory of text files) and return its path."""
    bundle_path = Path(bundle_dir) / bundle_name
    try:
        bundle_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ShellCommandError(f"Failed to create bundle directory: {e}") from e

    for filename, content in files.items():
        try:
            (bundle_path / filename).write_text(content, encoding='utf-8')
        except OSError as e:
            raise ShellCommandError(f"Failed to write {filename}: {e}") from e

    return str(bundle_path)


def get_home_dir() -> str:
    """Get the home directory."""
    try:
        return str(Path.home())
    except RuntimeError as e:
        raise ShellCommandError("Could not determine home directory") from e
