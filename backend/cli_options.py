"""
Launch options parsed from the process command line.

Accepted forms:
  marginalia path/to/doc.md
  marginalia open path/to/doc.md
  marginalia --bundle-dir DIR --principles FILE --out FILE
  marginalia --bundle-dir=DIR --principles=FILE --out=FILE

Unknown flags are ignored so older binaries keep launching when new options appear.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Sequence


# Flag -> LaunchOptions field
VALUE_FLAGS: Dict[str, str] = {
    "--bundle-dir": "bundle_dir",
    "--principles": "principles_path",
    "--out": "out_path",
}


@dataclass(frozen=True)
class LaunchOptions:
    """Options resolved once at startup and shared read-only with the backend."""
    file_path: Optional[str] = None
    bundle_dir: Optional[str] = None
    principles_path: Optional[str] = None
    out_path: Optional[str] = None


def _split_inline_value(arg: str):
    """Return (field, value) for `--flag=value`, or None."""
    for flag, field in VALUE_FLAGS.items():
        prefix = flag + "="
        if arg.startswith(prefix):
            return field, arg[len(prefix):]
    return None


def _pick_file_path(positionals: Sequence[str]) -> Optional[str]:
    if "open" in positionals:
        index = positionals.index("open")
        if index + 1 < len(positionals):
            return positionals[index + 1]
        # `open` with nothing after it does not fall back to other positionals
        return None
    if positionals:
        return positionals[0]
    return None


def resolve_launch_options(args: Sequence[str]) -> LaunchOptions:
    """
    Parse the full argument vector (including the program name) into LaunchOptions.

    Never raises: incomplete or unknown input just leaves fields unset.
    """
    values: Dict[str, str] = {}
    positionals = []
    i = 1

    while i < len(args):
        arg = args[i]

        field = VALUE_FLAGS.get(arg)
        if field is not None and i + 1 < len(args):
            values[field] = args[i + 1]
            i += 2
            continue

        inline = _split_inline_value(arg)
        if inline is not None:
            field, value = inline
            values[field] = value
            i += 1
            continue

        if arg.startswith("-"):
            i += 1
            continue

        positionals.append(arg)
        i += 1

    return LaunchOptions(file_path=_pick_file_path(positionals), **values)
