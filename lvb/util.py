"""
Console output helpers shared by the CLI, the server and the search core.

info/ok go to stdout and can be silenced with set_quiet(); warn/error
always go to stderr.
"""

import sys

_quiet = False


def set_quiet(quiet: bool) -> None:
    """Silence (or re-enable) info and ok messages."""
    global _quiet
    _quiet = quiet


def info(msg: str) -> None:
    """Print an info message."""
    if not _quiet:
        print(f"[info] {msg}")


def warn(msg: str) -> None:
    """Print a warning message."""
    print(f"[warn] {msg}", file=sys.stderr)


def ok(msg: str) -> None:
    """Print a success message."""
    if not _quiet:
        print(f"[ok] {msg}")


def error(msg: str) -> None:
    """Print an error message."""
    print(f"[error] {msg}", file=sys.stderr)
