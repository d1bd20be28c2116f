"""File I/O utilities with consistent encoding handling."""

from __future__ import annotations

from pathlib import Path


def read_text(path: Path, *, encoding: str = "utf-8-sig", errors: str = "replace") -> str:
    """Read text file with consistent encoding.

    A leading byte-order mark is dropped and undecodable bytes are replaced,
    so two reads of the same bytes always yield the same text.
    Files that differ only in undecodable bytes read to the same text.

    Parameters
    ----------
    path
        Path to the file.
    encoding
        Text encoding.
    errors
        Decoding error policy.

    Returns
    -------
    str
        File contents.
    """
    with path.open("r", encoding=encoding, errors=errors, newline="") as handle:
        return handle.read()


def is_regular_file(path: Path) -> bool:
    """Return whether ``path`` names an existing regular file."""
    try:
        return path.is_file()
    except OSError:
        return False


__all__ = [
    "is_regular_file",
    "read_text",
]
