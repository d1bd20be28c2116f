"""Error taxonomy for configuration fingerprinting."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class FingerprintError(RuntimeError):
    """Base error for fingerprint computation failures."""


class MissingRequiredFileError(FingerprintError, FileNotFoundError):
    """Raised when the root descriptor is absent from the configuration directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{path.name} not found at: {path}")


class FingerprintConfigError(ValueError):
    """Raised when fingerprint settings are invalid."""


class IssueKind(StrEnum):
    """Non-fatal conditions recorded while resolving references."""

    MALFORMED_DESCRIPTOR = "malformed_descriptor"
    MISSING_REFERENCED_FILE = "missing_referenced_file"


__all__ = [
    "FingerprintConfigError",
    "FingerprintError",
    "IssueKind",
    "MissingRequiredFileError",
]
