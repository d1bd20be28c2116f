"""Result contracts for configuration fingerprinting."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import cast

from serde_msgspec import StructBaseStrict, dumps_json, loads_json, to_builtins

from devcontainer_fingerprint.errors import IssueKind


class ResolutionIssue(StructBaseStrict, frozen=True):
    """Non-fatal condition encountered while building a fingerprint."""

    kind: IssueKind
    message: str
    path: str | None = None


class FingerprintResult(StructBaseStrict, frozen=True):
    """Digest of a configuration tree plus the files that produced it.

    ``file_digests`` and ``included_files`` only describe files. Feature
    declarations contribute to ``digest`` without appearing in either, so
    ``included_files`` is not an exhaustive list of hash inputs.
    """

    timestamp: datetime
    version: int
    digest: str
    algorithm: str
    file_digests: dict[str, str]
    included_files: tuple[str, ...]
    issues: tuple[ResolutionIssue, ...] = ()

    def __post_init__(self) -> None:
        """Validate the file digest invariant.

        Raises
        ------
        ValueError
            Raised when a digested file is missing from ``included_files``.
        """
        unknown = [name for name in self.file_digests if name not in self.included_files]
        if unknown:
            msg = f"File digests recorded for files not included: {unknown}."
            raise ValueError(msg)

    def payload(self) -> Mapping[str, object]:
        """Return a JSON-compatible payload for diagnostics and persistence.

        Returns
        -------
        Mapping[str, object]
            Serialized result payload.
        """
        return cast("Mapping[str, object]", to_builtins(self))

    def to_json(self, *, pretty: bool = False) -> bytes:
        """Return the result encoded as JSON bytes.

        Returns
        -------
        bytes
            JSON payload.
        """
        return dumps_json(self, pretty=pretty)

    @classmethod
    def from_json(cls, buf: bytes | str) -> FingerprintResult:
        """Decode a result previously produced by ``to_json``.

        Returns
        -------
        FingerprintResult
            Decoded result.
        """
        return loads_json(buf, target_type=cls)


class ChangeVerdict(StructBaseStrict, frozen=True):
    """Outcome of comparing the current configuration to a stored digest.

    ``changed_files`` lists every file contributing to the current digest when
    a change is detected. No per-file snapshot accompanies the stored digest,
    so the list over-approximates the files that actually differ.
    """

    stored_digest: str
    changed: bool
    reason: str
    current_digest: str | None = None
    changed_files: tuple[str, ...] = ()
    details: FingerprintResult | None = None

    def payload(self) -> Mapping[str, object]:
        """Return a JSON-compatible payload for reporting surfaces.

        Returns
        -------
        Mapping[str, object]
            Serialized verdict payload.
        """
        return cast("Mapping[str, object]", to_builtins(self))

    def to_json(self, *, pretty: bool = False) -> bytes:
        """Return the verdict encoded as JSON bytes.

        Returns
        -------
        bytes
            JSON payload.
        """
        return dumps_json(self, pretty=pretty)


__all__ = [
    "ChangeVerdict",
    "FingerprintResult",
    "ResolutionIssue",
]
