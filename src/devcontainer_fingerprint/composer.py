"""Composition of tagged content segments into a configuration digest.

Segments are hashed in a fixed order: the root descriptor, the build file,
the compose file, then one segment per feature in identifier order. The final
digest covers ``"tag:content"`` for every segment joined with newlines, so
removing a referenced file changes the digest even though nothing else did.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any

from serde_msgspec import StructBaseStrict
from utils.hashing import hash_text, new_hasher, short_digest

from devcontainer_fingerprint.canonical import encode_canonical
from devcontainer_fingerprint.models import FingerprintResult, ResolutionIssue
from devcontainer_fingerprint.references import ReferencedFile
from devcontainer_fingerprint.settings import DEFAULT_SETTINGS, FingerprintSettings

_LOGGER = logging.getLogger(__name__)

ROOT_TAG = "root"
BUILD_FILE_TAG = "buildfile"
COMPOSE_TAG = "compose"
FEATURE_TAG_PREFIX = "feature:"
SEGMENT_SEPARATOR = "\n"


class HashSegment(StructBaseStrict, frozen=True):
    """One tagged input to the configuration digest.

    ``file_name`` is set only for segments backed by a file; feature segments
    leave it empty and never appear in per-file digests.
    """

    tag: str
    content: str
    file_name: str | None = None

    def render(self) -> str:
        """Return the ``tag:content`` text hashed for this segment."""
        return f"{self.tag}:{self.content}"


def feature_segment(feature_id: str, value: Any) -> HashSegment:
    """Return the segment for a single feature declaration.

    Returns
    -------
    HashSegment
        Segment tagged ``feature:<id>`` whose content is the canonical JSON of
        the identifier/value pair.
    """
    content = encode_canonical({"Key": feature_id, "Value": value})
    return HashSegment(tag=f"{FEATURE_TAG_PREFIX}{feature_id}", content=content)


def build_segments(
    root_text: str,
    *,
    root_name: str,
    build_file: ReferencedFile | None = None,
    compose_file: ReferencedFile | None = None,
    features: Iterable[tuple[str, Any]] = (),
) -> list[HashSegment]:
    """Return segments in digest order.

    ``features`` must already be sorted; the order given is the order hashed.

    Returns
    -------
    list[HashSegment]
        Ordered segments.
    """
    segments = [HashSegment(tag=ROOT_TAG, content=root_text, file_name=root_name)]
    if build_file is not None:
        segments.append(
            HashSegment(tag=BUILD_FILE_TAG, content=build_file.content, file_name=build_file.name)
        )
    if compose_file is not None:
        segments.append(
            HashSegment(tag=COMPOSE_TAG, content=compose_file.content, file_name=compose_file.name)
        )
    segments.extend(feature_segment(feature_id, value) for feature_id, value in features)
    return segments


def digest_segments(segments: Sequence[HashSegment], *, algorithm: str) -> str:
    """Return the digest of the newline-joined segment renderings.

    Returns
    -------
    str
        Lowercase hex digest.
    """
    hasher = new_hasher(algorithm)
    for index, segment in enumerate(segments):
        if index:
            hasher.update(SEGMENT_SEPARATOR.encode("utf-8"))
        hasher.update(segment.render().encode("utf-8"))
    return hasher.hexdigest()


def compose_fingerprint(
    root_text: str,
    *,
    build_file: ReferencedFile | None = None,
    compose_file: ReferencedFile | None = None,
    features: Sequence[tuple[str, Any]] = (),
    issues: Sequence[ResolutionIssue] = (),
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> FingerprintResult:
    """Reduce a root descriptor and its resolved inputs to a fingerprint.

    Parameters
    ----------
    root_text
        Canonical root descriptor text.
    build_file
        Resolved build file, if one was found.
    compose_file
        Resolved compose file, if one was found.
    features
        Feature declarations sorted by identifier.
    issues
        Non-fatal issues to carry onto the result.
    settings
        Digest algorithm, root descriptor name and result format version.

    Returns
    -------
    FingerprintResult
        Final digest with per-file digests for file-backed segments.
    """
    segments = build_segments(
        root_text,
        root_name=settings.descriptor_name,
        build_file=build_file,
        compose_file=compose_file,
        features=features,
    )
    file_digests: dict[str, str] = {}
    included_files: list[str] = []
    for segment in segments:
        if segment.file_name is None:
            continue
        file_digest = hash_text(segment.content, algorithm=settings.algorithm)
        file_digests[segment.file_name] = file_digest
        if segment.file_name not in included_files:
            included_files.append(segment.file_name)
        _LOGGER.debug("Included %s (hash: %s)", segment.file_name, short_digest(file_digest))
    if features:
        _LOGGER.debug("Included %d features in hash", len(features))
    digest = digest_segments(segments, algorithm=settings.algorithm)
    _LOGGER.info(
        "Configuration hash computed: %s (from %d files)",
        short_digest(digest, 16),
        len(included_files),
    )
    return FingerprintResult(
        timestamp=datetime.now(tz=UTC),
        version=settings.format_version,
        digest=digest,
        algorithm=settings.algorithm,
        file_digests=file_digests,
        included_files=tuple(included_files),
        issues=tuple(issues),
    )


__all__ = [
    "BUILD_FILE_TAG",
    "COMPOSE_TAG",
    "FEATURE_TAG_PREFIX",
    "ROOT_TAG",
    "HashSegment",
    "build_segments",
    "compose_fingerprint",
    "digest_segments",
    "feature_segment",
]
