"""Root descriptor parsing and referenced file discovery."""

from __future__ import annotations

import logging
from operator import itemgetter
from pathlib import Path, PurePosixPath
from typing import Any

import msgspec

from serde_msgspec import StructBaseCompat, StructBaseStrict, loads_json, validation_error_payload
from utils.file_io import is_regular_file, read_text

from devcontainer_fingerprint.errors import IssueKind
from devcontainer_fingerprint.models import ResolutionIssue

_LOGGER = logging.getLogger(__name__)

type FeatureEntry = tuple[str, Any]


class BuildSection(StructBaseCompat, frozen=True):
    """``build`` block of a root descriptor."""

    dockerfile: str | None = None


class RootDescriptor(StructBaseCompat, frozen=True):
    """Fields of a root descriptor that pull other inputs into the fingerprint.

    Every field is optional and unknown keys are ignored. Use the accessors
    rather than walking the nested fields directly.
    """

    build: BuildSection | None = None
    docker_compose_file: str | None = msgspec.field(default=None, name="dockerComposeFile")
    features: dict[str, Any] | None = None

    @property
    def build_file(self) -> str | None:
        """Return the referenced build file, if any."""
        if self.build is None:
            return None
        return _present(self.build.dockerfile)

    @property
    def compose_file(self) -> str | None:
        """Return the referenced compose file, if any."""
        return _present(self.docker_compose_file)

    def sorted_features(self) -> tuple[FeatureEntry, ...]:
        """Return feature declarations ordered by identifier.

        Returns
        -------
        tuple[FeatureEntry, ...]
            ``(feature_id, value)`` pairs in ordinal key order.
        """
        if not self.features:
            return ()
        return tuple(sorted(self.features.items(), key=itemgetter(0)))


def _present(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


class ReferencedFile(StructBaseStrict, frozen=True):
    """Auxiliary file found on disk through a descriptor reference."""

    name: str
    path: str
    content: str


class ResolvedReferences(StructBaseStrict, frozen=True):
    """Inputs discovered from a root descriptor."""

    build_file: ReferencedFile | None = None
    compose_file: ReferencedFile | None = None
    features: tuple[tuple[str, Any], ...] = ()
    issues: tuple[ResolutionIssue, ...] = ()


def parse_descriptor(canonical_root: str) -> RootDescriptor | ResolutionIssue:
    """Parse canonical root text into a descriptor view.

    Parameters
    ----------
    canonical_root
        Canonical (or raw, when normalization failed) descriptor text.

    Returns
    -------
    RootDescriptor | ResolutionIssue
        Descriptor view, or a malformed-descriptor issue when the text is not a
        JSON object of the expected shape.
    """
    try:
        return loads_json(canonical_root, target_type=RootDescriptor)
    except msgspec.ValidationError as exc:
        detail = validation_error_payload(exc)
        message = detail.get("summary", str(exc))
        if "path" in detail:
            message = f"{message} at {detail['path']}"
    except (msgspec.DecodeError, RecursionError) as exc:
        message = str(exc)
    return ResolutionIssue(kind=IssueKind.MALFORMED_DESCRIPTOR, message=message)


def normalize_reference(reference: str) -> str:
    """Return a reference with ``/`` separators and redundant parts removed.

    Returns
    -------
    str
        Normalized reference used as the file identifier.
    """
    return PurePosixPath(reference.replace("\\", "/")).as_posix()


def _load_reference(
    reference: str | None,
    *,
    base_directory: Path,
    label: str,
    issues: list[ResolutionIssue],
) -> ReferencedFile | None:
    if reference is None:
        return None
    name = normalize_reference(reference)
    path = base_directory.joinpath(*PurePosixPath(name).parts)
    if not is_regular_file(path):
        _LOGGER.warning("%s referenced but not found: %s", label, path)
        issues.append(
            ResolutionIssue(
                kind=IssueKind.MISSING_REFERENCED_FILE,
                message=f"{label} referenced but not found",
                path=name,
            )
        )
        return None
    return ReferencedFile(name=name, path=path.as_posix(), content=read_text(path))


def resolve_references(canonical_root: str, base_directory: Path) -> ResolvedReferences:
    """Locate the build file, compose file and features a descriptor declares.

    Parameters
    ----------
    canonical_root
        Canonical descriptor text.
    base_directory
        Directory that relative references are resolved against.

    Returns
    -------
    ResolvedReferences
        Loaded references. Missing files and malformed descriptors are reported
        through ``issues`` instead of raising.
    """
    parsed = parse_descriptor(canonical_root)
    if isinstance(parsed, ResolutionIssue):
        _LOGGER.warning(
            "Failed to parse root descriptor, will only hash the raw content: %s",
            parsed.message,
        )
        return ResolvedReferences(issues=(parsed,))
    issues: list[ResolutionIssue] = []
    build_file = _load_reference(
        parsed.build_file,
        base_directory=base_directory,
        label="Build file",
        issues=issues,
    )
    compose_file = _load_reference(
        parsed.compose_file,
        base_directory=base_directory,
        label="Compose file",
        issues=issues,
    )
    return ResolvedReferences(
        build_file=build_file,
        compose_file=compose_file,
        features=parsed.sorted_features(),
        issues=tuple(issues),
    )


__all__ = [
    "BuildSection",
    "FeatureEntry",
    "ReferencedFile",
    "ResolvedReferences",
    "RootDescriptor",
    "normalize_reference",
    "parse_descriptor",
    "resolve_references",
]
