"""Fingerprint computation and change detection for devcontainer configurations.

``compute_fingerprint`` fails loudly when the root descriptor is missing.
``detect_change`` never raises: when the current configuration cannot be
fingerprinted the verdict reports a change, so a rebuild gate never reuses an
environment it could not verify.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from utils.file_io import is_regular_file, read_text
from utils.hashing import short_digest

from devcontainer_fingerprint.canonical import CanonicalJson, canonicalize
from devcontainer_fingerprint.composer import compose_fingerprint
from devcontainer_fingerprint.errors import MissingRequiredFileError
from devcontainer_fingerprint.models import ChangeVerdict, FingerprintResult
from devcontainer_fingerprint.references import resolve_references
from devcontainer_fingerprint.settings import DEFAULT_SETTINGS, FingerprintSettings

_LOGGER = logging.getLogger(__name__)

UNCHANGED_REASON = "Configuration unchanged"
MODIFIED_REASON = "Configuration files modified"
ERROR_REASON_PREFIX = "Error checking configuration"


def load_root_descriptor(
    config_directory: Path,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> CanonicalJson:
    """Read and canonicalize the root descriptor.

    Parameters
    ----------
    config_directory
        Directory holding the root descriptor.
    settings
        Settings naming the root descriptor file.

    Returns
    -------
    CanonicalJson
        Canonical descriptor text.

    Raises
    ------
    MissingRequiredFileError
        Raised when the root descriptor does not exist.
    """
    path = Path(config_directory) / settings.descriptor_name
    if not is_regular_file(path):
        raise MissingRequiredFileError(path)
    return canonicalize(read_text(path))


def compute_fingerprint(
    project_path: Path | str,
    config_directory: Path | str,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> FingerprintResult:
    """Compute the fingerprint of a configuration directory.

    Parameters
    ----------
    project_path
        Project root, used for diagnostics only.
    config_directory
        Directory holding the root descriptor and its referenced files.
    settings
        Fingerprint settings.

    Returns
    -------
    FingerprintResult
        Digest and per-file details.

    Raises
    ------
    MissingRequiredFileError
        Raised when the root descriptor does not exist.
    """
    _LOGGER.debug("Computing configuration hash for: %s", project_path)
    base_directory = Path(config_directory)
    try:
        root = load_root_descriptor(base_directory, settings=settings)
        references = resolve_references(root.text, base_directory)
        return compose_fingerprint(
            root.text,
            build_file=references.build_file,
            compose_file=references.compose_file,
            features=references.features,
            issues=references.issues,
            settings=settings,
        )
    except Exception:
        _LOGGER.exception("Failed to compute configuration hash")
        raise


def compute_digest(
    project_path: Path | str,
    config_directory: Path | str,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> str:
    """Return only the digest of a configuration directory.

    Returns
    -------
    str
        Lowercase hex digest.
    """
    return compute_fingerprint(project_path, config_directory, settings=settings).digest


def detect_change(
    project_path: Path | str,
    config_directory: Path | str,
    stored_digest: str,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> ChangeVerdict:
    """Compare the current configuration against a stored digest.

    Parameters
    ----------
    project_path
        Project root, used for diagnostics only.
    config_directory
        Directory holding the root descriptor and its referenced files.
    stored_digest
        Digest recorded when the environment was last built.
    settings
        Fingerprint settings; must match those used for ``stored_digest``.

    Returns
    -------
    ChangeVerdict
        Verdict for the comparison. Failures are reported as changes.
    """
    _LOGGER.debug(
        "Checking configuration changes against stored hash: %s",
        short_digest(stored_digest, 16),
    )
    try:
        current = compute_fingerprint(project_path, config_directory, settings=settings)
    except Exception as exc:
        _LOGGER.exception("Failed to check configuration changes")
        return ChangeVerdict(
            stored_digest=stored_digest,
            changed=True,
            reason=f"{ERROR_REASON_PREFIX}: {exc}",
        )
    if current.digest == stored_digest:
        _LOGGER.debug("Configuration unchanged (hash match)")
        return ChangeVerdict(
            stored_digest=stored_digest,
            current_digest=current.digest,
            changed=False,
            reason=UNCHANGED_REASON,
            details=current,
        )
    _LOGGER.info(
        "Configuration changed: current hash %s != stored hash %s",
        short_digest(current.digest, 16),
        short_digest(stored_digest, 16),
    )
    return ChangeVerdict(
        stored_digest=stored_digest,
        current_digest=current.digest,
        changed=True,
        reason=MODIFIED_REASON,
        changed_files=current.included_files,
        details=current,
    )


async def compute_fingerprint_async(
    project_path: Path | str,
    config_directory: Path | str,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> FingerprintResult:
    """Compute a fingerprint without blocking the running event loop.

    Returns
    -------
    FingerprintResult
        Digest and per-file details.
    """
    return await asyncio.to_thread(
        compute_fingerprint,
        project_path,
        config_directory,
        settings=settings,
    )


async def detect_change_async(
    project_path: Path | str,
    config_directory: Path | str,
    stored_digest: str,
    *,
    settings: FingerprintSettings = DEFAULT_SETTINGS,
) -> ChangeVerdict:
    """Compare against a stored digest without blocking the running event loop.

    Returns
    -------
    ChangeVerdict
        Verdict for the comparison. Failures are reported as changes.
    """
    return await asyncio.to_thread(
        detect_change,
        project_path,
        config_directory,
        stored_digest,
        settings=settings,
    )


__all__ = [
    "ERROR_REASON_PREFIX",
    "MODIFIED_REASON",
    "UNCHANGED_REASON",
    "compute_digest",
    "compute_fingerprint",
    "compute_fingerprint_async",
    "detect_change",
    "detect_change_async",
    "load_root_descriptor",
]
