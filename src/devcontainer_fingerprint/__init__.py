"""Content fingerprints and change detection for devcontainer configurations."""

from devcontainer_fingerprint.canonical import (
    CanonicalJson,
    CanonicalOutcome,
    canonicalize,
    normalize_json,
)
from devcontainer_fingerprint.composer import compose_fingerprint
from devcontainer_fingerprint.detector import (
    compute_digest,
    compute_fingerprint,
    compute_fingerprint_async,
    detect_change,
    detect_change_async,
)
from devcontainer_fingerprint.errors import (
    FingerprintConfigError,
    FingerprintError,
    IssueKind,
    MissingRequiredFileError,
)
from devcontainer_fingerprint.models import ChangeVerdict, FingerprintResult, ResolutionIssue
from devcontainer_fingerprint.references import resolve_references
from devcontainer_fingerprint.settings import (
    DEFAULT_SETTINGS,
    FingerprintSettings,
    settings_from_env,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "CanonicalJson",
    "CanonicalOutcome",
    "ChangeVerdict",
    "FingerprintConfigError",
    "FingerprintError",
    "FingerprintResult",
    "FingerprintSettings",
    "IssueKind",
    "MissingRequiredFileError",
    "ResolutionIssue",
    "canonicalize",
    "compose_fingerprint",
    "compute_digest",
    "compute_fingerprint",
    "compute_fingerprint_async",
    "detect_change",
    "detect_change_async",
    "normalize_json",
    "resolve_references",
    "settings_from_env",
]
