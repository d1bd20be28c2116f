"""Settings for configuration fingerprinting.

Changing any value here changes every digest produced with it, so stored
digests are only comparable when produced with identical settings.
"""

from __future__ import annotations

from serde_msgspec import StructBaseStrict
from utils.env_utils import env_text
from utils.hashing import DEFAULT_ALGORITHM, hash_json_canonical, supported_algorithms

from devcontainer_fingerprint.errors import FingerprintConfigError

DEFAULT_DESCRIPTOR_NAME = "devcontainer.json"
RESULT_FORMAT_VERSION = 1

DESCRIPTOR_ENV_VAR = "DEVCONTAINER_FINGERPRINT_DESCRIPTOR"
ALGORITHM_ENV_VAR = "DEVCONTAINER_FINGERPRINT_ALGORITHM"


class FingerprintSettings(StructBaseStrict, frozen=True):
    """Inputs that shape the fingerprint independent of file content."""

    descriptor_name: str = DEFAULT_DESCRIPTOR_NAME
    algorithm: str = DEFAULT_ALGORITHM
    format_version: int = RESULT_FORMAT_VERSION

    def __post_init__(self) -> None:
        """Validate settings values.

        Raises
        ------
        FingerprintConfigError
            Raised when the descriptor name or algorithm is unusable.
        """
        name = self.descriptor_name.strip()
        if not name or "/" in name or "\\" in name:
            msg = f"Descriptor name must be a bare file name, got {self.descriptor_name!r}."
            raise FingerprintConfigError(msg)
        if self.algorithm not in supported_algorithms():
            msg = (
                f"Unsupported digest algorithm {self.algorithm!r}; "
                f"expected one of {', '.join(supported_algorithms())}."
            )
            raise FingerprintConfigError(msg)
        if self.format_version < 1:
            msg = f"Result format version must be positive, got {self.format_version}."
            raise FingerprintConfigError(msg)

    def fingerprint_payload(self) -> dict[str, object]:
        """Return the payload identifying these settings.

        Returns
        -------
        dict[str, object]
            Settings payload.
        """
        return {
            "descriptor_name": self.descriptor_name,
            "algorithm": self.algorithm,
            "format_version": self.format_version,
        }

    def fingerprint(self) -> str:
        """Return a deterministic hash of the settings.

        Returns
        -------
        str
            SHA-256 hexdigest of the settings payload.
        """
        return hash_json_canonical(self.fingerprint_payload())


DEFAULT_SETTINGS = FingerprintSettings()


def settings_from_env() -> FingerprintSettings:
    """Build settings from environment variables, falling back to defaults.

    Returns
    -------
    FingerprintSettings
        Resolved settings.
    """
    return FingerprintSettings(
        descriptor_name=env_text(DESCRIPTOR_ENV_VAR, default=DEFAULT_DESCRIPTOR_NAME)
        or DEFAULT_DESCRIPTOR_NAME,
        algorithm=(env_text(ALGORITHM_ENV_VAR, default=DEFAULT_ALGORITHM) or DEFAULT_ALGORITHM).lower(),
    )


__all__ = [
    "ALGORITHM_ENV_VAR",
    "DEFAULT_DESCRIPTOR_NAME",
    "DEFAULT_SETTINGS",
    "DESCRIPTOR_ENV_VAR",
    "RESULT_FORMAT_VERSION",
    "FingerprintSettings",
    "settings_from_env",
]
