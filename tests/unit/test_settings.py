"""Fingerprint settings tests."""

from __future__ import annotations

import pytest

from devcontainer_fingerprint.errors import FingerprintConfigError
from devcontainer_fingerprint.settings import (
    ALGORITHM_ENV_VAR,
    DEFAULT_SETTINGS,
    DESCRIPTOR_ENV_VAR,
    FingerprintSettings,
    settings_from_env,
)


def test_default_settings() -> None:
    """Ensure defaults match the standard descriptor and SHA-256."""
    assert DEFAULT_SETTINGS.descriptor_name == "devcontainer.json"
    assert DEFAULT_SETTINGS.algorithm == "sha256"
    assert DEFAULT_SETTINGS.format_version == 1


@pytest.mark.parametrize("name", ["", "   ", "nested/devcontainer.json", "a\\b.json"])
def test_invalid_descriptor_name_rejected(name: str) -> None:
    """Ensure descriptor names must be bare file names."""
    with pytest.raises(FingerprintConfigError, match="bare file name"):
        FingerprintSettings(descriptor_name=name)


@pytest.mark.parametrize("algorithm", ["md5", "sha1", "SHA256", ""])
def test_unsupported_algorithm_rejected(algorithm: str) -> None:
    """Ensure weak or unknown algorithms are refused."""
    with pytest.raises(FingerprintConfigError, match="Unsupported digest algorithm"):
        FingerprintSettings(algorithm=algorithm)


def test_config_error_is_value_error() -> None:
    """Ensure configuration errors can be handled as ValueError."""
    with pytest.raises(ValueError, match="positive"):
        FingerprintSettings(format_version=0)


def test_settings_fingerprint_tracks_values() -> None:
    """Ensure settings fingerprints are stable and value-sensitive."""
    same = FingerprintSettings()
    other = FingerprintSettings(algorithm="sha3_256")

    assert same.fingerprint() == DEFAULT_SETTINGS.fingerprint()
    assert other.fingerprint() != DEFAULT_SETTINGS.fingerprint()


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure environment variables override defaults."""
    monkeypatch.setenv(DESCRIPTOR_ENV_VAR, " .devcontainer.json ")
    monkeypatch.setenv(ALGORITHM_ENV_VAR, "SHA512")

    settings = settings_from_env()

    assert settings.descriptor_name == ".devcontainer.json"
    assert settings.algorithm == "sha512"


def test_settings_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure unset or blank variables fall back to defaults."""
    monkeypatch.delenv(DESCRIPTOR_ENV_VAR, raising=False)
    monkeypatch.setenv(ALGORITHM_ENV_VAR, "  ")

    assert settings_from_env() == DEFAULT_SETTINGS


def test_settings_from_env_rejects_bad_algorithm(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure invalid environment configuration fails fast."""
    monkeypatch.setenv(ALGORITHM_ENV_VAR, "md5")

    with pytest.raises(FingerprintConfigError):
        settings_from_env()
