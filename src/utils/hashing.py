"""Explicit hash utilities with stable serialization semantics."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from serde_msgspec import JSON_ENCODER_SORTED, to_builtins

if TYPE_CHECKING:
    from hashlib import _Hash

DEFAULT_ALGORITHM = "sha256"

# Collision-resistant digests of at least 160 bits.
_ALGORITHMS: Mapping[str, Callable[[], _Hash]] = {
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
    "sha3_256": hashlib.sha3_256,
    "sha3_512": hashlib.sha3_512,
    "blake2b": hashlib.blake2b,
}


def supported_algorithms() -> tuple[str, ...]:
    """Return the digest algorithm names accepted by this module.

    Returns
    -------
    tuple[str, ...]
        Sorted algorithm names.
    """
    return tuple(sorted(_ALGORITHMS))


def new_hasher(algorithm: str = DEFAULT_ALGORITHM) -> _Hash:
    """Return a fresh hash object for a supported algorithm.

    Parameters
    ----------
    algorithm
        Algorithm name, see ``supported_algorithms``.

    Returns
    -------
    _Hash
        New hash object.

    Raises
    ------
    ValueError
        Raised when the algorithm is not supported.
    """
    factory = _ALGORITHMS.get(algorithm)
    if factory is None:
        msg = (
            f"Unsupported digest algorithm {algorithm!r}; "
            f"expected one of {', '.join(supported_algorithms())}."
        )
        raise ValueError(msg)
    return factory()


def hash_bytes(payload: bytes, *, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the lowercase hex digest of raw bytes.

    Parameters
    ----------
    payload
        Raw bytes to hash.
    algorithm
        Algorithm name.

    Returns
    -------
    str
        Hex digest string.
    """
    hasher = new_hasher(algorithm)
    hasher.update(payload)
    return hasher.hexdigest()


def hash_text(value: str, *, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the lowercase hex digest of the UTF-8 encoding of ``value``.

    Parameters
    ----------
    value
        Text to hash.
    algorithm
        Algorithm name.

    Returns
    -------
    str
        Hex digest string.
    """
    return hash_bytes(value.encode("utf-8"), algorithm=algorithm)


def hash_sha256_hex(payload: bytes, *, length: int | None = None) -> str:
    """Return SHA-256 hex digest, optionally truncated.

    Parameters
    ----------
    payload
        Raw bytes to hash.
    length
        Optional length of hex digest to return.

    Returns
    -------
    str
        Hex digest string (possibly truncated).
    """
    digest = hashlib.sha256(payload).hexdigest()
    return digest if length is None else digest[:length]


def hash_json_canonical(payload: object, *, str_keys: bool = False) -> str:
    """Return SHA-256 hexdigest of a payload encoded with sorted keys.

    Parameters
    ----------
    payload
        Payload to encode.
    str_keys
        Whether to coerce mapping keys to strings.

    Returns
    -------
    str
        SHA-256 hexdigest.
    """
    buffer = bytearray()
    JSON_ENCODER_SORTED.encode_into(to_builtins(payload, str_keys=str_keys), buffer)
    return hash_sha256_hex(bytes(buffer))


def short_digest(digest: str | None, length: int = 8) -> str:
    """Return an abbreviated digest for log messages."""
    if not digest:
        return "<none>"
    return digest if len(digest) <= length else f"{digest[:length]}..."


__all__ = [
    "DEFAULT_ALGORITHM",
    "hash_bytes",
    "hash_json_canonical",
    "hash_sha256_hex",
    "hash_text",
    "new_hasher",
    "short_digest",
    "supported_algorithms",
]
