"""Shared msgspec policy and helpers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


class StructBaseCompat(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=False,
):
    """Base struct for forward-compatible documents read from disk."""


_DEFAULT_ORDER: Literal["deterministic"] = "deterministic"

_VALIDATION_RE = re.compile(r"^(?P<summary>.*?)(?:\s+-\s+at\s+`(?P<path>[^`]+)`)?$")


def _json_enc_hook(obj: object) -> object:
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()
    raise TypeError


JSON_ENCODER = msgspec.json.Encoder(
    enc_hook=_json_enc_hook,
    order=_DEFAULT_ORDER,
    decimal_format="string",
    uuid_format="canonical",
)
JSON_ENCODER_SORTED = msgspec.json.Encoder(
    enc_hook=_json_enc_hook,
    order="sorted",
    decimal_format="string",
    uuid_format="canonical",
)
JSON_DECODER = msgspec.json.Decoder()


def to_builtins(obj: object, *, str_keys: bool = False) -> object:
    """Convert msgspec structs and supported values into builtin types.

    Parameters
    ----------
    obj
        Object to convert.
    str_keys
        Whether to coerce mapping keys to strings.

    Returns
    -------
    object
        Builtin representation of ``obj``.
    """
    return msgspec.to_builtins(
        obj,
        enc_hook=_json_enc_hook,
        order=_DEFAULT_ORDER,
        str_keys=str_keys,
    )


def validation_error_payload(exc: msgspec.ValidationError) -> dict[str, str]:
    """Normalize a msgspec ValidationError for diagnostics.

    Parameters
    ----------
    exc
        ValidationError raised by msgspec decoding/conversion.

    Returns
    -------
    dict[str, str]
        Normalized error payload containing type, summary, and optional path.
    """
    message = str(exc).strip()
    match = _VALIDATION_RE.match(message)
    payload: dict[str, str] = {"type": exc.__class__.__name__}
    if match:
        summary = (match.group("summary") or "").strip()
        if summary:
            payload["summary"] = summary
        path = match.group("path")
        if path:
            payload["path"] = path
        return payload
    payload["summary"] = message
    return payload


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns
    -------
    bytes
        JSON payload.
    """
    raw = JSON_ENCODER.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


def dumps_json_sorted(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes with sorted keys.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns
    -------
    bytes
        JSON payload with sorted keys.
    """
    raw = JSON_ENCODER_SORTED.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


def loads_json_any(buf: bytes | str) -> object:
    """Deserialize JSON into untyped builtin values.

    Parameters
    ----------
    buf
        JSON payload.

    Returns
    -------
    object
        Decoded payload.
    """
    return JSON_DECODER.decode(buf)


def loads_json[T](buf: bytes | str, *, target_type: type[T], strict: bool = True) -> T:
    """Deserialize JSON bytes into the requested type.

    Parameters
    ----------
    buf
        JSON payload.
    target_type
        Target type for decoding.
    strict
        Whether to enforce strict decoding.

    Returns
    -------
    T
        Decoded payload.
    """
    decoder = msgspec.json.Decoder(type=target_type, strict=strict)
    return decoder.decode(buf)


__all__ = [
    "JSON_DECODER",
    "JSON_ENCODER",
    "JSON_ENCODER_SORTED",
    "StructBaseCompat",
    "StructBaseStrict",
    "dumps_json",
    "dumps_json_sorted",
    "loads_json",
    "loads_json_any",
    "to_builtins",
    "validation_error_payload",
]
