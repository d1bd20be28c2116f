"""Canonical JSON rendering for fingerprint inputs.

Canonical text is the minified JSON encoding of a parsed document with object
keys sorted at every depth and numbers collapsed to their narrowest lossless
form. Structurally equal documents therefore render to identical text no
matter how they were formatted, commented, or ordered on disk.

Normalization is total: text that cannot be parsed, even after JSONC cleanup,
is returned unchanged and flagged with ``CanonicalOutcome.RAW``.
"""

from __future__ import annotations

import logging
import math
import re
from enum import StrEnum
from typing import cast

import msgspec

from serde_msgspec import StructBaseStrict, dumps_json_sorted, loads_json_any

_LOGGER = logging.getLogger(__name__)

EMPTY_OBJECT = "{}"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_LINE_COMMENT_RE = re.compile(r"^\s*//.*$", re.MULTILINE)
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")

type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | dict[str, JsonValue] | list[JsonValue]


class CanonicalOutcome(StrEnum):
    """How a piece of text reached its canonical form."""

    EMPTY = "empty"
    PARSED = "parsed"
    CLEANED = "cleaned"
    RAW = "raw"


class CanonicalJson(StructBaseStrict, frozen=True):
    """Canonical text plus the path taken to produce it."""

    text: str
    outcome: CanonicalOutcome

    @property
    def normalized(self) -> bool:
        """Return whether the text carries canonical-form guarantees."""
        return self.outcome is not CanonicalOutcome.RAW


def canonical_value(value: JsonValue) -> JsonValue:
    """Return ``value`` with every number collapsed to its narrowest form.

    Objects keep their keys here; sorting happens when the value is encoded.

    Parameters
    ----------
    value
        Decoded JSON value.

    Returns
    -------
    JsonValue
        Value ready for canonical encoding.

    Raises
    ------
    TypeError
        Raised when ``value`` is not a JSON value.
    """
    match value:
        case bool() | str() | None:
            return value
        case int():
            return _narrow_int(value)
        case float():
            return _narrow_float(value)
        case dict():
            return {key: canonical_value(item) for key, item in value.items()}
        case list():
            return [canonical_value(item) for item in value]
    msg = f"Unsupported JSON value type: {type(value).__name__}."
    raise TypeError(msg)


def _narrow_int(value: int) -> int | float:
    if _INT64_MIN <= value <= _INT64_MAX:
        return value
    return _narrow_float(float(value))


def _narrow_float(value: float) -> int | float:
    if not math.isfinite(value):
        msg = f"Non-finite number {value!r} has no JSON representation."
        raise ValueError(msg)
    if value.is_integer() and _INT64_MIN <= value <= _INT64_MAX:
        return int(value)
    return value


def encode_canonical(value: JsonValue) -> str:
    """Encode a JSON value as canonical text.

    Returns
    -------
    str
        Minified JSON with sorted object keys.
    """
    return dumps_json_sorted(canonical_value(value)).decode("utf-8")


def strip_jsonc_syntax(text: str) -> str:
    """Remove JSONC comments and trailing commas.

    Only ``//`` comments that start a line are removed, so URLs inside string
    values survive.

    Returns
    -------
    str
        Cleaned text. It is not guaranteed to be valid JSON.
    """
    # Comments go before trailing commas, so `1, // c` ahead of `}` also cleans.
    cleaned = _LINE_COMMENT_RE.sub("", text)
    cleaned = _BLOCK_COMMENT_RE.sub("", cleaned)
    return _TRAILING_COMMA_RE.sub(r"\1", cleaned)


def _try_canonical(text: str) -> str | None:
    try:
        return encode_canonical(cast("JsonValue", loads_json_any(text)))
    except (
        msgspec.DecodeError,
        msgspec.EncodeError,
        TypeError,
        ValueError,
        OverflowError,
        RecursionError,
    ):
        return None


def canonicalize(text: str) -> CanonicalJson:
    """Normalize JSON or JSONC text, recording which path succeeded.

    Parameters
    ----------
    text
        Arbitrary text, usually the content of a descriptor file.

    Returns
    -------
    CanonicalJson
        Canonical text and outcome. Never raises for string input.
    """
    if not text.strip():
        return CanonicalJson(text=EMPTY_OBJECT, outcome=CanonicalOutcome.EMPTY)
    direct = _try_canonical(text)
    if direct is not None:
        return CanonicalJson(text=direct, outcome=CanonicalOutcome.PARSED)
    _LOGGER.debug("Direct JSON parsing failed, retrying after comment removal")
    cleaned = _try_canonical(strip_jsonc_syntax(text))
    if cleaned is not None:
        return CanonicalJson(text=cleaned, outcome=CanonicalOutcome.CLEANED)
    _LOGGER.warning("Failed to normalize JSON after comment removal, using raw content for hashing")
    return CanonicalJson(text=text, outcome=CanonicalOutcome.RAW)


def normalize_json(text: str) -> str:
    """Return the canonical form of ``text``, or ``text`` itself if unparseable.

    Returns
    -------
    str
        Canonical JSON text, ``{}`` for blank input.
    """
    return canonicalize(text).text


__all__ = [
    "EMPTY_OBJECT",
    "CanonicalJson",
    "CanonicalOutcome",
    "JsonValue",
    "canonical_value",
    "canonicalize",
    "encode_canonical",
    "normalize_json",
    "strip_jsonc_syntax",
]
