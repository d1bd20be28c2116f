"""Shared utilities for devcontainer fingerprinting."""

from utils.env_utils import env_text
from utils.file_io import is_regular_file, read_text
from utils.hashing import (
    DEFAULT_ALGORITHM,
    hash_bytes,
    hash_text,
    short_digest,
    supported_algorithms,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "env_text",
    "hash_bytes",
    "hash_text",
    "is_regular_file",
    "read_text",
    "short_digest",
    "supported_algorithms",
]
