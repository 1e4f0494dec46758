"""Stable content hashes for configuration payloads."""

from __future__ import annotations

import hashlib

from serde_msgspec import JSON_ENCODER_SORTED, to_builtins


def hash_sha256_hex(payload: bytes, *, length: int | None = None) -> str:
    """Return the SHA-256 hex digest of ``payload``, optionally truncated.

    Returns
    -------
    str
        Hex digest.
    """
    digest = hashlib.sha256(payload).hexdigest()
    return digest if length is None else digest[:length]


def hash_json_canonical(payload: object, *, str_keys: bool = False) -> str:
    """Hash a payload's sorted-key JSON encoding.

    Structs are lowered to builtins first, so a struct and the equivalent
    dict hash identically.

    Returns
    -------
    str
        SHA-256 hex digest.
    """
    buffer = bytearray()
    JSON_ENCODER_SORTED.encode_into(to_builtins(payload, str_keys=str_keys), buffer)
    return hash_sha256_hex(bytes(buffer))


__all__ = ["hash_json_canonical", "hash_sha256_hex"]
