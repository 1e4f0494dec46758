"""msgspec struct base and JSON helpers for schema descriptors and policies."""

from __future__ import annotations

import re
from collections.abc import Mapping
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
    """Frozen, keyword-only struct that rejects unknown fields on decode."""


_ORDER: Literal["deterministic"] = "deterministic"

# msgspec renders "<summary> - at `$.path`".
_VALIDATION_RE = re.compile(r"^(?P<summary>.*?)(?:\s+-\s+at\s+`(?P<path>[^`]+)`)?$")


def _enc_hook(obj: object) -> object:
    # Records and read-only map values.
    if isinstance(obj, Mapping):
        return dict(obj)
    msg = f"Cannot encode {type(obj).__name__} to JSON."
    raise TypeError(msg)


JSON_ENCODER = msgspec.json.Encoder(
    enc_hook=_enc_hook,
    order=_ORDER,
    decimal_format="string",
    uuid_format="canonical",
)
JSON_ENCODER_SORTED = msgspec.json.Encoder(
    enc_hook=_enc_hook,
    order="sorted",
    decimal_format="string",
    uuid_format="canonical",
)


def validation_error_payload(exc: msgspec.DecodeError) -> dict[str, str]:
    """Split a msgspec decode or validation error into summary and JSON path.

    Returns
    -------
    dict[str, str]
        ``type`` and ``summary`` keys, plus ``path`` when msgspec reported one.
    """
    message = str(exc).strip()
    payload: dict[str, str] = {"type": type(exc).__name__, "summary": message}
    match = _VALIDATION_RE.match(message)
    if match is None:
        return payload
    payload["summary"] = match.group("summary").strip() or message
    if match.group("path"):
        payload["path"] = match.group("path")
    return payload


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize a struct or builtin payload to JSON bytes.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to indent the output.

    Returns
    -------
    bytes
        JSON payload.
    """
    raw = JSON_ENCODER.encode(obj)
    return msgspec.json.format(raw, indent=2) if pretty else raw


def loads_json[T](buf: bytes | str, *, target_type: type[T], strict: bool = True) -> T:
    """Decode JSON into ``target_type``, validating as it goes.

    Returns
    -------
    T
        Decoded value.

    Raises
    ------
    msgspec.ValidationError
        Raised when the payload does not match ``target_type``.
    """
    return msgspec.json.decode(buf, type=target_type, strict=strict)


def convert[T](obj: object, *, target_type: type[T], strict: bool = True) -> T:
    """Validate builtin data (for example parsed YAML or JSON) into ``target_type``.

    Returns
    -------
    T
        Converted value.
    """
    return msgspec.convert(obj, type=target_type, strict=strict)


def to_builtins(obj: object, *, str_keys: bool = True) -> object:
    """Lower a struct into dicts, lists and scalars.

    Returns
    -------
    object
        Builtin representation with deterministic key order.
    """
    return msgspec.to_builtins(obj, order=_ORDER, str_keys=str_keys, enc_hook=_enc_hook)


__all__ = [
    "JSON_ENCODER",
    "JSON_ENCODER_SORTED",
    "StructBaseStrict",
    "convert",
    "dumps_json",
    "loads_json",
    "to_builtins",
    "validation_error_payload",
]
