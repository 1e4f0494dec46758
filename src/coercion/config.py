"""Coercion policy configuration."""

from __future__ import annotations

from enum import StrEnum

from schema_spec.walker import DecimalScaleSource
from serde_msgspec import StructBaseStrict, to_builtins
from utils.env_utils import env_enum
from utils.hashing import hash_json_canonical

DEFAULT_ENV_PREFIX = "RECORD_COERCION_"
_POLICY_VERSION = 1


class MissingFieldPolicy(StrEnum):
    """Handling of absent or null values for non-nullable fields."""

    ERROR = "error"
    NULL = "null"


class DecimalRoundingPolicy(StrEnum):
    """Handling of decimals with more fractional digits than the scale."""

    REJECT = "reject"
    HALF_EVEN = "half_even"


class TimestampMicrosPolicy(StrEnum):
    """Unit arithmetic for ``timestamp-micros`` values.

    ``EXACT`` keeps every microsecond. ``MILLIS_SCALED`` floors to whole
    milliseconds before scaling, matching writers that derive micros from
    epoch millis.
    """

    EXACT = "exact"
    MILLIS_SCALED = "millis_scaled"


class CoercionPolicy(StructBaseStrict, frozen=True):
    """Policy knobs for a ValueCoercer."""

    missing_required: MissingFieldPolicy = MissingFieldPolicy.ERROR
    decimal_rounding: DecimalRoundingPolicy = DecimalRoundingPolicy.REJECT
    decimal_scale_source: DecimalScaleSource = DecimalScaleSource.LOGICAL_TYPE
    timestamp_micros: TimestampMicrosPolicy = TimestampMicrosPolicy.EXACT

    def fingerprint_payload(self) -> dict[str, object]:
        """Return the canonical payload for fingerprinting.

        Returns
        -------
        dict[str, object]
            Versioned policy payload.
        """
        payload = to_builtins(self)
        if not isinstance(payload, dict):
            msg = "Policy payload must encode to a mapping."
            raise TypeError(msg)
        return {"version": _POLICY_VERSION, **payload}

    def fingerprint(self) -> str:
        """Return a deterministic fingerprint for the policy.

        Returns
        -------
        str
            SHA-256 hexdigest.
        """
        return hash_json_canonical(self.fingerprint_payload(), str_keys=True)


DEFAULT_POLICY = CoercionPolicy()


def policy_from_env(prefix: str = DEFAULT_ENV_PREFIX) -> CoercionPolicy:
    """Build a policy from environment variables.

    Reads ``<prefix>MISSING_REQUIRED``, ``<prefix>DECIMAL_ROUNDING``,
    ``<prefix>DECIMAL_SCALE_SOURCE`` and ``<prefix>TIMESTAMP_MICROS``. Unset
    or invalid values keep the defaults; invalid values are logged.

    Returns
    -------
    CoercionPolicy
        Resolved policy.
    """
    return CoercionPolicy(
        missing_required=env_enum(
            f"{prefix}MISSING_REQUIRED",
            MissingFieldPolicy,
            default=DEFAULT_POLICY.missing_required,
            log_invalid=True,
        ),
        decimal_rounding=env_enum(
            f"{prefix}DECIMAL_ROUNDING",
            DecimalRoundingPolicy,
            default=DEFAULT_POLICY.decimal_rounding,
            log_invalid=True,
        ),
        decimal_scale_source=env_enum(
            f"{prefix}DECIMAL_SCALE_SOURCE",
            DecimalScaleSource,
            default=DEFAULT_POLICY.decimal_scale_source,
            log_invalid=True,
        ),
        timestamp_micros=env_enum(
            f"{prefix}TIMESTAMP_MICROS",
            TimestampMicrosPolicy,
            default=DEFAULT_POLICY.timestamp_micros,
            log_invalid=True,
        ),
    )


__all__ = [
    "DEFAULT_ENV_PREFIX",
    "DEFAULT_POLICY",
    "CoercionPolicy",
    "DecimalRoundingPolicy",
    "MissingFieldPolicy",
    "TimestampMicrosPolicy",
    "policy_from_env",
]
