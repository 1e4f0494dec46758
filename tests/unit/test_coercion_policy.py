"""Tests for coercion policy configuration and fingerprints."""

from __future__ import annotations

import logging

import pytest

from coercion.config import (
    DEFAULT_POLICY,
    CoercionPolicy,
    DecimalRoundingPolicy,
    MissingFieldPolicy,
    TimestampMicrosPolicy,
    policy_from_env,
)
from schema_spec.walker import DecimalScaleSource
from serde_msgspec import dumps_json, loads_json

_ENV_NAMES = (
    "RECORD_COERCION_MISSING_REQUIRED",
    "RECORD_COERCION_DECIMAL_ROUNDING",
    "RECORD_COERCION_DECIMAL_SCALE_SOURCE",
    "RECORD_COERCION_TIMESTAMP_MICROS",
)
_SHA256_HEX_LENGTH = 64


@pytest.fixture(autouse=True)
def _clear_policy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    """Defaults are strict."""
    policy = CoercionPolicy()
    assert policy.missing_required is MissingFieldPolicy.ERROR
    assert policy.decimal_rounding is DecimalRoundingPolicy.REJECT
    assert policy.decimal_scale_source is DecimalScaleSource.LOGICAL_TYPE
    assert policy.timestamp_micros is TimestampMicrosPolicy.EXACT


def test_policy_from_env_unset_uses_defaults() -> None:
    """No environment overrides yields the default policy."""
    assert policy_from_env() == DEFAULT_POLICY


def test_policy_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment values select policy members by value or name."""
    monkeypatch.setenv("RECORD_COERCION_MISSING_REQUIRED", "null")
    monkeypatch.setenv("RECORD_COERCION_DECIMAL_ROUNDING", "HALF-EVEN")
    monkeypatch.setenv("RECORD_COERCION_DECIMAL_SCALE_SOURCE", "schema_props")
    monkeypatch.setenv("RECORD_COERCION_TIMESTAMP_MICROS", " Millis_Scaled ")
    policy = policy_from_env()
    assert policy.missing_required is MissingFieldPolicy.NULL
    assert policy.decimal_rounding is DecimalRoundingPolicy.HALF_EVEN
    assert policy.decimal_scale_source is DecimalScaleSource.SCHEMA_PROPS
    assert policy.timestamp_micros is TimestampMicrosPolicy.MILLIS_SCALED


def test_policy_from_env_custom_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    """The variable prefix is configurable."""
    monkeypatch.setenv("INGEST_MISSING_REQUIRED", "null")
    assert policy_from_env("INGEST_").missing_required is MissingFieldPolicy.NULL


def test_policy_from_env_logs_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Invalid values keep the default and log a warning."""
    monkeypatch.setenv("RECORD_COERCION_DECIMAL_ROUNDING", "ceiling")
    with caplog.at_level(logging.WARNING, logger="utils.env_utils"):
        policy = policy_from_env()
    assert policy.decimal_rounding is DecimalRoundingPolicy.REJECT
    assert "RECORD_COERCION_DECIMAL_ROUNDING" in caplog.text


def test_fingerprint_is_stable_and_distinguishing() -> None:
    """Equal policies share a fingerprint; different ones do not."""
    strict = CoercionPolicy()
    lenient = CoercionPolicy(missing_required=MissingFieldPolicy.NULL)
    assert strict.fingerprint() == DEFAULT_POLICY.fingerprint()
    assert strict.fingerprint() != lenient.fingerprint()
    assert len(strict.fingerprint()) == _SHA256_HEX_LENGTH
    assert lenient.fingerprint_payload()["version"] == 1


def test_policy_json_round_trip() -> None:
    """Policies serialize as plain JSON."""
    policy = CoercionPolicy(
        decimal_rounding=DecimalRoundingPolicy.HALF_EVEN,
        timestamp_micros=TimestampMicrosPolicy.MILLIS_SCALED,
    )
    assert loads_json(dumps_json(policy), target_type=CoercionPolicy) == policy
