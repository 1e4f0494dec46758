"""Environment variable parsing for policy configuration."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import overload

_LOGGER = logging.getLogger(__name__)


def env_value(name: str) -> str | None:
    """Return the stripped value of an environment variable.

    Returns
    -------
    str | None
        Value, or ``None`` when unset or blank.
    """
    raw = os.environ.get(name, "").strip()
    return raw or None


def _normalize(text: str) -> str:
    return text.strip().lower().replace("-", "_")


@overload
def env_enum[TEnum: Enum](name: str, enum_type: type[TEnum]) -> TEnum | None: ...


@overload
def env_enum[TEnum: Enum](
    name: str,
    enum_type: type[TEnum],
    *,
    default: TEnum,
    log_invalid: bool = False,
) -> TEnum: ...


def env_enum[TEnum: Enum](
    name: str,
    enum_type: type[TEnum],
    *,
    default: TEnum | None = None,
    log_invalid: bool = False,
) -> TEnum | None:
    """Resolve an environment variable to an enum member.

    A value matches a member by value or by name, ignoring case; dashes and
    underscores are interchangeable, so ``HALF-EVEN`` selects ``half_even``.

    Parameters
    ----------
    name
        Environment variable name.
    enum_type
        Enum to resolve against.
    default
        Returned when the variable is unset or matches no member.
    log_invalid
        Log a warning naming the accepted values when nothing matches.

    Returns
    -------
    TEnum | None
        Matching member or ``default``.
    """
    raw = env_value(name)
    if raw is None:
        return default
    wanted = _normalize(raw)
    for member in enum_type:
        if _normalize(member.name) == wanted:
            return member
        if isinstance(member.value, str) and _normalize(member.value) == wanted:
            return member
    if log_invalid:
        choices = ", ".join(str(member.value) for member in enum_type)
        _LOGGER.warning("Ignoring %s=%r; expected one of: %s", name, raw, choices)
    return default


__all__ = ["env_enum", "env_value"]
