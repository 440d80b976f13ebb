"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def env_flag(name: str) -> bool:
    """Return ``True`` when the variable is set to any non-empty value."""

    return bool(os.getenv(name))


def split_list(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated value, dropping blanks and surrounding whitespace."""

    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def parse_bool(value: str | None, *, default: bool, setting: str) -> bool:
    """Parse ``value`` as 1/t/true or 0/f/false, falling back to ``default``."""

    if value is not None:
        stripped = value.strip()
        if stripped in _TRUE_VALUES:
            return True
        if stripped in _FALSE_VALUES:
            return False
    log.info("%s config not found or incorrect, defaulting to %s", setting, str(default).lower())
    return default


def parse_positive_int(value: str | None, *, default: int, setting: str) -> int:
    """Parse a strictly positive integer, falling back to ``default``."""

    if value is not None:
        try:
            parsed = int(value.strip())
        except ValueError:
            parsed = 0
        if parsed > 0:
            return parsed
    log.info("%s config not found or incorrect, defaulting to %s", setting, default)
    return default
