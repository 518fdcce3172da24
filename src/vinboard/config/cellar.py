"""Cellar owner and calendar configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError

DEFAULT_OWNER_ID: Final[str] = "local-dev"


@dataclass(frozen=True, slots=True)
class CellarConfig:
    """Owner used by single-user entry points and an optional frozen calendar year."""

    owner_id: str = DEFAULT_OWNER_ID
    current_year: int | None = None


def _parse_year(raw: str) -> int:
    try:
        year = int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"VINBOARD_CURRENT_YEAR must be an integer, got {raw!r}") from exc
    if year <= 0:
        raise ConfigurationError(f"VINBOARD_CURRENT_YEAR must be positive, got {year}")
    return year


def get_cellar_config() -> CellarConfig:
    owner_id = (os.getenv("VINBOARD_OWNER_ID") or "").strip() or DEFAULT_OWNER_ID
    raw_year = os.getenv("VINBOARD_CURRENT_YEAR")
    current_year = _parse_year(raw_year) if raw_year and raw_year.strip() else None
    return CellarConfig(owner_id=owner_id, current_year=current_year)
