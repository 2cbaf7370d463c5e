from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from sqlitedit.engine import SUPPORTED_EXTENSIONS

# (label, limit); None fetches every row
ROW_LIMIT_CHOICES: list[tuple[str, Optional[int]]] = [
    ("100", 100),
    ("500", 500),
    ("1000", 1000),
    ("All", None),
]

DEFAULT_ROW_LIMIT: Optional[int] = 100

UPLOAD_TYPES: list[str] = [ext.lstrip(".") for ext in SUPPORTED_EXTENSIONS]

ENV_STRICT_TYPES = "SQLITEDIT_STRICT_TYPES"
ENV_DEFAULT_LIMIT = "SQLITEDIT_DEFAULT_LIMIT"
ENV_DB_PATH = "SQLITEDIT_DB"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    strict_types: bool = False
    default_limit: Optional[int] = DEFAULT_ROW_LIMIT
    db_path: Optional[str] = None


def _parse_limit(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return DEFAULT_ROW_LIMIT
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_ROW_LIMIT
    return None if value <= 0 else value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read runtime settings from the environment (after .env loading)."""
    env = os.environ if environ is None else environ
    return Settings(
        strict_types=env.get(ENV_STRICT_TYPES, "").strip().lower() in _TRUTHY,
        default_limit=_parse_limit(env.get(ENV_DEFAULT_LIMIT)),
        db_path=env.get(ENV_DB_PATH) or None,
    )


def limit_label(limit: Optional[int]) -> str:
    for label, value in ROW_LIMIT_CHOICES:
        if value == limit:
            return label
    return str(limit) if limit is not None else "All"


def limit_choices(*limits: Optional[int]) -> list[tuple[str, Optional[int]]]:
    """``ROW_LIMIT_CHOICES`` plus any other limit in use, numeric ones sorted before "All"."""
    known = {value for (_label, value) in ROW_LIMIT_CHOICES}
    numeric = sorted(
        {value for (_label, value) in ROW_LIMIT_CHOICES if value is not None}
        | {limit for limit in limits if limit is not None and limit not in known}
    )
    return [(limit_label(value), value) for value in numeric] + [(limit_label(None), None)]
