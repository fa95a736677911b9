"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except Exception:
        return default


def _b(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _s(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    """Read when constructed, so a ``.env`` loaded beforehand is honoured."""

    db_path: str = field(default_factory=lambda: _s("FAMTREE_DB_PATH", "./data/famtree.db"))
    log_level: str = field(default_factory=lambda: _s("FAMTREE_LOG_LEVEL", "INFO"))

    # Version history kept on each tree document
    max_history: int = field(default_factory=lambda: _i("FAMTREE_MAX_HISTORY", 10))

    # Family join codes
    code_ttl_days: int = field(default_factory=lambda: _i("FAMTREE_CODE_TTL_DAYS", 365))
    code_max_attempts: int = field(default_factory=lambda: _i("FAMTREE_CODE_MAX_ATTEMPTS", 10))

    # Remove share grants, access requests and family codes with the tree
    cascade_delete: bool = field(default_factory=lambda: _b("FAMTREE_CASCADE_DELETE", True))


SETTINGS = Settings()
