"""
URNA v1.0: Configuration.
Shared settings and paths for the entire codebase.
"""

import os
from pathlib import Path


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


def reload() -> None:
    """Re-read every setting from the environment."""
    global URNA_DIR, DEFAULT_DB_PATH, DB_PATH, STORAGE_MODE, AUDIT_ENABLED, LOG_LEVEL

    # Base Paths
    URNA_DIR = Path(os.environ.get("URNA_DIR", str(Path.home() / ".urna"))).expanduser()

    # Database Configuration
    DEFAULT_DB_PATH = URNA_DIR / "urna.db"
    DB_PATH = os.environ.get("URNA_DB", str(DEFAULT_DB_PATH))

    # ─── Storage Backend ─────────────────────────────────────────────────
    # URNA_STORAGE: "sqlite" (default) | "memory"
    STORAGE_MODE = os.environ.get("URNA_STORAGE", "sqlite")

    # ─── Audit Trail ─────────────────────────────────────────────────────
    AUDIT_ENABLED = _flag("URNA_AUDIT", "1")

    # ─── Logging ─────────────────────────────────────────────────────────
    LOG_LEVEL = os.environ.get("URNA_LOG_LEVEL", "INFO").upper()


URNA_DIR: Path
DEFAULT_DB_PATH: Path
DB_PATH: str
STORAGE_MODE: str
AUDIT_ENABLED: bool
LOG_LEVEL: str

reload()
