"""Shared utility functions used across tofuboi modules.

Provides:
  - tofuboi_dir(): resolve config directory from TOFUBOI_DIR env var.
  - parse_csv(): split a comma-separated env value into trimmed items.
"""

import os
from pathlib import Path

TOFUBOI_DIR_ENV = "TOFUBOI_DIR"


def tofuboi_dir() -> Path:
    """Resolve config directory from TOFUBOI_DIR env var or default ~/.tofuboi."""
    raw = os.environ.get(TOFUBOI_DIR_ENV, "")
    return Path(raw) if raw else Path.home() / ".tofuboi"


def parse_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]
