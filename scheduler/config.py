"""Environment-variable-based configuration for the recompute scheduler."""

from __future__ import annotations

import os
from pathlib import Path

PROFILE_STORE_DIR: Path = Path(os.environ.get("PROFILE_STORE_DIR", "data")).expanduser()
RECOMPUTE_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "3"))
RECOMPUTE_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "0"))
