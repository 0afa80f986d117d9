"""Environment-variable-based configuration for the tempo trainer."""

from __future__ import annotations

import os
from pathlib import Path

COUNTDOWN_SECONDS: int = int(os.environ.get("TEMPO_COUNTDOWN_SECONDS", "5"))
TICK_INTERVAL_S: float = float(os.environ.get("TEMPO_TICK_INTERVAL_S", "1.0"))
REST_EXTENSION_S: int = int(os.environ.get("TEMPO_REST_EXTENSION_S", "30"))
LOG_LEVEL: str = os.environ.get("TEMPO_LOG_LEVEL", "INFO").upper()
PLANS_DIR: Path = Path(os.environ.get("TEMPO_PLANS_DIR", "streamlit_app/plans")).expanduser()
SAMPLE_RATE: int = int(os.environ.get("TEMPO_SAMPLE_RATE", "22050"))

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
