import logging
import os
from typing import List

THEMES = ("light", "dark")


def parse_theme(value: str) -> str:
    """Normalise a theme name from the environment; raises ValueError for anything but light/dark."""
    theme = value.strip().lower()
    if theme not in THEMES:
        raise ValueError(f"Invalid theme {value!r}, expected one of {', '.join(THEMES)}")
    return theme


AI_DELAY_MIN_MS = int(os.getenv("TTT_AI_DELAY_MIN_MS", "450"))
AI_DELAY_MAX_MS = int(os.getenv("TTT_AI_DELAY_MAX_MS", "700"))
DEFAULT_THEME = parse_theme(os.getenv("TTT_DEFAULT_THEME", "light"))
CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("TTT_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("TTT_LOG_LEVEL", "INFO").upper()
HOST = os.getenv("TTT_HOST", "0.0.0.0")
PORT = int(os.getenv("TTT_PORT", "8000"))

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=LOG_LEVEL,
)
logger = logging.getLogger("tic_tac_toe")
