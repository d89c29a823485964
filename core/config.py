"""Runtime configuration read from the environment."""

from __future__ import annotations

import logging
import os

TAX_INS_URL = os.getenv(
    "DSCR_TAX_INS_URL",
    "https://raw.githubusercontent.com/johnLOANking/reference/refs/heads/main/Tax_ins.json",
)
RATES_URL = os.getenv(
    "DSCR_RATES_URL",
    "https://raw.githubusercontent.com/johnLOANking/reference/refs/heads/main/rates.json",
)
DSCR_MESSAGES_URL = os.getenv(
    "DSCR_MESSAGES_URL",
    "https://raw.githubusercontent.com/johnLOANking/reference/refs/heads/main/dscr/result_messages.json",
)
APP_URL = os.getenv("DSCR_APP_URL", "http://localhost:8501/")

DEFAULT_HTTP_TIMEOUT = 10.0


def http_timeout() -> float:
    """Request timeout in seconds from ``DSCR_HTTP_TIMEOUT``."""
    raw = os.getenv("DSCR_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT


def configure_logging() -> None:
    level = os.getenv("DSCR_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
