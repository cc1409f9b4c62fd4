from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .scheduler import DEFAULT_MIN_INTERVAL_S, DEFAULT_ONCE_RESET_DELAY_S


logger = logging.getLogger(__name__)

SHIFT_AMOUNT_RANGE = (1, 20)
INTERVAL_RANGE_S = (10, 600)
DEFAULT_SHIFT_AMOUNT = 1
DEFAULT_INTERVAL_S = 60


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number.", key, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be greater than 0.", key, raw)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    xrandr_binary: str = "xrandr"
    x_display: str | None = None
    min_interval_s: float = DEFAULT_MIN_INTERVAL_S
    once_reset_delay_s: float = DEFAULT_ONCE_RESET_DELAY_S
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        if env is None:
            env = os.environ
        return cls(
            xrandr_binary=env.get("PIXELSHIFT_XRANDR", "").strip() or "xrandr",
            x_display=env.get("PIXELSHIFT_DISPLAY", "").strip() or None,
            min_interval_s=_positive_float(env, "PIXELSHIFT_MIN_INTERVAL", DEFAULT_MIN_INTERVAL_S),
            once_reset_delay_s=_positive_float(
                env, "PIXELSHIFT_ONCE_DELAY", DEFAULT_ONCE_RESET_DELAY_S
            ),
            log_level=env.get("PIXELSHIFT_LOG_LEVEL", "").strip().upper() or "INFO",
        )
