from __future__ import annotations

import logging
from itertools import takewhile
from typing import Protocol

from .models import DisplayInfo


logger = logging.getLogger(__name__)

DEFAULT_REFRESH_RATE = 60.0
_ACTIVE_MARKER = "*"
_PREFERRED_MARKER = "+"


class DisplayQuery(Protocol):
    def query(self) -> str: ...


def _is_connected_header(line: str) -> bool:
    return " connected" in line and "disconnected" not in line


def _is_indented(line: str) -> bool:
    return line[:1].isspace()


def _parse_size(text: str) -> tuple[int, int] | None:
    width_text, sep, height_text = text.partition("x")
    if not sep or not width_text.isdigit() or not height_text.isdigit():
        return None
    width = int(width_text)
    height = int(height_text)
    if width <= 0 or height <= 0:
        return None
    return width, height


def _geometry_from_header(line: str) -> tuple[int, int] | None:
    for token in line.split():
        if "x" not in token or "+" not in token:
            continue
        size_part, _, position = token.partition("+")
        x_text, _, y_text = position.partition("+")
        if not x_text.isdigit() or not y_text.isdigit():
            continue
        size = _parse_size(size_part)
        if size is not None:
            return size
    return None


def _refresh_rate(tokens: list[str]) -> float:
    for token in tokens:
        if _ACTIVE_MARKER not in token:
            continue
        try:
            return float(token.rstrip(_ACTIVE_MARKER + _PREFERRED_MARKER))
        except ValueError:
            continue
    return DEFAULT_REFRESH_RATE


def _active_mode(mode_lines: list[str]) -> tuple[tuple[int, int], float] | None:
    for line in mode_lines:
        if _ACTIVE_MARKER not in line:
            continue
        tokens = line.split()
        if not tokens:
            continue
        leading = "".join(takewhile(lambda c: c.isdigit() or c == "x", tokens[0]))
        size = _parse_size(leading)
        if size is None:
            continue
        return size, _refresh_rate(tokens[1:])
    return None


def parse_displays(report: str) -> list[DisplayInfo]:
    """Parse an ``xrandr --current`` report into connected displays.

    The active size comes from the ``WxH+X+Y`` geometry on the output header
    and falls back to the first mode line carrying ``*`` inside that output's
    indented block. Outputs with neither are dropped.
    """
    lines = report.splitlines()
    displays: list[DisplayInfo] = []

    for index, line in enumerate(lines):
        if _is_indented(line) or not _is_connected_header(line):
            continue
        tokens = line.split()
        if not tokens:
            continue

        mode_lines: list[str] = []
        for following in lines[index + 1 :]:
            if not _is_indented(following):
                break
            mode_lines.append(following)

        active = _active_mode(mode_lines)
        size = _geometry_from_header(line)
        if size is not None:
            refresh_rate = active[1] if active is not None else DEFAULT_REFRESH_RATE
        elif active is not None:
            size, refresh_rate = active
        else:
            logger.debug("No active resolution for %s, skipping", tokens[0])
            continue

        width, height = size
        displays.append(
            DisplayInfo(
                name=tokens[0],
                width=width,
                height=height,
                refresh_rate=refresh_rate,
                is_primary="primary" in tokens,
            )
        )
    return displays


def list_displays(tool: DisplayQuery) -> list[DisplayInfo]:
    try:
        report = tool.query()
    except OSError as exc:
        logger.warning("Display query failed: %s", exc)
        return []

    if not report.strip():
        logger.warning("Display query returned no output.")
        return []

    displays = parse_displays(report)
    if not displays:
        logger.warning("No connected displays with an active mode were found.")
    return displays
