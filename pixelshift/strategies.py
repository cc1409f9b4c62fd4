from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .models import CommandResult, DisplayInfo, ShiftOffset, ShiftStrategy


IDENTITY_MATRIX = "1,0,0,0,1,0,0,0,1"
TRANSFORM_FB_MARGIN = 2
SMOOTH_PANNING_MARGIN = 10


class CommandRunner(Protocol):
    def execute(self, args: Sequence[str]) -> CommandResult: ...


@dataclass(frozen=True)
class ShiftCommand:
    args: tuple[str, ...]
    description: str


def transform_matrix(display: DisplayInfo, dx: int, dy: int) -> str:
    if display.width <= 0 or display.height <= 0:
        raise ValueError("Display width and height must be positive.")
    if dx == 0 and dy == 0:
        return IDENTITY_MATRIX
    tx = dx / display.width
    ty = dy / display.height
    return f"1,0,{tx:.6f},0,1,{ty:.6f},0,0,1"


def position_string(dx: int, dy: int) -> str:
    # xrandr reads the sign of each coordinate literally: "3+3", "-3+3", "3-3", "-3-3".
    if dy >= 0:
        return f"{dx}+{dy}"
    return f"{dx}{dy}"


def _panning_area(display: DisplayInfo, dx: int, dy: int, margin: int) -> str:
    return f"{display.width + margin}x{display.height + margin}+{dx}+{dy}"


def build_shift_command(
    display: DisplayInfo, dx: int, dy: int, strategy: ShiftStrategy
) -> ShiftCommand:
    """Return the xrandr arguments (without the binary) for one shift."""
    output = ["--output", display.name]

    if strategy is ShiftStrategy.TRANSFORM_MATRIX:
        matrix = transform_matrix(display, dx, dy)
        fb_width = display.width + TRANSFORM_FB_MARGIN
        fb_height = display.height + TRANSFORM_FB_MARGIN
        args = [
            *output,
            "--mode",
            f"{display.width}x{display.height}",
            "--fb",
            f"{fb_width}x{fb_height}",
            "--transform",
            matrix,
        ]
        description = f"transform {matrix} (FB {fb_width}x{fb_height})"
    elif strategy is ShiftStrategy.PANNING_SMOOTH:
        area = _panning_area(display, dx, dy, SMOOTH_PANNING_MARGIN)
        args = [*output, "--panning", area]
        description = f"smooth panning {area}"
    elif strategy is ShiftStrategy.PANNING_BASIC:
        area = _panning_area(display, dx, dy, 0)
        args = [*output, "--panning", area]
        description = f"basic panning {area}"
    elif strategy is ShiftStrategy.POSITION_OFFSET:
        position = position_string(dx, dy)
        args = [*output, "--pos", position]
        description = f"position {position}"
    else:
        raise ValueError(f"Unsupported shift strategy: {strategy!r}")

    return ShiftCommand(args=tuple(args), description=description)


def apply_shift(
    runner: CommandRunner,
    display: DisplayInfo,
    offset: ShiftOffset,
    strategy: ShiftStrategy,
) -> tuple[bool, str]:
    command = build_shift_command(display, offset.dx, offset.dy, strategy)
    result = runner.execute(command.args)
    state = "SHIFTED" if (offset.dx, offset.dy) != (0, 0) else "BASE"

    if not result.success:
        detail = result.stderr.strip() or "unknown error"
        return False, f"FAILED: {display.name} {command.description}: {detail}"
    return True, (
        f"SUCCESS: {display.name} set to {state} "
        f"(offset {offset.dx},{offset.dy}; {command.description})."
    )
