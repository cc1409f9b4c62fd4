from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class DisplayInfo:
    name: str
    width: int
    height: int
    refresh_rate: float = 60.0
    is_primary: bool = False


@dataclass(frozen=True)
class ShiftOffset:
    dx: int
    dy: int


class ShiftStrategy(Enum):
    TRANSFORM_MATRIX = "Transform matrix"
    PANNING_SMOOTH = "Panning (smooth)"
    POSITION_OFFSET = "Position offset"
    PANNING_BASIC = "Panning (basic)"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> ShiftStrategy:
        for strategy in cls:
            if strategy.value == label:
                return strategy
        raise ValueError(f"Unknown shift strategy: {label!r}")


@dataclass(frozen=True)
class CommandResult:
    success: bool
    stdout: str
    stderr: str


@dataclass(frozen=True)
class ShiftConfig:
    display: DisplayInfo
    shift_amount: int
    interval_s: float
    strategy: ShiftStrategy
    use_pattern: bool
