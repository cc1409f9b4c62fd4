from __future__ import annotations

from .models import ShiftOffset


def _ring(amount: int) -> tuple[ShiftOffset, ...]:
    a = amount
    return (
        ShiftOffset(0, 0),
        ShiftOffset(a, 0),
        ShiftOffset(a, a),
        ShiftOffset(0, a),
        ShiftOffset(-a, a),
        ShiftOffset(-a, 0),
        ShiftOffset(-a, -a),
        ShiftOffset(0, -a),
        ShiftOffset(a, -a),
    )


class ShiftPattern:
    """Center followed by the eight neighbours, clockwise from the right."""

    def __init__(self, amount: int) -> None:
        if amount < 1:
            raise ValueError("Shift amount must be at least 1 px.")
        self._positions = _ring(int(amount))
        self._cursor = 0

    @property
    def positions(self) -> tuple[ShiftOffset, ...]:
        return self._positions

    @property
    def cursor(self) -> int:
        return self._cursor

    def next(self) -> ShiftOffset:
        offset = self._positions[self._cursor]
        self._cursor = (self._cursor + 1) % len(self._positions)
        return offset

    def reset(self) -> None:
        self._cursor = 0
