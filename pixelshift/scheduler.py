from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .displays import DisplayQuery, list_displays
from .models import DisplayInfo, ShiftOffset, ShiftStrategy
from .pattern import ShiftPattern
from .reset import reset_display
from .strategies import CommandRunner, apply_shift


logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_S = 1.0
DEFAULT_ONCE_RESET_DELAY_S = 2.0
_JOIN_TIMEOUT_S = 2.0


class DisplayTool(CommandRunner, DisplayQuery, Protocol):
    pass


class ShiftWorker(threading.Thread):
    """Calls ``tick`` every ``interval_s`` seconds until ``stop_event`` is set."""

    def __init__(
        self,
        interval_s: float,
        stop_event: threading.Event,
        tick: Callable[[], None],
        on_error: Callable[[Exception], None] | None,
    ) -> None:
        super().__init__(name="ShiftWorker", daemon=True)
        if interval_s <= 0:
            raise ValueError("Interval must be greater than 0 seconds.")

        self._interval_s = float(interval_s)
        self._stop_event = stop_event
        self._tick = tick
        self._on_error = on_error

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def run(self) -> None:
        while not self._stop_event.wait(self._interval_s):
            try:
                self._tick()
            except Exception as exc:  # noqa: BLE001
                if self._on_error is not None:
                    self._on_error(exc)
                break


class OneShotShift(threading.Thread):
    """Runs ``revert`` once after ``delay_s`` unless cancelled first."""

    def __init__(self, delay_s: float, revert: Callable[[], None]) -> None:
        super().__init__(name="OneShotShift", daemon=True)
        self._delay_s = max(0.0, float(delay_s))
        self._revert = revert
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self) -> None:
        if self._cancelled.wait(self._delay_s):
            return
        self._revert()


@dataclass(frozen=True)
class StartCommand:
    display: DisplayInfo | None
    amount: int
    interval_s: float
    strategy: ShiftStrategy = ShiftStrategy.TRANSFORM_MATRIX
    use_pattern: bool = False


@dataclass(frozen=True)
class StopCommand:
    display: DisplayInfo | None = None


@dataclass(frozen=True)
class ShiftOnceCommand:
    display: DisplayInfo | None
    amount: int
    strategy: ShiftStrategy = ShiftStrategy.TRANSFORM_MATRIX


SchedulerCommand = StartCommand | StopCommand | ShiftOnceCommand


@dataclass
class _RunState:
    display: DisplayInfo
    amount: int
    strategy: ShiftStrategy
    pattern: ShiftPattern | None
    stop_event: threading.Event
    worker: ShiftWorker | None = None
    shifted: bool = False

    def next_offset(self) -> ShiftOffset:
        if self.pattern is not None:
            return self.pattern.next()
        self.shifted = not self.shifted
        if self.shifted:
            return ShiftOffset(self.amount, self.amount)
        return ShiftOffset(0, 0)


class ShiftScheduler:
    """Drives periodic shifts of one display and restores it on stop.

    All xrandr calls go through a single lock, so a tick that is already
    running finishes before ``stop`` resets the display. Every public method
    returns a status string instead of raising.
    """

    def __init__(
        self,
        tool: DisplayTool,
        *,
        on_status: Callable[[str], None] | None = None,
        min_interval_s: float = DEFAULT_MIN_INTERVAL_S,
        once_reset_delay_s: float = DEFAULT_ONCE_RESET_DELAY_S,
    ) -> None:
        if min_interval_s <= 0:
            raise ValueError("Minimum interval must be greater than 0 seconds.")
        self._tool = tool
        self._on_status = on_status
        self._min_interval_s = float(min_interval_s)
        self._once_reset_delay_s = float(once_reset_delay_s)

        self._state_lock = threading.Lock()
        self._tool_lock = threading.Lock()
        self._running: _RunState | None = None
        self._last_display: DisplayInfo | None = None
        self._one_shot: OneShotShift | None = None

    @property
    def is_running(self) -> bool:
        return self._running is not None

    def list_displays(self) -> list[DisplayInfo]:
        return list_displays(self._tool)

    def dispatch(self, command: SchedulerCommand) -> str:
        if isinstance(command, StartCommand):
            return self.start(
                command.display,
                command.amount,
                command.interval_s,
                strategy=command.strategy,
                use_pattern=command.use_pattern,
            )
        if isinstance(command, StopCommand):
            return self.stop(display=command.display)
        if isinstance(command, ShiftOnceCommand):
            return self.shift_once(command.display, command.amount, strategy=command.strategy)
        return self._report(f"ERROR: Unsupported command {command!r}.")

    def start(
        self,
        display: DisplayInfo | None,
        amount: int,
        interval_s: float,
        strategy: ShiftStrategy = ShiftStrategy.TRANSFORM_MATRIX,
        use_pattern: bool = False,
    ) -> str:
        with self._state_lock:
            if self._running is not None:
                return self._report(
                    f"Auto-shift already running on {self._running.display.name}."
                )
            if display is None:
                return self._report("ERROR: No display selected to start auto-shift.")

            try:
                pattern = ShiftPattern(amount) if use_pattern else None
            except ValueError as exc:
                return self._report(f"ERROR: Cannot start auto-shift: {exc}")

            period = max(float(interval_s), self._min_interval_s)
            state = _RunState(
                display=display,
                amount=int(amount),
                strategy=strategy,
                pattern=pattern,
                stop_event=threading.Event(),
            )
            state.worker = ShiftWorker(
                interval_s=period,
                stop_event=state.stop_event,
                tick=lambda: self._tick(state),
                on_error=lambda exc: self._on_worker_error(state, exc),
            )
            self._running = state
            self._last_display = display
            state.worker.start()

        mode = "pattern" if use_pattern else "toggle"
        return self._report(
            f"Auto-shift STARTED for {display.name} every {period:g}s "
            f"({strategy.label}, {mode}, {amount}px)."
        )

    def stop(self, display: DisplayInfo | None = None) -> str:
        with self._state_lock:
            state = self._running
            self._running = None
            if state is not None:
                state.stop_event.set()
                if state.pattern is not None:
                    state.pattern.reset()
                state.shifted = False
            target = display
            if target is None:
                target = state.display if state is not None else self._last_display

        if target is None:
            return self._report("ERROR: No display selected to reset.")

        # A pending one-shot revert must not re-apply a shift after the reset.
        self._cancel_one_shot()
        with self._tool_lock:
            outcome = reset_display(self._tool, target)

        if not outcome.success:
            return self._report(outcome.message)
        prefix = "Auto-shift STOPPED. " if state is not None else ""
        return self._report(f"{prefix}{outcome.message}")

    def shift_once(
        self,
        display: DisplayInfo | None,
        amount: int,
        strategy: ShiftStrategy = ShiftStrategy.TRANSFORM_MATRIX,
    ) -> str:
        if display is None:
            return self._report("ERROR: No display selected to shift.")

        self._cancel_one_shot()
        with self._tool_lock:
            ok, message = apply_shift(
                self._tool, display, ShiftOffset(amount, amount), strategy
            )
        self._last_display = display

        one_shot = OneShotShift(
            self._once_reset_delay_s,
            revert=lambda: self._revert_one_shot(display, strategy),
        )
        self._one_shot = one_shot
        one_shot.start()

        if ok:
            message = f"{message} Reverting in {self._once_reset_delay_s:g}s."
        return self._report(message)

    def close(self) -> None:
        state = self._running
        if state is not None:
            self.stop()
        self._cancel_one_shot()
        if (
            state is not None
            and state.worker is not None
            and state.worker is not threading.current_thread()
        ):
            state.worker.join(timeout=_JOIN_TIMEOUT_S)

    def _tick(self, state: _RunState) -> None:
        with self._tool_lock:
            if state.stop_event.is_set():
                return
            offset = state.next_offset()
            _ok, message = apply_shift(self._tool, state.display, offset, state.strategy)
        self._report(message)

    def _on_worker_error(self, state: _RunState, exc: Exception) -> None:
        logger.error("Auto-shift tick failed", exc_info=exc)
        self._report(f"ERROR: Auto-shift tick failed: {exc}")
        if self._running is state:
            self.stop()

    def _revert_one_shot(self, display: DisplayInfo, strategy: ShiftStrategy) -> None:
        with self._tool_lock:
            _ok, message = apply_shift(self._tool, display, ShiftOffset(0, 0), strategy)
        self._report(message)

    def _cancel_one_shot(self) -> None:
        one_shot = self._one_shot
        self._one_shot = None
        if one_shot is None:
            return
        one_shot.cancel()
        if one_shot is not threading.current_thread():
            one_shot.join(timeout=_JOIN_TIMEOUT_S)

    def _report(self, message: str) -> str:
        if message.startswith(("ERROR", "FAILED", "RESET FAILED")):
            logger.warning(message)
        else:
            logger.info(message)
        if self._on_status is not None:
            self._on_status(message)
        return message
