from __future__ import annotations

import tkinter as tk
from collections.abc import Callable
from tkinter import messagebox, ttk

from .hotkey import RESET_KEY, SHIFT_ONCE_KEY, TOGGLE_KEY, ShiftHotkeys
from .models import DisplayInfo, ShiftConfig, ShiftStrategy
from .scheduler import ShiftOnceCommand, ShiftScheduler, StartCommand, StopCommand
from .settings import (
    DEFAULT_INTERVAL_S,
    DEFAULT_SHIFT_AMOUNT,
    INTERVAL_RANGE_S,
    SHIFT_AMOUNT_RANGE,
    Settings,
)
from .xrandr import XrandrTool


class PixelShiftApp(tk.Tk):
    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.title("PixelShift OLED Saver")
        self.resizable(False, False)

        self._shutting_down = False
        self._hotkey: ShiftHotkeys | None = None
        self._scheduler = ShiftScheduler(
            XrandrTool(binary=settings.xrandr_binary, display_env=settings.x_display),
            on_status=self._on_scheduler_status,
            min_interval_s=settings.min_interval_s,
            once_reset_delay_s=settings.once_reset_delay_s,
        )

        self._displays_by_label: dict[str, DisplayInfo] = {}

        self.display_var = tk.StringVar()
        self.amount_var = tk.StringVar(value=str(DEFAULT_SHIFT_AMOUNT))
        self.interval_var = tk.StringVar(value=str(DEFAULT_INTERVAL_S))
        self.strategy_var = tk.StringVar(value=ShiftStrategy.TRANSFORM_MATRIX.label)
        self.pattern_var = tk.BooleanVar(value=False)
        self.status_var = tk.StringVar(value="Initializing...")

        self._build_widgets()
        try:
            self._refresh_displays()
        except RuntimeError as exc:
            self._set_status(str(exc))
        self._set_running_controls(False)

        self._hotkey = ShiftHotkeys(
            {
                TOGGLE_KEY: lambda: self._on_hotkey(self._toggle_start_stop),
                SHIFT_ONCE_KEY: lambda: self._on_hotkey(self.shift_once),
                RESET_KEY: lambda: self._on_hotkey(self.stop_shifting),
            }
        )
        try:
            self._hotkey.start()
        except Exception as exc:  # noqa: BLE001
            self._set_status(f"Hotkey unavailable: {exc}")
        else:
            if self._displays_by_label:
                self._set_status(
                    f"Ready. Hotkeys {TOGGLE_KEY.upper()} start/stop, "
                    f"{SHIFT_ONCE_KEY.upper()} shift once, {RESET_KEY.upper()} reset."
                )

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_widgets(self) -> None:
        root = ttk.Frame(self, padding=12)
        root.grid(row=0, column=0, sticky="nsew")

        ttk.Label(root, text="Display").grid(row=0, column=0, sticky="w")
        self.display_combo = ttk.Combobox(
            root, textvariable=self.display_var, state="readonly", width=40
        )
        self.display_combo.grid(row=0, column=1, columnspan=2, sticky="ew", padx=(8, 0))

        ttk.Button(root, text="Refresh", command=self._on_refresh_displays).grid(
            row=0, column=3, sticky="ew", padx=(8, 0)
        )

        ttk.Label(root, text="Shift (px)").grid(row=1, column=0, sticky="w", pady=(8, 0))
        self.amount_spin = ttk.Spinbox(
            root,
            textvariable=self.amount_var,
            from_=SHIFT_AMOUNT_RANGE[0],
            to=SHIFT_AMOUNT_RANGE[1],
            increment=1,
            width=8,
        )
        self.amount_spin.grid(row=1, column=1, sticky="w", padx=(8, 0), pady=(8, 0))

        ttk.Label(root, text="Interval (s)").grid(row=1, column=2, sticky="w", padx=(12, 0), pady=(8, 0))
        self.interval_spin = ttk.Spinbox(
            root,
            textvariable=self.interval_var,
            from_=INTERVAL_RANGE_S[0],
            to=INTERVAL_RANGE_S[1],
            increment=10,
            width=8,
        )
        self.interval_spin.grid(row=1, column=3, sticky="w", padx=(8, 0), pady=(8, 0))

        ttk.Label(root, text="Method").grid(row=2, column=0, sticky="w", pady=(8, 0))
        self.strategy_combo = ttk.Combobox(
            root,
            textvariable=self.strategy_var,
            state="readonly",
            values=[strategy.label for strategy in ShiftStrategy],
            width=24,
        )
        self.strategy_combo.grid(row=2, column=1, columnspan=2, sticky="ew", padx=(8, 0), pady=(8, 0))

        ttk.Checkbutton(root, text="Pattern mode", variable=self.pattern_var).grid(
            row=2, column=3, sticky="w", padx=(8, 0), pady=(8, 0)
        )

        self.once_button = ttk.Button(root, text="Shift Once", command=self.shift_once)
        self.once_button.grid(row=3, column=1, sticky="ew", pady=(12, 0))

        self.start_button = ttk.Button(root, text="Start", command=self.start_shifting)
        self.start_button.grid(row=3, column=2, sticky="ew", padx=(8, 0), pady=(12, 0))

        self.stop_button = ttk.Button(root, text="Stop & Reset", command=self.stop_shifting)
        self.stop_button.grid(row=3, column=3, sticky="ew", padx=(8, 0), pady=(12, 0))

        ttk.Label(root, textvariable=self.status_var, wraplength=520).grid(
            row=4, column=0, columnspan=4, sticky="w", pady=(12, 0)
        )

        root.columnconfigure(1, weight=1)
        root.columnconfigure(2, weight=1)
        root.columnconfigure(3, weight=1)

    def _on_refresh_displays(self) -> None:
        if self._scheduler.is_running:
            self._set_status("Stop auto-shift before refreshing displays.")
            return
        try:
            self._refresh_displays()
        except RuntimeError as exc:
            self._set_status(str(exc))
            messagebox.showerror("Display refresh failed", str(exc), parent=self)
            return
        self._set_status("Display list refreshed.")

    def _refresh_displays(self) -> None:
        selected = self._selected_display()
        displays = self._scheduler.list_displays()
        if not displays:
            self._displays_by_label = {}
            self.display_combo["values"] = []
            self.display_var.set("")
            raise RuntimeError("No connected displays were detected by xrandr.")

        self._displays_by_label = {self._format_display_label(d): d for d in displays}
        self.display_combo["values"] = list(self._displays_by_label)

        chosen = next(
            (d for d in displays if selected is not None and d.name == selected.name),
            None,
        )
        if chosen is None:
            chosen = next((d for d in displays if d.is_primary), displays[0])
        self.display_var.set(self._format_display_label(chosen))

    @staticmethod
    def _format_display_label(display: DisplayInfo) -> str:
        primary_suffix = " [Primary]" if display.is_primary else ""
        return (
            f"{display.name} ({display.width}x{display.height} @ "
            f"{display.refresh_rate:g}Hz){primary_suffix}"
        )

    def _selected_display(self) -> DisplayInfo | None:
        return self._displays_by_label.get(self.display_var.get())

    def _set_status(self, value: str) -> None:
        self.status_var.set(value)

    def _on_scheduler_status(self, message: str) -> None:
        if self._shutting_down:
            return
        # Ticks report from worker threads; Tk must be touched on the main loop.
        try:
            self.after(0, self._apply_scheduler_status, message)
        except (tk.TclError, RuntimeError):
            return

    def _apply_scheduler_status(self, message: str) -> None:
        self._set_status(message)
        self._set_running_controls(self._scheduler.is_running)

    def _set_running_controls(self, running: bool) -> None:
        self.start_button.config(state=tk.DISABLED if running else tk.NORMAL)
        self.stop_button.config(state=tk.NORMAL)

    def _build_shift_config(self) -> ShiftConfig:
        display = self._selected_display()
        if display is None:
            raise ValueError("Select a valid display.")

        try:
            amount = int(self.amount_var.get().strip())
            interval_s = float(self.interval_var.get().strip())
        except ValueError as exc:
            raise ValueError("Shift amount and interval must be numbers.") from exc

        low, high = SHIFT_AMOUNT_RANGE
        if not low <= amount <= high:
            raise ValueError(f"Shift amount must be between {low} and {high} px.")
        low, high = INTERVAL_RANGE_S
        if not low <= interval_s <= high:
            raise ValueError(f"Interval must be between {low} and {high} seconds.")

        return ShiftConfig(
            display=display,
            shift_amount=amount,
            interval_s=interval_s,
            strategy=ShiftStrategy.from_label(self.strategy_var.get()),
            use_pattern=bool(self.pattern_var.get()),
        )

    def _show_invalid(self, action: str, exc: Exception) -> None:
        self._set_status(f"Cannot {action}: {exc}")
        messagebox.showerror("Invalid configuration", str(exc), parent=self)

    def shift_once(self) -> None:
        try:
            config = self._build_shift_config()
        except ValueError as exc:
            self._show_invalid("shift", exc)
            return

        self._set_status(
            self._scheduler.dispatch(
                ShiftOnceCommand(
                    display=config.display,
                    amount=config.shift_amount,
                    strategy=config.strategy,
                )
            )
        )

    def start_shifting(self) -> None:
        if self._scheduler.is_running:
            return

        try:
            config = self._build_shift_config()
        except ValueError as exc:
            self._show_invalid("start", exc)
            return

        self._set_status(
            self._scheduler.dispatch(
                StartCommand(
                    display=config.display,
                    amount=config.shift_amount,
                    interval_s=config.interval_s,
                    strategy=config.strategy,
                    use_pattern=config.use_pattern,
                )
            )
        )
        self._set_running_controls(self._scheduler.is_running)

    def stop_shifting(self) -> None:
        self._set_status(self._scheduler.dispatch(StopCommand(display=self._selected_display())))
        self._set_running_controls(False)

    def _on_hotkey(self, action: Callable[[], None]) -> None:
        try:
            self.after(0, action)
        except (tk.TclError, RuntimeError):
            return

    def _toggle_start_stop(self) -> None:
        if self._scheduler.is_running:
            self.stop_shifting()
        else:
            self.start_shifting()

    def _on_close(self) -> None:
        self._shutting_down = True
        self._scheduler.close()

        if self._hotkey is not None:
            self._hotkey.stop()
            self._hotkey = None

        self.destroy()
