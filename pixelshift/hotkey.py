from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any


TOGGLE_KEY = "f8"
SHIFT_ONCE_KEY = "f9"
RESET_KEY = "f10"


class ShiftHotkeys:
    """Global function-key bindings for the shift scheduler.

    ``bindings`` maps pynput key names (``"f8"``) to callbacks. Callbacks run
    on the listener thread, so UI callers must marshal them onto their own loop.
    """

    def __init__(self, bindings: Mapping[str, Callable[[], None]]) -> None:
        if not bindings:
            raise ValueError("At least one hotkey binding is required.")
        self._bindings = {name.lower(): action for name, action in bindings.items()}
        self._listener: Any | None = None
        self._lock = threading.Lock()

    def describe(self) -> str:
        return ", ".join(name.upper() for name in self._bindings)

    def start(self) -> None:
        try:
            from pynput import keyboard
        except ImportError as exc:
            raise RuntimeError("The 'pynput' package is required for global hotkeys.") from exc

        with self._lock:
            if self._listener is not None:
                return
            self._listener = keyboard.Listener(on_press=self._on_press)
            self._listener.daemon = True
            self._listener.start()

    def stop(self) -> None:
        with self._lock:
            listener = self._listener
            self._listener = None

        if listener is not None:
            listener.stop()
            listener.join(timeout=1.0)

    def _on_press(self, key: Any) -> None:
        # Character keys are KeyCode objects without a name.
        name = getattr(key, "name", None)
        if not name:
            return
        action = self._bindings.get(name)
        if action is not None:
            action()
