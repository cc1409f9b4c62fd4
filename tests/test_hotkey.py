import sys
from types import SimpleNamespace

import pytest

from pixelshift.hotkey import RESET_KEY, SHIFT_ONCE_KEY, TOGGLE_KEY, ShiftHotkeys


def _hotkeys(pressed: list[str]) -> ShiftHotkeys:
    return ShiftHotkeys(
        {
            TOGGLE_KEY: lambda: pressed.append("toggle"),
            SHIFT_ONCE_KEY: lambda: pressed.append("once"),
            RESET_KEY: lambda: pressed.append("reset"),
        }
    )


def test_bound_function_keys_dispatch_their_actions() -> None:
    pressed: list[str] = []
    hotkeys = _hotkeys(pressed)

    hotkeys._on_press(SimpleNamespace(name="f9"))
    hotkeys._on_press(SimpleNamespace(name="f8"))
    hotkeys._on_press(SimpleNamespace(name="f10"))

    assert pressed == ["once", "toggle", "reset"]


def test_unbound_and_character_keys_are_ignored() -> None:
    pressed: list[str] = []
    hotkeys = _hotkeys(pressed)

    hotkeys._on_press(SimpleNamespace(name="f1"))
    hotkeys._on_press(SimpleNamespace(char="a"))
    hotkeys._on_press(None)

    assert pressed == []


def test_describe_lists_bound_keys() -> None:
    assert _hotkeys([]).describe() == "F8, F9, F10"


def test_bindings_are_required() -> None:
    with pytest.raises(ValueError):
        ShiftHotkeys({})


def test_start_requires_pynput(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "pynput", None)

    with pytest.raises(RuntimeError, match="pynput"):
        _hotkeys([]).start()
