import pytest

from pixelshift.models import DisplayInfo, ShiftConfig, ShiftStrategy


def test_shift_config_carries_selected_display() -> None:
    display = DisplayInfo(name="HDMI-1", width=1920, height=1080, is_primary=True)

    config = ShiftConfig(
        display=display,
        shift_amount=2,
        interval_s=60.0,
        strategy=ShiftStrategy.PANNING_SMOOTH,
        use_pattern=True,
    )

    assert config.display is display


@pytest.mark.parametrize("strategy", list(ShiftStrategy))
def test_strategy_round_trips_through_label(strategy: ShiftStrategy) -> None:
    assert ShiftStrategy.from_label(strategy.label) is strategy


def test_unknown_strategy_label_is_rejected() -> None:
    with pytest.raises(ValueError):
        ShiftStrategy.from_label("Rotate")
