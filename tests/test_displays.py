from pixelshift.displays import list_displays, parse_displays
from pixelshift.models import DisplayInfo


REPORT = """\
Screen 0: minimum 8 x 8, current 4480 x 1440, maximum 32767 x 32767
DP-1 connected primary 2560x1440+0+0 (normal left inverted right x axis y axis) 597mm x 336mm
   2560x1440     59.95 + 143.97*
   1920x1080     60.00    50.00
HDMI-1 connected 1920x1080+2560+0 (normal left inverted right x axis y axis) 527mm x 296mm
   1920x1080     60.00*+  50.00
   1280x720      60.00
DP-2 disconnected (normal left inverted right x axis y axis)
"""


def test_parse_displays_reads_geometry_from_header() -> None:
    displays = parse_displays(REPORT)

    assert [d.name for d in displays] == ["DP-1", "HDMI-1"]
    primary = displays[0]
    assert (primary.width, primary.height) == (2560, 1440)
    assert primary.is_primary
    assert primary.refresh_rate == 143.97
    secondary = displays[1]
    assert (secondary.width, secondary.height) == (1920, 1080)
    assert not secondary.is_primary
    assert secondary.refresh_rate == 60.0


def test_parse_displays_prefers_header_geometry_over_mode_lines() -> None:
    report = (
        "eDP-1 connected 1920x1080+0+0 (normal) 344mm x 193mm\n"
        "   2880x1800     60.00*+\n"
        "   1920x1080     60.00\n"
    )

    (display,) = parse_displays(report)

    assert (display.width, display.height) == (1920, 1080)


def test_parse_displays_falls_back_to_active_mode_line() -> None:
    report = (
        "HDMI-1 connected (normal left inverted right x axis y axis)\n"
        "   2560x1440     59.95 +\n"
        "   1920x1080     74.97*   60.00\n"
        "VGA-1 connected (normal)\n"
        "   1024x768      75.03*\n"
    )

    displays = parse_displays(report)

    assert displays[0] == DisplayInfo(
        name="HDMI-1", width=1920, height=1080, refresh_rate=74.97, is_primary=False
    )
    assert displays[1].name == "VGA-1"
    assert (displays[1].width, displays[1].height) == (1024, 768)


def test_fallback_does_not_read_the_next_outputs_modes() -> None:
    report = (
        "HDMI-1 connected (normal)\n"
        "   1920x1080     60.00 +\n"
        "DP-1 connected 2560x1440+0+0 (normal)\n"
        "   2560x1440     59.95*+\n"
    )

    displays = parse_displays(report)

    assert [d.name for d in displays] == ["DP-1"]


def test_fallback_uses_default_refresh_rate_when_unparsable() -> None:
    report = "HDMI-1 connected (normal)\n   1920x1080i    abc*\n"

    (display,) = parse_displays(report)

    assert (display.width, display.height) == (1920, 1080)
    assert display.refresh_rate == 60.0


def test_fallback_trims_mode_name_suffix() -> None:
    report = "HDMI-1 connected (normal)\n   1920x1080_60.00  59.96*+\n"

    (display,) = parse_displays(report)

    assert (display.width, display.height) == (1920, 1080)
    assert display.refresh_rate == 59.96


def test_disconnected_and_unresolvable_displays_are_dropped() -> None:
    report = (
        "DP-2 disconnected (normal left inverted right x axis y axis)\n"
        "DP-3 connected (normal left inverted right x axis y axis)\n"
        "HDMI-2 connected axbx+0+0 (normal)\n"
    )

    assert parse_displays(report) == []


def test_malformed_geometry_token_is_skipped() -> None:
    report = "DP-1 connected 19x20x1080+0+0 1920x1080+0+0 (normal)\n"

    (display,) = parse_displays(report)

    assert (display.width, display.height) == (1920, 1080)


class _QueryStub:
    def __init__(self, report: str) -> None:
        self.report = report

    def query(self) -> str:
        return self.report


def test_list_displays_returns_empty_when_query_fails() -> None:
    assert list_displays(_QueryStub("")) == []


def test_list_displays_parses_query_output() -> None:
    displays = list_displays(_QueryStub(REPORT))

    assert [d.name for d in displays] == ["DP-1", "HDMI-1"]
