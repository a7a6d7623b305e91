"""Unit tests for device kinds and the kind filter."""

import os

import pytest

from upower_battery.errors import ErrorCode, UnknownKindName
from upower_battery.kinds import DeviceKind, DeviceKindFilter


class TestDeviceKind:
    """Test DeviceKind code and name lookups."""

    def test_thirty_kinds_with_distinct_codes(self):
        """Test codes 0-29 are all defined exactly once."""
        assert sorted(kind.value for kind in DeviceKind) == list(range(30))

    def test_from_code_known(self):
        """Test known UPower type codes."""
        assert DeviceKind.from_code(2) is DeviceKind.BATTERY
        assert DeviceKind.from_code(17) is DeviceKind.HEADSET
        assert DeviceKind.from_code(19) is DeviceKind.HEADPHONES

    @pytest.mark.parametrize("code", [999, 30, -1, 2**32])
    def test_from_code_out_of_range_is_unknown(self, code):
        """Test unmapped codes degrade to UNKNOWN."""
        assert DeviceKind.from_code(code) is DeviceKind.UNKNOWN

    def test_from_code_not_a_number_is_unknown(self):
        """Test garbage from the bus degrades to UNKNOWN."""
        assert DeviceKind.from_code(None) is DeviceKind.UNKNOWN
        assert DeviceKind.from_code("headset") is DeviceKind.UNKNOWN

    def test_canonical_names_are_kebab_case(self):
        """Test multi-word kinds use hyphens."""
        assert DeviceKind.LINE_POWER.canonical_name == "line-power"
        assert DeviceKind.MEDIA_PLAYER.canonical_name == "media-player"
        assert DeviceKind.OTHER_AUDIO.canonical_name == "other-audio"
        assert str(DeviceKind.REMOTE_CONTROL) == "remote-control"

    def test_from_name_round_trips_every_kind(self):
        """Test from_name is the inverse of canonical_name."""
        for kind in DeviceKind:
            assert DeviceKind.from_name(kind.canonical_name) is kind

    def test_from_name_trims_and_ignores_case(self):
        """Test whitespace and case are normalized."""
        assert DeviceKind.from_name("  Gaming-Input ") is DeviceKind.GAMING_INPUT

    def test_from_name_unknown(self):
        """Test unknown name raises UnknownKindName with suggestions."""
        with pytest.raises(UnknownKindName) as exc_info:
            DeviceKind.from_name("toaster")

        error = exc_info.value
        assert error.code == ErrorCode.UNKNOWN_KIND_NAME
        assert error.name == "toaster"
        assert "headset" in error.suggestion

    def test_from_name_rejects_underscores(self):
        """Test only the hyphenated spelling is accepted."""
        with pytest.raises(UnknownKindName):
            DeviceKind.from_name("line_power")

    def test_names_in_code_order(self):
        """Test names() lists kinds by code."""
        names = DeviceKind.names()
        assert names[0] == "unknown"
        assert names[17] == "headset"
        assert names[-1] == "last"


class TestDeviceKindFilter:
    """Test parsing and matching of the kind filter."""

    def test_parse_matches_exactly_named_kinds(self):
        """Test only the listed kinds match."""
        kinds = DeviceKindFilter.parse("headset, headphones")

        for kind in DeviceKind:
            expected = kind in (DeviceKind.HEADSET, DeviceKind.HEADPHONES)
            assert kinds.matches(kind) is expected

    def test_parse_case_and_whitespace(self):
        """Test tokens are trimmed and lower-cased."""
        kinds = DeviceKindFilter.parse(" MOUSE ,Keyboard")
        assert list(kinds) == [DeviceKind.MOUSE, DeviceKind.KEYBOARD]

    def test_parse_empty_matches_nothing(self):
        """Test empty string gives an empty filter."""
        kinds = DeviceKindFilter.parse("")

        assert len(kinds) == 0
        assert not any(kinds.matches(kind) for kind in DeviceKind)

    def test_parse_skips_blank_tokens(self):
        """Test doubled and trailing commas are ignored."""
        kinds = DeviceKindFilter.parse("headset,, headphones,")
        assert list(kinds) == [DeviceKind.HEADSET, DeviceKind.HEADPHONES]

    def test_parse_deduplicates(self):
        """Test repeated names collapse."""
        kinds = DeviceKindFilter.parse("mouse, mouse, MOUSE")
        assert len(kinds) == 1
        assert DeviceKind.MOUSE in kinds

    def test_parse_orders_by_code(self):
        """Test iteration order follows device codes, not input order."""
        kinds = DeviceKindFilter.parse("headphones, battery, headset")
        assert list(kinds) == [DeviceKind.BATTERY, DeviceKind.HEADSET, DeviceKind.HEADPHONES]
        assert str(kinds) == "battery, headset, headphones"

    def test_parse_unknown_token_fails(self):
        """Test one bad token fails the whole parse."""
        with pytest.raises(UnknownKindName) as exc_info:
            DeviceKindFilter.parse("headset, bogus-kind")
        assert exc_info.value.name == "bogus-kind"

    def test_unknown_kind_only_when_listed(self, kinds_all_audio):
        """Test UNKNOWN is filtered out unless named explicitly."""
        assert not kinds_all_audio.matches(DeviceKind.UNKNOWN)
        assert DeviceKindFilter.parse("unknown").matches(DeviceKind.UNKNOWN)

    def test_equality_ignores_input_order(self):
        """Test filters with the same kinds compare equal."""
        assert DeviceKindFilter.parse("mouse,pen") == DeviceKindFilter.parse("pen, mouse")
        assert DeviceKindFilter.parse("mouse") != DeviceKindFilter.parse("pen")

    def test_help_text_lists_all_names(self):
        """Test help text enumerates every kind."""
        text = DeviceKindFilter.help_text(width=60)

        for name in DeviceKind.names():
            assert name in text

    def test_help_text_wraps_to_width(self):
        """Test name list respects the requested width."""
        text = DeviceKindFilter.help_text(width=50)
        names_block = text.split("\n\n", 1)[1]

        assert len(names_block.splitlines()) > 1
        assert all(len(line) <= 50 for line in names_block.splitlines())

    def test_help_text_narrow_terminal_floor(self):
        """Test tiny widths are raised to a readable minimum."""
        text = DeviceKindFilter.help_text(width=5)
        names_block = text.split("\n\n", 1)[1]

        assert "headset" in names_block
        assert any(len(line) > 5 for line in names_block.splitlines())

    def test_help_text_leaves_room_for_argparse_indent(self, monkeypatch):
        """Test the terminal-sized default keeps lines short of the edge."""
        monkeypatch.setattr(
            "upower_battery.kinds.shutil.get_terminal_size",
            lambda: os.terminal_size((60, 24)),
        )
        names_block = DeviceKindFilter.help_text().split("\n\n", 1)[1]

        assert all(len(line) <= 48 for line in names_block.splitlines())
