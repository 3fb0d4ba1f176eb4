"""Tests for short code conversion."""

import random

import pytest

from shortlinks.exceptions import InvalidCode
from shortlinks.shortcode import MAX_ID, format_id, parse_id


class TestFormatID:
    """Test ID -> short code conversion."""

    @pytest.mark.parametrize(
        "link_id, expected",
        [
            (0, "0"),
            (1, "1"),
            (9, "9"),
            (10, "a"),
            (35, "z"),
            (36, "10"),
            (1295, "zz"),
            (MAX_ID, "1y2p0ij32e8e7"),
        ],
    )
    def test_known_values(self, link_id, expected):
        assert format_id(link_id) == expected

    def test_matches_builtin_base36(self):
        """Emitted codes are what int(code, 36) reads back."""
        for link_id in (12345, 999999999, 2 ** 40 + 7):
            assert int(format_id(link_id), 36) == link_id

    def test_lowercase_without_leading_zeros(self):
        code = format_id(2 ** 50)
        assert code == code.lower()
        assert not code.startswith("0")

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            format_id(-1)


class TestParseID:
    """Test short code -> ID conversion."""

    def test_round_trip(self):
        rng = random.Random(36)
        samples = [1, 2, 35, 36, MAX_ID - 1, MAX_ID] + [rng.randint(1, MAX_ID) for _ in range(200)]

        for link_id in samples:
            assert parse_id(format_id(link_id)) == link_id

    def test_case_insensitive(self):
        assert parse_id("ZZ") == parse_id("zz") == 1295
        assert parse_id("1Y2P0IJ32E8E7") == MAX_ID

    def test_leading_zeros_accepted(self):
        assert parse_id("001") == 1

    def test_empty(self):
        with pytest.raises(InvalidCode, match="empty"):
            parse_id("")

    @pytest.mark.parametrize("code", ["-1", "+1", "a_b", "ab c", " 1", "1.5", "é", "%41"])
    def test_outside_alphabet(self, code):
        with pytest.raises(InvalidCode):
            parse_id(code)

    def test_overflow(self):
        # one more than the largest signed 64-bit integer
        with pytest.raises(InvalidCode, match="out of range"):
            parse_id("1y2p0ij32e8e8")

        with pytest.raises(InvalidCode):
            parse_id("z" * 13)

    def test_invalid_code_is_value_error(self):
        with pytest.raises(ValueError):
            parse_id("!")
