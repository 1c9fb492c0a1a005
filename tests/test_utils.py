"""Tests for block conversions and formatting."""

import pytest

from saes.state import BlockState
from saes.utils import (
    binary_to_state,
    format_state_grid,
    format_state_line,
    hex_to_state,
    int_to_state,
    parse_block,
    state_to_hex,
    state_to_int,
    xor_states,
)


class TestConversions:

    def test_int_round_trip(self):
        assert state_to_int(int_to_state(0xD728)) == 0xD728

    @pytest.mark.parametrize("text", ["4942", "0x4942", "49 42", "0X4942"])
    def test_hex_to_state(self, text):
        assert hex_to_state(text) == BlockState.from_int(0x4942)

    def test_hex_with_leading_b_digit(self):
        assert hex_to_state("0b12").to_int() == 0x0B12

    def test_state_to_hex(self):
        assert state_to_hex(BlockState.from_int(0x0B12)) == "0b12"

    @pytest.mark.parametrize("text", ["494", "49420", ""])
    def test_hex_wrong_length(self, text):
        with pytest.raises(ValueError, match="4 hex chars"):
            hex_to_state(text)

    @pytest.mark.parametrize("text", ["49g2", "+123", "-123"])
    def test_hex_invalid_chars(self, text):
        with pytest.raises(ValueError, match="Invalid hex"):
            hex_to_state(text)

    def test_binary_to_state(self):
        assert binary_to_state("0100 1001 0100 0010").to_int() == 0x4942
        assert binary_to_state("0b0100100101000010").to_int() == 0x4942

    def test_binary_invalid(self):
        with pytest.raises(ValueError, match="16 binary digits"):
            binary_to_state("0100 1001")
        with pytest.raises(ValueError, match="Invalid binary"):
            binary_to_state("0100 1001 0100 0012")

    def test_parse_block_accepts_both(self):
        assert parse_block("9575") == parse_block("1001 0101 0111 0101")


class TestFormatting:

    def test_format_state_line(self):
        assert format_state_line(BlockState.from_int(0x4942)) == "0100 1001 0100 0010"

    def test_format_state_grid(self):
        grid = format_state_grid(BlockState.from_int(0x4942))
        assert grid.splitlines() == ["  0100 0100", "  1001 0010"]

    def test_xor_states(self):
        a = BlockState.from_int(0x4942)
        b = BlockState.from_int(0x686C)
        assert xor_states(a, b).to_int() == 0x212E
