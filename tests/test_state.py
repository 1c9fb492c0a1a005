"""Tests for BlockColumn, BlockState and the key schedule."""

import random

import pytest

from saes.nibble import Nibble, ZERO
from saes.state import (
    BlockColumn,
    BlockState,
    INV_MIX_MATRIX,
    MIX_MATRIX,
    ROUND_CONSTANTS,
    decrypt,
    encrypt,
    expand_keys,
)


def _col(top: int, bottom: int) -> BlockColumn:
    return BlockColumn(Nibble(top), Nibble(bottom))


class TestBlockColumn:
    """Column-level operations."""

    def test_defaults_to_zero(self) -> None:
        assert BlockColumn() == BlockColumn(ZERO, ZERO)
        assert BlockColumn.from_nibbles([5]) == _col(5, 0)
        assert BlockColumn.from_nibbles([]) == _col(0, 0)

    def test_extra_nibbles_ignored(self) -> None:
        assert BlockColumn.from_nibbles([1, 2, 3]) == _col(1, 2)

    def test_int_arguments_coerced(self) -> None:
        assert BlockColumn(1, 0x12) == _col(1, 2)

    def test_indexing_and_iteration(self) -> None:
        c = _col(4, 9)
        assert c[0] == Nibble(4)
        assert c[1] == Nibble(9)
        assert list(c) == [Nibble(4), Nibble(9)]
        assert len(c) == 2

    def test_str(self) -> None:
        assert str(_col(4, 9)) == "0100 1001"

    def test_rotate(self) -> None:
        assert _col(4, 9).rotate() == _col(9, 4)

    def test_substitute(self) -> None:
        assert _col(0, 1).substitute() == _col(9, 4)
        assert _col(9, 4).unsubstitute() == _col(0, 1)

    def test_mix_example(self) -> None:
        # [1 4; 4 1] * (a, f) = (a ^ 4*f, 4*a ^ f) = (3, 1)
        assert _col(0xA, 0xF).mix() == _col(0x3, 0x1)
        assert _col(0xA, 0x4).mix() == _col(0x9, 0xA)

    def test_unmix_inverts_mix_for_all_columns(self) -> None:
        for top in range(16):
            for bottom in range(16):
                c = _col(top, bottom)
                assert c.mix().unmix() == c
                assert c.unmix().mix() == c

    def test_add(self) -> None:
        assert _col(0xC, 0x3) + _col(0xA, 0x5) == _col(0x6, 0x6)
        assert _col(0xC, 0x3).sub(_col(0xA, 0x5)) == _col(0x6, 0x6)


class TestBlockState:
    """State-level operations."""

    def test_from_nibbles_column_major(self) -> None:
        s = BlockState.from_nibbles([0b0100, 0b1001, 0b0100, 0b0010])
        assert s.left == _col(4, 9)
        assert s.right == _col(4, 2)
        assert s[1][0] == Nibble(4)

    def test_from_nibbles_pads(self) -> None:
        assert BlockState.from_nibbles([1]) == BlockState(_col(1, 0), _col(0, 0))
        assert BlockState.from_nibbles([]) == BlockState()

    def test_from_columns(self) -> None:
        assert BlockState.from_columns([_col(1, 2)]) == BlockState(_col(1, 2), BlockColumn())

    def test_int_round_trip(self) -> None:
        s = BlockState.from_int(0x4942)
        assert s == BlockState.from_nibbles([4, 9, 4, 2])
        assert s.to_int() == 0x4942

    def test_from_int_masks(self) -> None:
        assert BlockState.from_int(0x14942).to_int() == 0x4942

    def test_str(self) -> None:
        assert str(BlockState.from_int(0x9575)) == "1001 0101 0111 0101"

    def test_shift_rows_swaps_bottom_row(self) -> None:
        s = BlockState.from_nibbles([0xA, 0x4, 0xA, 0xF])
        assert s.shift_rows() == BlockState.from_nibbles([0xA, 0xF, 0xA, 0x4])

    def test_shift_rows_self_inverse(self) -> None:
        for value in range(0, 0x10000, 97):
            s = BlockState.from_int(value)
            assert s.shift_rows().shift_rows() == s
            assert s.unshift_rows() == s.shift_rows()

    def test_substitute_round_trip(self) -> None:
        for value in range(0, 0x10000, 251):
            s = BlockState.from_int(value)
            assert s.substitute().unsubstitute() == s

    def test_mix_round_trip(self) -> None:
        for value in range(0, 0x10000, 257):
            s = BlockState.from_int(value)
            assert s.mix().unmix() == s

    def test_add(self) -> None:
        a = BlockState.from_int(0x4942)
        k = BlockState.from_int(0x686C)
        assert (a + k).to_int() == 0x212E
        assert a + a == BlockState()

    def test_matrices(self) -> None:
        assert MIX_MATRIX.to_int() == 0x1441
        assert INV_MIX_MATRIX.to_int() == 0x9229

    def test_default_is_zero(self) -> None:
        assert BlockState().to_int() == 0
        assert BlockState().left == BlockColumn()

    def test_coerces_nibble_pairs(self) -> None:
        assert BlockState((4, 9), [4, 2]) == BlockState.from_int(0x4942)

    @pytest.mark.parametrize("left,right", [(1, 2), (Nibble(1), _col(0, 0))])
    def test_rejects_scalar_columns(self, left, right) -> None:
        with pytest.raises(TypeError, match="BlockState column"):
            BlockState(left, right)


class TestKeyExpansion:
    """Round key schedule."""

    def test_round_constants(self) -> None:
        assert ROUND_CONSTANTS[1] == _col(0b1000, 0)
        assert ROUND_CONSTANTS[2] == _col(0b0011, 0)

    @pytest.mark.parametrize("key,expected", [
        (0x686C, (0x686C, 0x204C, 0xDD91)),
        (0x4AF5, (0x4AF5, 0xDD28, 0x87AF)),
    ])
    def test_expand_keys(self, key: int, expected: tuple) -> None:
        keys = expand_keys(BlockState.from_int(key))
        assert len(keys) == 3
        assert tuple(k.to_int() for k in keys) == expected

    def test_round_zero_is_key(self) -> None:
        key = BlockState.from_int(0xBEEF)
        assert key.expand_keys()[0] == key


class TestCipher:
    """Encrypt/decrypt pipeline."""

    def test_known_answer(self) -> None:
        plaintext = BlockState.from_nibbles([0b0100, 0b1001, 0b0100, 0b0010])
        key = BlockState.from_nibbles([0b0110, 0b1000, 0b0110, 0b1100])
        ciphertext = encrypt(plaintext, key)
        assert str(ciphertext) == "1001 0101 0111 0101"
        assert decrypt(ciphertext, key) == plaintext

    def test_methods_match_functions(self) -> None:
        p = BlockState.from_int(0xD728)
        k = BlockState.from_int(0x4AF5)
        assert p.encrypt(k) == encrypt(p, k)
        assert p.encrypt(k).decrypt(k) == p

    def test_round_trip_random(self) -> None:
        rng = random.Random(1234)
        for _ in range(300):
            p = BlockState.from_int(rng.getrandbits(16))
            k = BlockState.from_int(rng.getrandbits(16))
            assert decrypt(encrypt(p, k), k) == p

    def test_inputs_unchanged(self) -> None:
        p = BlockState.from_int(0x4942)
        k = BlockState.from_int(0x686C)
        encrypt(p, k)
        assert p.to_int() == 0x4942
        assert k.to_int() == 0x686C
