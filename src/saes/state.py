"""
S-AES block state, key expansion and the two-round cipher.

The 16-bit block is a 2x2 matrix of nibbles in column-major order:

  nibble[0] -> column 0, row 0
  nibble[1] -> column 0, row 1
  nibble[2] -> column 1, row 0
  nibble[3] -> column 1, row 1

Encryption:
- Round 0: AddRoundKey
- Round 1: SubNibbles, ShiftRows, MixColumns, AddRoundKey
- Round 2: SubNibbles, ShiftRows, AddRoundKey (no MixColumns)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator

from .nibble import Nibble, ZERO, nibbles

if TYPE_CHECKING:
    from .trace import TraceRecorder


def _as_nibble(value: Nibble | int) -> Nibble:
    return value if isinstance(value, Nibble) else Nibble(value)


def _as_column(value: BlockColumn | Iterable[Nibble | int]) -> BlockColumn:
    if isinstance(value, BlockColumn):
        return value
    if isinstance(value, (Nibble, int)):
        raise TypeError(f"BlockState column must be a BlockColumn or a nibble pair, got {value!r}")
    return BlockColumn.from_nibbles(value)


# ===========================================================================
# BlockColumn
# ===========================================================================

@dataclass(frozen=True)
class BlockColumn:
    """A 1x2 matrix of nibbles, from top to bottom."""

    top: Nibble = ZERO
    bottom: Nibble = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "top", _as_nibble(self.top))
        object.__setattr__(self, "bottom", _as_nibble(self.bottom))

    @classmethod
    def from_nibbles(cls, values: Iterable[Nibble | int]) -> BlockColumn:
        """Build from up to 2 nibbles; missing ones are zero."""
        padded = (nibbles(values) + [ZERO, ZERO])[:2]
        return cls(padded[0], padded[1])

    def __getitem__(self, index: int) -> Nibble:
        return (self.top, self.bottom)[index]

    def __iter__(self) -> Iterator[Nibble]:
        yield self.top
        yield self.bottom

    def __len__(self) -> int:
        return 2

    def __str__(self) -> str:
        return f"{self.top} {self.bottom}"

    def rotate(self) -> BlockColumn:
        """Switch the positions of the nibbles: AB -> BA."""
        return BlockColumn(self.bottom, self.top)

    def substitute(self) -> BlockColumn:
        return BlockColumn(self.top.substitute(), self.bottom.substitute())

    def unsubstitute(self) -> BlockColumn:
        return BlockColumn(self.top.unsubstitute(), self.bottom.unsubstitute())

    def mix(self) -> BlockColumn:
        """MixColumns on one column: multiply by [[1, 4], [4, 1]]."""
        return self._multiply_matrix(MIX_MATRIX)

    def unmix(self) -> BlockColumn:
        """Inverse MixColumns: multiply by [[9, 2], [2, 9]]. Undoes mix()."""
        return self._multiply_matrix(INV_MIX_MATRIX)

    def _multiply_matrix(self, matrix: BlockState) -> BlockColumn:
        # matrix[c][r]: column c, row r
        return BlockColumn(
            matrix[0][0] * self.top + matrix[1][0] * self.bottom,
            matrix[0][1] * self.top + matrix[1][1] * self.bottom,
        )

    def add(self, other: BlockColumn) -> BlockColumn:
        """XOR each nibble."""
        return BlockColumn(self.top + other.top, self.bottom + other.bottom)

    sub = add
    xor = add

    __add__ = add
    __sub__ = add
    __xor__ = add


# ===========================================================================
# BlockState
# ===========================================================================

@dataclass(frozen=True)
class BlockState:
    """A 2x2 matrix of nibbles, from top to bottom and left to right."""

    left: BlockColumn = BlockColumn()
    right: BlockColumn = BlockColumn()

    def __post_init__(self) -> None:
        object.__setattr__(self, "left", _as_column(self.left))
        object.__setattr__(self, "right", _as_column(self.right))

    @classmethod
    def from_columns(cls, columns: Iterable[BlockColumn]) -> BlockState:
        """Build from up to 2 columns; missing ones are zero."""
        padded = (list(columns) + [BlockColumn(), BlockColumn()])[:2]
        return cls(padded[0], padded[1])

    @classmethod
    def from_nibbles(cls, values: Iterable[Nibble | int]) -> BlockState:
        """
        Build from up to 4 nibbles in reading order: top-left, bottom-left,
        top-right, bottom-right. Missing nibbles are zero.
        """
        padded = (nibbles(values) + [ZERO] * 4)[:4]
        return cls(BlockColumn(padded[0], padded[1]), BlockColumn(padded[2], padded[3]))

    @classmethod
    def from_int(cls, value: int) -> BlockState:
        """Build from a 16-bit integer, first nibble most significant."""
        value &= 0xFFFF
        return cls.from_nibbles([(value >> shift) & 0xF for shift in (12, 8, 4, 0)])

    def to_int(self) -> int:
        result = 0
        for n in self.nibbles:
            result = (result << 4) | n.value
        return result

    @property
    def nibbles(self) -> tuple[Nibble, Nibble, Nibble, Nibble]:
        """Nibbles in reading (column-major) order."""
        return (self.left.top, self.left.bottom, self.right.top, self.right.bottom)

    def __getitem__(self, index: int) -> BlockColumn:
        return (self.left, self.right)[index]

    def __iter__(self) -> Iterator[BlockColumn]:
        yield self.left
        yield self.right

    def __len__(self) -> int:
        return 2

    def __str__(self) -> str:
        return f"{self.left} {self.right}"

    # ------------------------------------------------------------------
    # Round transformations
    # ------------------------------------------------------------------

    def shift_rows(self) -> BlockState:
        """ShiftRows: switch the places of the nibbles in the bottom row."""
        return BlockState(
            BlockColumn(self.left.top, self.right.bottom),
            BlockColumn(self.right.top, self.left.bottom),
        )

    def unshift_rows(self) -> BlockState:
        """
        Undo shift_rows().

        With two columns the bottom-row swap is its own inverse.
        """
        return self.shift_rows()

    def substitute(self) -> BlockState:
        return BlockState(self.left.substitute(), self.right.substitute())

    def unsubstitute(self) -> BlockState:
        return BlockState(self.left.unsubstitute(), self.right.unsubstitute())

    def mix(self) -> BlockState:
        return BlockState(self.left.mix(), self.right.mix())

    def unmix(self) -> BlockState:
        return BlockState(self.left.unmix(), self.right.unmix())

    def add(self, other: BlockState) -> BlockState:
        """XOR each nibble (AddRoundKey when other is a round key)."""
        return BlockState(self.left + other.left, self.right + other.right)

    sub = add
    xor = add

    __add__ = add
    __sub__ = add
    __xor__ = add

    # ------------------------------------------------------------------
    # Key schedule and cipher
    # ------------------------------------------------------------------

    def expand_keys(self) -> tuple[BlockState, BlockState, BlockState]:
        """Key expansion with self as the initial key."""
        return expand_keys(self)

    def encrypt(self, key: BlockState, tracer: TraceRecorder | None = None) -> BlockState:
        """Encrypt self (the plaintext) under key."""
        return encrypt(self, key, tracer)

    def decrypt(self, key: BlockState, tracer: TraceRecorder | None = None) -> BlockState:
        """Decrypt self (the ciphertext) under key. Undoes encrypt()."""
        return decrypt(self, key, tracer)


# Matrices are column-major like every other state: MIX_MATRIX[c][r]
MIX_MATRIX = BlockState.from_nibbles([0b0001, 0b0100, 0b0100, 0b0001])
INV_MIX_MATRIX = BlockState.from_nibbles([0b1001, 0b0010, 0b0010, 0b1001])

# Round 0 has no constant: its key is the initial key itself
ROUND_CONSTANTS = (
    BlockColumn.from_nibbles([0b0000, 0b0000]),
    BlockColumn.from_nibbles([0b1000, 0b0000]),
    BlockColumn.from_nibbles([0b0011, 0b0000]),
)

NUM_ROUNDS = 2


def _trace(
    tracer: TraceRecorder | None,
    direction: str,
    round_num: int,
    operation: str,
    state: BlockState,
    round_key: BlockState | None = None,
) -> None:
    if tracer is None:
        return
    fields = {
        "direction": direction,
        "round": round_num,
        "operation": operation,
        "state": state,
    }
    if round_key is not None:
        fields["round_key"] = round_key
    tracer.record(**fields)


def expand_keys(initial_key: BlockState) -> tuple[BlockState, BlockState, BlockState]:
    """
    Derive the three round keys from the initial key.

    For r in (1, 2):
      left_r  = SubNib(RotNib(right_{r-1})) ^ RCON[r] ^ left_{r-1}
      right_r = left_r ^ right_{r-1}
    """
    keys = [initial_key]
    for round_num in range(1, NUM_ROUNDS + 1):
        previous = keys[-1]
        left = previous.right.rotate().substitute() + ROUND_CONSTANTS[round_num] + previous.left
        right = left + previous.right
        keys.append(BlockState(left, right))
    return tuple(keys)


def encrypt(
    plaintext: BlockState,
    key: BlockState,
    tracer: TraceRecorder | None = None,
) -> BlockState:
    """
    Encrypt one 16-bit block.

    Args:
        plaintext: Block to encrypt
        key: Initial 16-bit key
        tracer: Optional trace recorder, notified after every transformation

    Returns:
        Ciphertext block
    """
    keys = expand_keys(key)
    _trace(tracer, "encrypt", 0, "input", plaintext, key)

    state = plaintext + keys[0]
    _trace(tracer, "encrypt", 0, "add_round_key", state, keys[0])

    for round_num in range(1, NUM_ROUNDS + 1):
        state = state.substitute()
        _trace(tracer, "encrypt", round_num, "substitute", state)

        state = state.shift_rows()
        _trace(tracer, "encrypt", round_num, "shift_rows", state)

        if round_num < NUM_ROUNDS:
            state = state.mix()
            _trace(tracer, "encrypt", round_num, "mix_columns", state)

        state = state + keys[round_num]
        _trace(tracer, "encrypt", round_num, "add_round_key", state, keys[round_num])

    return state


def decrypt(
    ciphertext: BlockState,
    key: BlockState,
    tracer: TraceRecorder | None = None,
) -> BlockState:
    """
    Decrypt one 16-bit block by running encrypt() backwards.

    Args:
        ciphertext: Block to decrypt
        key: Initial 16-bit key
        tracer: Optional trace recorder, notified after every transformation

    Returns:
        Plaintext block
    """
    keys = expand_keys(key)
    _trace(tracer, "decrypt", NUM_ROUNDS, "input", ciphertext, key)

    state = ciphertext
    for round_num in range(NUM_ROUNDS, 0, -1):
        state = state + keys[round_num]
        _trace(tracer, "decrypt", round_num, "add_round_key", state, keys[round_num])

        if round_num < NUM_ROUNDS:
            state = state.unmix()
            _trace(tracer, "decrypt", round_num, "unmix_columns", state)

        state = state.unshift_rows()
        _trace(tracer, "decrypt", round_num, "unshift_rows", state)

        state = state.unsubstitute()
        _trace(tracer, "decrypt", round_num, "unsubstitute", state)

    state = state + keys[0]
    _trace(tracer, "decrypt", 0, "add_round_key", state, keys[0])

    return state
