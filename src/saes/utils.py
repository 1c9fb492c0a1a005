"""
Utility functions for block/state conversions and formatting.

S-AES state is 2x2 nibbles in column-major order:
  state[col][row] where row, col in [0..1]

Column-major mapping from a 16-bit block (nibble 0 is the most significant):
  nibble[0] -> state[0][0]
  nibble[1] -> state[0][1]
  nibble[2] -> state[1][0]
  nibble[3] -> state[1][1]
"""

from .state import BlockState


def int_to_state(value: int) -> BlockState:
    """
    Convert a 16-bit integer to a 2x2 S-AES state.

    Args:
        value: Integer block; bits above 16 are dropped

    Returns:
        BlockState
    """
    return BlockState.from_int(value)


def state_to_int(state: BlockState) -> int:
    """
    Convert a 2x2 S-AES state to a 16-bit integer.
    """
    return state.to_int()


def _clean(text: str, prefix: str = "") -> str:
    text = text.strip().replace(" ", "").replace("_", "")
    if prefix and text[:2].lower() == prefix:
        text = text[2:]
    return text


def hex_to_state(hex_str: str) -> BlockState:
    """
    Convert hex string to state.

    Args:
        hex_str: 4 hex chars (16 bits); an optional 0x prefix and spaces
            are ignored

    Raises:
        ValueError: If the string is not exactly 4 hex digits
    """
    digits = _clean(hex_str, "0x")
    if len(digits) != 4:
        raise ValueError(f"Block must be 4 hex chars (16 bits), got {len(digits)}")
    if set(digits.lower()) - set("0123456789abcdef"):
        raise ValueError(f"Invalid hex block: {hex_str!r}")
    return BlockState.from_int(int(digits, 16))


def state_to_hex(state: BlockState) -> str:
    """
    Convert state to a lowercase 4-char hex string.
    """
    return f"{state.to_int():04x}"


def binary_to_state(bin_str: str) -> BlockState:
    """
    Convert a binary string such as '0100 1001 0100 0010' to state.

    Raises:
        ValueError: If the string is not exactly 16 binary digits
    """
    digits = _clean(bin_str, "0b")
    if len(digits) != 16:
        raise ValueError(f"Block must be 16 binary digits, got {len(digits)}")
    if set(digits) - {"0", "1"}:
        raise ValueError(f"Invalid binary block: {bin_str!r}")
    return BlockState.from_int(int(digits, 2))


def parse_block(text: str) -> BlockState:
    """Parse a block given either as 4 hex chars or 16 binary digits."""
    digits = _clean(text, "0b")
    if len(digits) == 16:
        return binary_to_state(text)
    return hex_to_state(text)


def format_state_grid(state: BlockState, indent: str = "  ") -> str:
    """
    Format state as a readable 2x2 grid.

    Returns multi-line string like:
      0100 0100
      1001 0010
    """
    lines = []
    for row in range(2):
        row_bits = [str(state[col][row]) for col in range(2)]
        lines.append(indent + " ".join(row_bits))
    return "\n".join(lines)


def format_state_line(state: BlockState) -> str:
    """
    Format state as four space-separated binary nibbles.
    """
    return str(state)


def xor_states(a: BlockState, b: BlockState) -> BlockState:
    """
    XOR two states element-wise.
    """
    return a + b
