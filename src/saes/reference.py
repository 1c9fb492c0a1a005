"""
Reference S-AES implementation for verification.

Table-driven and written directly on 16-bit integers, sharing no code with
the Nibble/BlockState engine, so the two can be checked against each other.
"""

# S-box and inverse as published for S-AES
SBOX = [0x9, 0x4, 0xA, 0xB, 0xD, 0x1, 0x8, 0x5, 0x6, 0x2, 0x0, 0x3, 0xC, 0xE, 0xF, 0x7]
INV_SBOX = [0xA, 0x5, 0x9, 0xB, 0x1, 0x7, 0x8, 0xF, 0x6, 0x0, 0x2, 0x3, 0xC, 0x4, 0xD, 0xE]

RCON1 = 0x80
RCON2 = 0x30


def gf16_mult_ref(a: int, b: int) -> int:
    """
    Multiply two nibbles in GF(2^4) modulo x^4 + x + 1.

    Shift-and-add: accumulate a when the LSB of b is set, then double a,
    folding in x^4 + x + 1 (0x13) whenever bit 4 overflows.
    """
    a &= 0xF
    b &= 0xF
    p = 0
    while b:
        if b & 1:
            p ^= a
        a <<= 1
        if a & 0x10:
            a ^= 0x13
        b >>= 1
    return p & 0xF


def _sub_nib(byte: int) -> int:
    return (SBOX[byte >> 4] << 4) | SBOX[byte & 0xF]


def _rot_nib(byte: int) -> int:
    return ((byte << 4) | (byte >> 4)) & 0xFF


def _sub_word(block: int, table: list[int]) -> int:
    return (
        (table[(block >> 12) & 0xF] << 12)
        | (table[(block >> 8) & 0xF] << 8)
        | (table[(block >> 4) & 0xF] << 4)
        | table[block & 0xF]
    )


def _shift_rows(block: int) -> int:
    # Nibbles 1 and 3 form the bottom row
    return (block & 0xF0F0) | ((block & 0x000F) << 8) | ((block & 0x0F00) >> 8)


def _mix_column(byte: int, m0: int, m1: int) -> int:
    top, bottom = byte >> 4, byte & 0xF
    out0 = gf16_mult_ref(m0, top) ^ gf16_mult_ref(m1, bottom)
    out1 = gf16_mult_ref(m1, top) ^ gf16_mult_ref(m0, bottom)
    return (out0 << 4) | out1


def _mix_columns(block: int, m0: int, m1: int) -> int:
    return (_mix_column(block >> 8, m0, m1) << 8) | _mix_column(block & 0xFF, m0, m1)


def key_schedule(key: int) -> tuple[int, int, int]:
    """
    Expand a 16-bit key into the three 16-bit round keys.

    Args:
        key: 16-bit key

    Returns:
        Tuple of (round key 0, round key 1, round key 2)
    """
    key &= 0xFFFF
    w0, w1 = key >> 8, key & 0xFF
    w2 = w0 ^ RCON1 ^ _sub_nib(_rot_nib(w1))
    w3 = w2 ^ w1
    w4 = w2 ^ RCON2 ^ _sub_nib(_rot_nib(w3))
    w5 = w4 ^ w3
    return (key, (w2 << 8) | w3, (w4 << 8) | w5)


def saes_encrypt(key: int, plaintext: int) -> int:
    """
    Encrypt a single 16-bit block.

    Args:
        key: 16-bit key
        plaintext: 16-bit plaintext block

    Returns:
        16-bit ciphertext
    """
    k0, k1, k2 = key_schedule(key)
    state = (plaintext & 0xFFFF) ^ k0
    state = _mix_columns(_shift_rows(_sub_word(state, SBOX)), 1, 4) ^ k1
    state = _shift_rows(_sub_word(state, SBOX)) ^ k2
    return state


def saes_decrypt(key: int, ciphertext: int) -> int:
    """
    Decrypt a single 16-bit block.

    Args:
        key: 16-bit key
        ciphertext: 16-bit ciphertext block

    Returns:
        16-bit plaintext
    """
    k0, k1, k2 = key_schedule(key)
    state = _sub_word(_shift_rows((ciphertext & 0xFFFF) ^ k2), INV_SBOX)
    state = _sub_word(_shift_rows(_mix_columns(state ^ k1, 9, 2)), INV_SBOX)
    return state ^ k0


def verify_ciphertext(computed: int, key: int, plaintext: int) -> bool:
    """
    Verify computed ciphertext against the reference model.

    Returns:
        True if computed matches reference, False otherwise
    """
    return computed == saes_encrypt(key, plaintext)


def get_expected_ciphertext(key: int, plaintext: int) -> int:
    """
    Get expected ciphertext for given key and plaintext.
    """
    return saes_encrypt(key, plaintext)


def validate_against_reference(
    key: int, plaintext: int, candidate_ciphertext: int
) -> tuple[bool, str]:
    """Validate a candidate ciphertext against the reference model.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected = saes_encrypt(key, plaintext)
    if candidate_ciphertext == expected:
        return True, ""
    else:
        return False, (
            f"Ciphertext mismatch: expected {expected:04x}, "
            f"got {candidate_ciphertext:04x}"
        )


# Known-answer vectors
KNOWN_ANSWER_VECTORS = [
    # "IB" under "hl", ASCII packed as nibbles
    {
        "key": 0x686C,
        "plaintext": 0x4942,
        "ciphertext": 0x9575,
        "description": "IB / hl demo pair",
    },
    # Textbook worked example
    {
        "key": 0x4AF5,
        "plaintext": 0xD728,
        "ciphertext": 0x24EC,
        "description": "Textbook example",
    },
]
