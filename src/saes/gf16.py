"""
Galois Field arithmetic for the S-AES nibble S-box.

Implements GF(2^4) operations on plain integers in [0, 15].

Field construction:
  GF(2^4) = GF(2)[x] / (x^4 + x + 1)

Bit numbering in the polynomial code below: bit 0 = coefficient of x^0 (LSB).
The S-box matrices are written MSB-first, matching how S-AES is usually
presented on paper.
"""

# ===========================================================================
# GF(2^4) Arithmetic (4-bit elements)
# Polynomial: x^4 + x + 1
# ===========================================================================

REDUCING_POLYNOMIAL = 0b10011

FIELD_SIZE = 16


def gf16_add(a: int, b: int) -> int:
    """Add (and subtract) in GF(2^4): bitwise XOR."""
    return (a ^ b) & 0xF


def gf16_mult(a: int, b: int) -> int:
    """
    Multiply in GF(2^4) with polynomial x^4 + x + 1.

    The degree-6 product is expanded coefficient by coefficient with AND/XOR,
    then reduced from bit 6 down to bit 4.
    """
    a = a & 0xF
    b = b & 0xF

    a0 = a & 1
    a1 = (a >> 1) & 1
    a2 = (a >> 2) & 1
    a3 = (a >> 3) & 1
    b0 = b & 1
    b1 = (b >> 1) & 1
    b2 = (b >> 2) & 1
    b3 = (b >> 3) & 1

    p6 = a3 & b3
    p5 = (a3 & b2) ^ (a2 & b3)
    p4 = (a3 & b1) ^ (a2 & b2) ^ (a1 & b3)
    p3 = (a3 & b0) ^ (a2 & b1) ^ (a1 & b2) ^ (a0 & b3)
    p2 = (a2 & b0) ^ (a1 & b1) ^ (a0 & b2)
    p1 = (a1 & b0) ^ (a0 & b1)
    p0 = a0 & b0

    product = (p6 << 6) | (p5 << 5) | (p4 << 4) | (p3 << 3) | (p2 << 2) | (p1 << 1) | p0

    return gf16_reduce(product)


def gf16_reduce(value: int) -> int:
    """Reduce a polynomial of degree <= 6 modulo x^4 + x + 1."""
    remainder = value & 0x7F
    for shift in range(2, -1, -1):
        if remainder & (0x10 << shift):
            remainder ^= REDUCING_POLYNOMIAL << shift
    return remainder & 0xF


def gf16_pow(a: int, exponent: int) -> int:
    """Raise to a non-negative power by repeated multiplication."""
    result = 1
    for _ in range(exponent):
        result = gf16_mult(result, a)
    return result


def gf16_inverse(a: int) -> int:
    """
    Inverse in GF(2^4) via Fermat's little theorem: a^-1 = a^(16 - 2).

    Zero has no inverse; it maps to zero.
    """
    return gf16_pow(a & 0xF, FIELD_SIZE - 2)


def gf16_div(a: int, b: int) -> int:
    """Multiply a by the inverse of b."""
    return gf16_mult(a, gf16_inverse(b))


# ===========================================================================
# S-AES S-box Affine Transformation
# ===========================================================================

# Rows of the 4x4 GF(2) matrix, MSB-first: output bit i is the parity of
# (row_i AND input).
SBOX_MATRIX = [
    0b1011,
    0b1101,
    0b1110,
    0b0111,
]

INV_SBOX_MATRIX = [
    0b1110,
    0b0111,
    0b1011,
    0b1101,
]

AFFINE_CONST = 0b1001


def mat_vec_mult(matrix: list[int], vec: int) -> int:
    """Multiply 4x4 bit matrix by 4-bit vector."""
    result = 0
    for i in range(4):
        product = matrix[i] & vec
        bit = bin(product).count('1') & 1
        result |= (bit << (3 - i))
    return result


def apply_affine(nibble: int) -> int:
    """Apply S-AES affine transformation: y = M*x + 1001."""
    return mat_vec_mult(SBOX_MATRIX, nibble) ^ AFFINE_CONST


def apply_inverse_affine(nibble: int) -> int:
    """Undo apply_affine: x = M^-1 * (y + 1001)."""
    return mat_vec_mult(INV_SBOX_MATRIX, (nibble & 0xF) ^ AFFINE_CONST)


def sbox_derived(nibble: int) -> int:
    """S-box by derivation: field inverse, then affine transformation."""
    return apply_affine(gf16_inverse(nibble))


def inv_sbox_derived(nibble: int) -> int:
    """Inverse S-box by derivation: inverse affine, then field inverse."""
    return gf16_inverse(apply_inverse_affine(nibble))


def _build_sbox_tables() -> tuple[list[int], list[int]]:
    """Build lookup tables from the matrix derivation."""
    sbox = [sbox_derived(x) for x in range(FIELD_SIZE)]
    inv_sbox = [0] * FIELD_SIZE
    for x, y in enumerate(sbox):
        inv_sbox[y] = x
    return sbox, inv_sbox


# Precomputed lookup tables
SBOX, INV_SBOX = _build_sbox_tables()


def _build_mult_table() -> list[list[int]]:
    return [[gf16_mult(a, b) for b in range(FIELD_SIZE)] for a in range(FIELD_SIZE)]


MULT_TABLE = _build_mult_table()

INVERSE_TABLE = [gf16_inverse(x) for x in range(FIELD_SIZE)]


# ===========================================================================
# Verification
# ===========================================================================

def verify_sbox_tables():
    """Verify derived S-box tables match the reference lookup tables."""
    from .reference import SBOX as REF_SBOX, INV_SBOX as REF_INV_SBOX

    mismatches = []
    for i in range(FIELD_SIZE):
        if sbox_derived(i) != REF_SBOX[i]:
            mismatches.append(("sbox", i, sbox_derived(i), REF_SBOX[i]))
        if inv_sbox_derived(i) != REF_INV_SBOX[i]:
            mismatches.append(("inv_sbox", i, inv_sbox_derived(i), REF_INV_SBOX[i]))

    return len(mismatches) == 0, mismatches
