"""
Simplified AES Exploration

A 16-bit, two-round S-AES cipher over GF(2^4) for tracing AES-style rounds
by hand:
1. Nibble arithmetic and the S-box (nibble, gf16)
2. Column/state transforms, key expansion and the cipher (state)
"""

__version__ = "1.0.0"

# Default S-AES test values: "IB" encrypted under "hl" (ASCII as nibbles)
DEFAULT_KEY_HEX = "686c"
DEFAULT_PT_HEX = "4942"
DEFAULT_CT_HEX = "9575"

from .nibble import Nibble, FieldElement
from .state import BlockColumn, BlockState, expand_keys, encrypt, decrypt

__all__ = [
    "Nibble",
    "FieldElement",
    "BlockColumn",
    "BlockState",
    "expand_keys",
    "encrypt",
    "decrypt",
]
