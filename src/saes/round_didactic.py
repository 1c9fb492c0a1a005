"""
Didactic S-AES walkthrough.

Performs one complete S-AES encryption (key expansion, Round 0, Round 1,
Round 2) and explains every transformation step in an educational manner,
then decrypts the result to show the round trip.

Reuses the same Nibble/BlockState primitives as the plain encrypt path.
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from .gf16 import gf16_inverse, mat_vec_mult, SBOX_MATRIX, AFFINE_CONST
from .nibble import Nibble
from .state import (
    BlockState,
    MIX_MATRIX,
    ROUND_CONSTANTS,
    decrypt,
    expand_keys,
)
from .utils import state_to_hex


# ──────────────────────────────────────────────────────────────────
# Formatting helpers
# ──────────────────────────────────────────────────────────────────

def _fmt_matrix_labeled(state: BlockState, indent: str = "    ") -> str:
    """Format a 2x2 state with column headers and row labels."""
    lines: list[str] = []
    lines.append(f"{indent}       c0     c1")
    for row in range(2):
        vals = "   ".join(str(state[col][row]) for col in range(2))
        lines.append(f"{indent}r{row}  [ {vals} ]")
    return "\n".join(lines)


def _nibble_index(row: int, col: int) -> int:
    """Column-major linear index for nibble at (row, col)."""
    return col * 2 + row


def _fmt_nibble_table(
    rows: list[tuple[Any, ...]],
    headers: list[str],
    indent: str = "    ",
) -> str:
    """Format a list of row-tuples as an aligned table."""
    widths = [len(h) for h in headers]
    for r in rows:
        for i, v in enumerate(r):
            widths[i] = max(widths[i], len(str(v)))

    parts: list[str] = []
    hdr = indent + "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    parts.append(hdr)
    parts.append(indent + "  ".join("-" * w for w in widths))
    for r in rows:
        parts.append(indent + "  ".join(str(v).ljust(widths[i]) for i, v in enumerate(r)))
    return "\n".join(parts)


def _positions():
    for col in range(2):
        for row in range(2):
            yield row, col, _nibble_index(row, col)


# ──────────────────────────────────────────────────────────────────
# Walkthrough steps
# ──────────────────────────────────────────────────────────────────

def _explain_key_expansion(out: "_Printer", jl: "_JsonlWriter", key: BlockState) -> tuple[BlockState, ...]:
    round_keys = expand_keys(key)

    out.p("RoundKey[0] is the key itself:")
    out.p(_fmt_matrix_labeled(round_keys[0]))

    for r in (1, 2):
        prev = round_keys[r - 1]
        rotated = prev.right.rotate()
        subbed = rotated.substitute()
        rcon = ROUND_CONSTANTS[r]
        left = round_keys[r].left
        right = round_keys[r].right

        out.p("")
        out.p(f"RoundKey[{r}]:")
        out.p(f"  RotNib(w{2*r-1})        = RotNib({prev.right}) = {rotated}")
        out.p(f"  SubNib(...)           = {subbed}")
        out.p(f"  w{2*r} = w{2*r-2} ^ RCON[{r}] ^ SubNib = {prev.left} ^ {rcon} ^ {subbed} = {left}")
        out.p(f"  w{2*r+1} = w{2*r} ^ w{2*r-1}          = {left} ^ {prev.right} = {right}")
        out.p(_fmt_matrix_labeled(round_keys[r]))

        jl.emit(stage="key_expansion", round=r,
                rot=str(rotated), sub=str(subbed), rcon=str(rcon),
                round_key=state_to_hex(round_keys[r]))

    return round_keys


def _explain_add_round_key(
    out: "_Printer",
    jl: "_JsonlWriter",
    state: BlockState,
    round_key: BlockState,
    round_num: int,
) -> BlockState:
    result = state + round_key
    rows: list[tuple[str, ...]] = []
    for row, col, idx in _positions():
        sv, kv, rv = state[col][row], round_key[col][row], result[col][row]
        rows.append((f"n{idx}", f"({row},{col})", str(sv), str(kv), str(rv)))
        jl.emit(stage=f"add_round_key_{round_num}", i=idx, r=row, c=col,
                state=str(sv), key=str(kv), out=str(rv))
    out.p(f"state XOR RoundKey[{round_num}]:")
    out.p(_fmt_nibble_table(rows, ["idx", "(r,c)", "state", f"rk{round_num}", "out"]))
    out.p("")
    out.p(_fmt_matrix_labeled(result))
    return result


def _explain_substitute(
    out: "_Printer",
    jl: "_JsonlWriter",
    state: BlockState,
    round_num: int,
) -> BlockState:
    out.p("Each nibble x becomes S(x) = M * x^-1 + 1001 in GF(2^4):")
    result = state.substitute()
    rows: list[tuple[str, ...]] = []
    for row, col, idx in _positions():
        x = state[col][row]
        inv = Nibble(gf16_inverse(x.value))
        mixed = Nibble(mat_vec_mult(SBOX_MATRIX, inv.value))
        outv = result[col][row]
        rows.append((f"n{idx}", str(x), str(inv), str(mixed), str(outv)))
        jl.emit(stage=f"substitute_{round_num}", i=idx, r=row, c=col,
                **{"in": str(x), "inverse": str(inv), "out": str(outv)})
    out.p(_fmt_nibble_table(rows, ["idx", "x", "x^-1", "M*x^-1", f"^{AFFINE_CONST:04b}"]))
    out.p("")
    out.p(_fmt_matrix_labeled(result))
    return result


def _explain_shift_rows(
    out: "_Printer",
    jl: "_JsonlWriter",
    state: BlockState,
    round_num: int,
) -> BlockState:
    result = state.shift_rows()
    out.p("Row 0 is unchanged; the two nibbles of row 1 swap places:")
    out.p(f"  Row 1: [{state[0][1]} {state[1][1]}] -> [{result[0][1]} {result[1][1]}]")
    jl.emit(stage=f"shift_rows_{round_num}",
            **{"in": state_to_hex(state), "out": state_to_hex(result)})
    out.p("")
    out.p(_fmt_matrix_labeled(result))
    return result


def _explain_mix_columns(
    out: "_Printer",
    jl: "_JsonlWriter",
    state: BlockState,
    round_num: int,
) -> BlockState:
    m = MIX_MATRIX
    out.p("Each column is multiplied by the fixed matrix in GF(2^4):")
    out.p(f"    [{m[0][0].value} {m[1][0].value}]   [a0]   [r0]")
    out.p(f"    [{m[0][1].value} {m[1][1].value}] x [a1] = [r1]")

    result = state.mix()
    for col in range(2):
        a0, a1 = state[col]
        r0, r1 = result[col]
        four_a0 = m[0][1] * a0
        four_a1 = m[1][0] * a1
        out.p("")
        out.p(f"  --- Column {col} ---")
        out.p(f"  Input:  a0={a0}  a1={a1}")
        out.p(f"  r0 = a0 ^ 4*a1 = {a0} ^ {four_a1} = {r0}")
        out.p(f"  r1 = 4*a0 ^ a1 = {four_a0} ^ {a1} = {r1}")
        jl.emit(stage=f"mix_columns_{round_num}", col=col,
                a=[str(a0), str(a1)], result=[str(r0), str(r1)])

    out.p("")
    out.p(_fmt_matrix_labeled(result))
    return result


# ──────────────────────────────────────────────────────────────────
# Full walkthrough
# ──────────────────────────────────────────────────────────────────

def run_walkthrough(
    key: BlockState,
    plaintext: BlockState,
    verbose: bool = False,
    trace_file: TextIO | None = None,
) -> dict[str, Any]:
    """
    Execute one S-AES encryption with didactic output.

    Returns a dict with:
        round_keys  – the three round keys
        states      – state after each named stage, in order
        ciphertext  – final block
        decrypted   – ciphertext decrypted again with the same key
    """
    out = _Printer(verbose)
    jl = _JsonlWriter(trace_file, mode="walkthrough")
    states: dict[str, BlockState] = {}

    # ── 1. State layout primer ──────────────────────────────────
    out.section("1. S-AES State Layout")
    out.p("S-AES operates on a 2x2 nibble matrix in COLUMN-MAJOR order.")
    out.p("")
    out.p("    n0 n1 n2 n3      col 0  col 1")
    out.p("                =>  r0[ n0     n2 ]")
    out.p("                    r1[ n1     n3 ]")

    # ── 2. Inputs ───────────────────────────────────────────────
    out.section("2. Inputs")
    out.p(f"Key:       {key} ({state_to_hex(key)})")
    out.p(f"Plaintext: {plaintext} ({state_to_hex(plaintext)})")
    jl.emit(stage="inputs", key=state_to_hex(key), plaintext=state_to_hex(plaintext))

    # ── 3. Key expansion ────────────────────────────────────────
    out.section("3. Key Expansion")
    round_keys = _explain_key_expansion(out, jl, key)

    # ── 4. Round 0 ──────────────────────────────────────────────
    out.section("4. Round 0: AddRoundKey")
    state = _explain_add_round_key(out, jl, plaintext, round_keys[0], 0)
    states["round0"] = state

    # ── 5. Round 1 ──────────────────────────────────────────────
    out.section("5. Round 1")
    out.subsection("5.1  SubNibbles")
    state = _explain_substitute(out, jl, state, 1)
    states["round1_substitute"] = state

    out.subsection("5.2  ShiftRows")
    state = _explain_shift_rows(out, jl, state, 1)
    states["round1_shift_rows"] = state

    out.subsection("5.3  MixColumns")
    state = _explain_mix_columns(out, jl, state, 1)
    states["round1_mix_columns"] = state

    out.subsection("5.4  AddRoundKey")
    state = _explain_add_round_key(out, jl, state, round_keys[1], 1)
    states["round1"] = state

    # ── 6. Round 2 ──────────────────────────────────────────────
    out.section("6. Round 2 (no MixColumns)")
    out.subsection("6.1  SubNibbles")
    state = _explain_substitute(out, jl, state, 2)
    states["round2_substitute"] = state

    out.subsection("6.2  ShiftRows")
    state = _explain_shift_rows(out, jl, state, 2)
    states["round2_shift_rows"] = state

    out.subsection("6.3  AddRoundKey")
    state = _explain_add_round_key(out, jl, state, round_keys[2], 2)
    states["round2"] = state

    ciphertext = state
    decrypted = decrypt(ciphertext, key)

    # ── 7. Summary ──────────────────────────────────────────────
    out.section("7. Summary")
    out.p(f"Ciphertext: {ciphertext} ({state_to_hex(ciphertext)})")
    out.p(f"Decrypted:  {decrypted} ({state_to_hex(decrypted)})")
    out.p(f"Round trip: {'OK' if decrypted == plaintext else 'MISMATCH'}")
    jl.emit(stage="summary", ciphertext=state_to_hex(ciphertext),
            decrypted=state_to_hex(decrypted))

    return {
        "round_keys": round_keys,
        "states": states,
        "ciphertext": ciphertext,
        "decrypted": decrypted,
    }


# ──────────────────────────────────────────────────────────────────
# Minimal output abstractions
# ──────────────────────────────────────────────────────────────────

class _Printer:
    """Conditional stdout printer (only when verbose)."""
    def __init__(self, enabled: bool):
        self._on = enabled

    def p(self, text: str = "") -> None:
        if self._on:
            print(text)

    def section(self, title: str) -> None:
        if self._on:
            print(f"\n{'='*60}")
            print(f"  {title}")
            print(f"{'='*60}")

    def subsection(self, title: str) -> None:
        if self._on:
            print(f"\n  --- {title} {'─'*max(0, 45-len(title))}")


class _JsonlWriter:
    """Emit deterministic JSONL events."""

    def __init__(
        self,
        fh: TextIO | None,
        mode: str = "walkthrough",
        extra: dict[str, Any] | None = None,
    ):
        self._fh = fh
        self._base: dict[str, Any] = {"mode": mode}
        if extra:
            self._base.update(extra)
        self._seq = 0

    def emit(self, **kw: Any) -> None:
        if self._fh is None:
            return
        record = dict(self._base)
        record["seq"] = self._seq
        self._seq += 1
        record.update(kw)
        self._fh.write(json.dumps(record, default=str) + "\n")
        self._fh.flush()
