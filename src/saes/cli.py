"""Command-line interface for S-AES exploration.

Usage:
    saes encrypt --key 686c --pt 4942 --verbose
    saes decrypt --key 686c --ct 9575
    saes demo
    saes walkthrough --trace walkthrough.jsonl
    saes tables
    saes validate --n 1000 --seed 42
"""

from __future__ import annotations

import sys
from typing import TextIO

import click

from . import DEFAULT_KEY_HEX, DEFAULT_PT_HEX, __version__
from .gf16 import FIELD_SIZE, INV_SBOX, INVERSE_TABLE, MULT_TABLE, SBOX
from .interfaces import ValidationConfig
from .reference import verify_ciphertext, saes_decrypt
from .round_didactic import run_walkthrough
from .state import BlockState, decrypt, encrypt
from .trace import TraceRecorder, print_header, print_result
from .utils import parse_block, state_to_hex
from .validation import export_to_json, run_validation


def _parse_or_exit(text: str, what: str) -> BlockState:
    try:
        return parse_block(text)
    except ValueError as e:
        click.echo(f"Error: Invalid {what}: {e}", err=True)
        sys.exit(1)


def _open_trace(path: str | None) -> TextIO | None:
    if not path:
        return None
    try:
        return open(path, "w")
    except OSError as e:
        click.echo(f"Error: Cannot open trace file: {e}", err=True)
        sys.exit(1)


_key_option = click.option(
    "--key",
    type=str,
    default=DEFAULT_KEY_HEX,
    show_default=True,
    help="16-bit key as 4 hex chars or 16 binary digits",
)
_verbose_option = click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Print every transformation step",
)
_trace_option = click.option(
    "--trace",
    metavar="FILE",
    help="Write a JSON Lines trace to FILE",
)


@click.group()
@click.version_option(version=__version__, prog_name="saes")
def main() -> None:
    """Simplified AES (S-AES) exploration tool.

    Encrypt and decrypt 16-bit blocks, trace the rounds, and inspect
    the GF(2^4) tables behind the cipher.
    """
    pass


@main.command(name="encrypt")
@_key_option
@click.option("--pt", type=str, default=DEFAULT_PT_HEX, show_default=True,
              help="16-bit plaintext as 4 hex chars or 16 binary digits")
@_verbose_option
@_trace_option
def encrypt_cmd(key: str, pt: str, verbose: bool, trace: str | None) -> None:
    """Encrypt one 16-bit block."""
    key_state = _parse_or_exit(key, "key")
    pt_state = _parse_or_exit(pt, "plaintext")

    print_header("S-AES Encryption")
    click.echo(f"Key:       {key_state} ({state_to_hex(key_state)})")
    click.echo(f"Plaintext: {pt_state} ({state_to_hex(pt_state)})")

    trace_file = _open_trace(trace)
    try:
        tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
        ciphertext = encrypt(pt_state, key_state, tracer)
    finally:
        if trace_file:
            trace_file.close()

    passed = verify_ciphertext(ciphertext.to_int(), key_state.to_int(), pt_state.to_int())
    print_result("Ciphertext", ciphertext, passed)
    sys.exit(0 if passed else 1)


@main.command(name="decrypt")
@_key_option
@click.option("--ct", type=str, required=True,
              help="16-bit ciphertext as 4 hex chars or 16 binary digits")
@_verbose_option
@_trace_option
def decrypt_cmd(key: str, ct: str, verbose: bool, trace: str | None) -> None:
    """Decrypt one 16-bit block."""
    key_state = _parse_or_exit(key, "key")
    ct_state = _parse_or_exit(ct, "ciphertext")

    print_header("S-AES Decryption")
    click.echo(f"Key:        {key_state} ({state_to_hex(key_state)})")
    click.echo(f"Ciphertext: {ct_state} ({state_to_hex(ct_state)})")

    trace_file = _open_trace(trace)
    try:
        tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
        plaintext = decrypt(ct_state, key_state, tracer)
    finally:
        if trace_file:
            trace_file.close()

    passed = plaintext.to_int() == saes_decrypt(key_state.to_int(), ct_state.to_int())
    print_result("Plaintext", plaintext, passed)
    sys.exit(0 if passed else 1)


@main.command()
def demo() -> None:
    """Encrypt "IB" under the key "hl" and decrypt it again."""
    plaintext = BlockState.from_nibbles([0b0100, 0b1001, 0b0100, 0b0010])  # "IB" in ASCII
    key = BlockState.from_nibbles([0b0110, 0b1000, 0b0110, 0b1100])  # "hl" in ASCII

    click.echo(f"Plain text: {plaintext}")
    ciphertext = encrypt(plaintext, key)
    click.echo(f"Cipher text: {ciphertext}")
    decrypted = decrypt(ciphertext, key)
    click.echo(f"Decrypted: {decrypted}")
    click.echo(f"Decrypted is equal to plain text?: {plaintext == decrypted}")


@main.command()
@_key_option
@click.option("--pt", type=str, default=DEFAULT_PT_HEX, show_default=True,
              help="16-bit plaintext as 4 hex chars or 16 binary digits")
@click.option("--quiet", "-q", is_flag=True, help="Only print the final result")
@_trace_option
def walkthrough(key: str, pt: str, quiet: bool, trace: str | None) -> None:
    """Didactic step-by-step walkthrough of one encryption."""
    key_state = _parse_or_exit(key, "key")
    pt_state = _parse_or_exit(pt, "plaintext")

    trace_file = _open_trace(trace)
    try:
        result = run_walkthrough(
            key_state, pt_state,
            verbose=not quiet,
            trace_file=trace_file,
        )
    finally:
        if trace_file:
            trace_file.close()

    click.echo(f"\nCiphertext: {state_to_hex(result['ciphertext'])}")
    click.echo(f"Decrypted:  {state_to_hex(result['decrypted'])}")


@main.command()
def tables() -> None:
    """Print the S-box, inverse S-box, inverse and multiplication tables."""
    click.echo("x       " + " ".join(f"{x:x}" for x in range(FIELD_SIZE)))
    click.echo("S(x)    " + " ".join(f"{v:x}" for v in SBOX))
    click.echo("S^-1(x) " + " ".join(f"{v:x}" for v in INV_SBOX))
    click.echo("x^-1    " + " ".join(f"{v:x}" for v in INVERSE_TABLE))
    click.echo("")
    click.echo("Multiplication in GF(2^4) mod x^4 + x + 1:")
    click.echo("       " + " ".join(f"{x:x}" for x in range(FIELD_SIZE)))
    for a in range(FIELD_SIZE):
        click.echo(f"  {a:x} |  " + " ".join(f"{MULT_TABLE[a][b]:x}" for b in range(FIELD_SIZE)))


@main.command()
@click.option(
    "--n",
    "num_tests",
    type=int,
    default=100,
    help="Number of random round trips (default: 100)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducibility",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write a JSON report to this path",
)
@_verbose_option
def validate(num_tests: int, seed: int | None, output: str | None, verbose: bool) -> None:
    """Validate the cipher against known answers and the reference model."""
    try:
        config = ValidationConfig(num_tests=num_tests, seed=seed, verbose=verbose)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    result = run_validation(config, echo=click.echo)

    if output:
        path = export_to_json(result, output)
        click.echo(f"Report written to {path}")

    click.echo("")
    if result.passed:
        click.echo(f"VALIDATION PASSED: All {result.total} checks passed")
        sys.exit(0)
    else:
        click.echo(f"VALIDATION FAILED: {result.total - result.total_passed} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
