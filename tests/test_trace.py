"""
Tests for trace recording.

Verifies that:
- Ciphertext is unchanged with tracing enabled
- Every transformation produces one record, in pipeline order
- JSON Lines output is one valid object per record
- Verbose output contains the compact per-step lines
"""

import contextlib
import io
import json

from saes.state import BlockState, decrypt, encrypt
from saes.trace import TraceRecorder, print_header, print_result


KEY = BlockState.from_int(0x686C)
PT = BlockState.from_int(0x4942)
CT = BlockState.from_int(0x9575)


class TestTraceRecorder:

    def test_ciphertext_unchanged(self):
        tracer = TraceRecorder()
        assert encrypt(PT, KEY, tracer) == encrypt(PT, KEY) == CT

    def test_encrypt_operation_order(self):
        tracer = TraceRecorder()
        encrypt(PT, KEY, tracer)
        ops = [(r["round"], r["operation"]) for r in tracer.get_records()]
        assert ops == [
            (0, "input"),
            (0, "add_round_key"),
            (1, "substitute"),
            (1, "shift_rows"),
            (1, "mix_columns"),
            (1, "add_round_key"),
            (2, "substitute"),
            (2, "shift_rows"),
            (2, "add_round_key"),
        ]

    def test_encrypt_intermediate_states(self):
        tracer = TraceRecorder()
        encrypt(PT, KEY, tracer)
        states = [r["state"] for r in tracer.get_records()]
        assert states == [
            "4942", "212e", "a4af", "afa4", "319a", "11d6", "44e8", "48e4", "9575",
        ]

    def test_round_keys_recorded(self):
        tracer = TraceRecorder()
        encrypt(PT, KEY, tracer)
        keys = [r["round_key"] for r in tracer.get_records()
                if r["operation"] == "add_round_key"]
        assert keys == ["686c", "204c", "dd91"]

    def test_decrypt_operation_order(self):
        tracer = TraceRecorder()
        assert decrypt(CT, KEY, tracer) == PT
        ops = [(r["round"], r["operation"]) for r in tracer.get_records()]
        assert ops == [
            (2, "input"),
            (2, "add_round_key"),
            (2, "unshift_rows"),
            (2, "unsubstitute"),
            (1, "add_round_key"),
            (1, "unmix_columns"),
            (1, "unshift_rows"),
            (1, "unsubstitute"),
            (0, "add_round_key"),
        ]
        assert tracer.get_records()[-1]["state"] == "4942"

    def test_decrypt_mirrors_encrypt_states(self):
        enc = TraceRecorder()
        dec = TraceRecorder()
        encrypt(PT, KEY, enc)
        decrypt(CT, KEY, dec)
        enc_states = [r["state"] for r in enc.get_records()]
        dec_states = [r["state"] for r in dec.get_records()]
        # state after unsubstitute in round 1 equals state after round 0
        assert dec_states[7] == enc_states[1]

    def test_jsonl_output(self):
        buf = io.StringIO()
        tracer = TraceRecorder(trace_file=buf)
        encrypt(PT, KEY, tracer)
        lines = buf.getvalue().splitlines()
        assert len(lines) == 9
        records = [json.loads(line) for line in lines]
        assert [r["seq"] for r in records] == list(range(9))
        assert records[-1]["state"] == "9575"
        assert records[0]["direction"] == "encrypt"

    def test_verbose_output(self):
        tracer = TraceRecorder(verbose=True)
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            encrypt(PT, KEY, tracer)
        output = buf.getvalue()
        assert "ENC R1  mix_columns" in output
        assert "STATE:0011 0001 1001 1010" in output
        assert "KEY:1101 1101 1001 0001" in output

    def test_silent_by_default(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            encrypt(PT, KEY, TraceRecorder())
        assert buf.getvalue() == ""

    def test_clear(self):
        tracer = TraceRecorder()
        encrypt(PT, KEY, tracer)
        tracer.clear()
        assert tracer.get_records() == []
        tracer.record(operation="x")
        assert tracer.get_records()[0]["seq"] == 0


class TestPrinting:

    def test_print_header(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            print_header("S-AES Encryption")
        assert "# S-AES Encryption" in buf.getvalue()

    def test_print_result(self):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            print_result("Ciphertext", CT, True)
        output = buf.getvalue()
        assert "Ciphertext: 1001 0101 0111 0101 (9575)" in output
        assert "[OK] PASS" in output
