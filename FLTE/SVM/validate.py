#!/usr/bin/env python3
# =============================================================================
# validate.py — FLTE Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m FLTE.SVM.validate
#             or python FLTE/SVM/validate.py (from project root)
#
# Tests:
#   1. Constants integrity   — derived timing, framing and envelope sizes
#   2. FSK encoder           — cycle windows have the right shape and levels
#   3. Tape envelope         — known vector, checksum and length guards
#   4. Round trip            — modulate → demodulate across configurations
#   5. soundfile cross-check — generated WAVs open in libsndfile unchanged
# =============================================================================

import io
import itertools
import os
import sys

# Allow running from project root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np
import soundfile as sf

from FLTE.errors import ChecksumMismatch, LengthMismatch, ProtocolViolation
from FLTE.SMM import tape_format
from FLTE.SMM.constants import (
    SAMPLE_RATE, BAUD_RATE, SAMPLES_PER_CYCLE,
    LOW_FREQUENCY, HIGH_FREQUENCY, MID_FREQUENCY,
    GAP_CYCLES, DATA_BITS, UNITS_PER_BIT, UNITS_PER_BYTE,
    ENVELOPE_OVERHEAD, LENGTH_BYTES, CHECKSUM_BYTES,
)
from FLTE.SGM.fsk_encoder import EncoderConfig, FSKEncoder
from FLTE.SGM.tape_builder import TapeBuilder, modulate
from FLTE.SVM.tape_decoder import demodulate
from FLTE.SVM.wav_reader import WavReader

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0

def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


# =============================================================================
# TEST 1 — Constants Integrity
# =============================================================================
print("\n" + "="*60)
print("TEST 1 — Constants Integrity")
print("="*60)

check("SAMPLE_RATE = 20000",          SAMPLE_RATE == 20_000)
check("BAUD_RATE = 2500",             BAUD_RATE == 2_500)
check("SAMPLES_PER_CYCLE = 8",        SAMPLES_PER_CYCLE == 8, f"got {SAMPLES_PER_CYCLE}")
check("SAMPLES_PER_CYCLE is integer", isinstance(SAMPLES_PER_CYCLE, int))
check("HIGH = 2 x LOW",               HIGH_FREQUENCY == 2 * LOW_FREQUENCY)
check("MID = 3750 Hz",                MID_FREQUENCY == 3_750, f"got {MID_FREQUENCY}")
check("UNITS_PER_BYTE = start + 8 data bits",
      UNITS_PER_BYTE == UNITS_PER_BIT * (1 + DATA_BITS))
check("ENVELOPE_OVERHEAD = length prefix + checksum",
      ENVELOPE_OVERHEAD == LENGTH_BYTES + CHECKSUM_BYTES)


# =============================================================================
# TEST 2 — FSK Encoder
# =============================================================================
print("\n" + "="*60)
print("TEST 2 — FSK Encoder")
print("="*60)

enc = FSKEncoder()
zero = list(enc.cycle(0))
one  = list(enc.cycle(1))
runs_zero = [len(list(g)) for _, g in itertools.groupby(zero)]
runs_one  = [len(list(g)) for _, g in itertools.groupby(one)]

check("Square-wave mode at 8 samples/cycle", enc.square_wave)
check("Bit '0': window = SAMPLES_PER_CYCLE", len(zero) == SAMPLES_PER_CYCLE, f"got {len(zero)}")
check("Bit '1': window = SAMPLES_PER_CYCLE", len(one) == SAMPLES_PER_CYCLE, f"got {len(one)}")
check("Bit '0': HHHHLLLL", runs_zero == [4, 4] and zero[0] > zero[-1], f"runs {runs_zero}")
check("Bit '1': HHLLHHLL", runs_one == [2, 2, 2, 2] and one[0] > one[-1], f"runs {runs_one}")
check("Square levels are 218 / 38", set(zero) == {218, 38}, f"got {set(zero)}")

sine = FSKEncoder(EncoderConfig(sample_rate=40_000))
check("Sine mode above 8 samples/cycle", not sine.square_wave)
check("Sine window = 16 samples", len(sine.cycle(0)) == 16)

builder = TapeBuilder(EncoderConfig(sync_seconds=0.5))
check("Leader = ceil(rate x sync / N) cycles",
      builder.leader_cycles == 1_250, f"got {builder.leader_cycles}")
check("Framed byte = gap + start + data + stop windows",
      len(builder.frame_byte(0x41)) == SAMPLES_PER_CYCLE * (GAP_CYCLES + 2 + DATA_BITS))


# =============================================================================
# TEST 3 — Tape Envelope
# =============================================================================
print("\n" + "="*60)
print("TEST 3 — Tape Envelope")
print("="*60)

vector = tape_format.wrap(b"\x01\x02\x03")
check("wrap(01 02 03) = 00 04 01 02 03 FF 00 01 05",
      vector == bytes.fromhex("0004010203FF000105"), vector.hex())
check("unwrap restores the data", tape_format.unwrap(vector) == b"\x01\x02\x03")
check("Empty data wraps to 6 bytes", len(tape_format.wrap(b"")) == ENVELOPE_OVERHEAD + 1)

corrupt = bytearray(vector)
corrupt[3] ^= 0x01
try:
    tape_format.unwrap(bytes(corrupt))
    check("Bit flip → ChecksumMismatch", False, "no error raised")
except ChecksumMismatch:
    check("Bit flip → ChecksumMismatch", True)

try:
    tape_format.unwrap(vector[:-1])
    check("Truncated → LengthMismatch", False, "no error raised")
except LengthMismatch:
    check("Truncated → LengthMismatch", True)


# =============================================================================
# TEST 4 — Round Trip
# =============================================================================
print("\n" + "="*60)
print("TEST 4 — Round Trip")
print("="*60)

payload = bytes(range(256)) + b"FAST LOAD"
configs = [
    ("8-bit / 20 kHz square",        EncoderConfig(sync_seconds=0.1)),
    ("16-bit / 20 kHz square",       EncoderConfig(bits_per_sample=16, sync_seconds=0.1)),
    ("8-bit / 40 kHz sine",          EncoderConfig(sample_rate=40_000, sync_seconds=0.1)),
    ("8-bit / 20 kHz reverse phase", EncoderConfig(reverse_phase=True, sync_seconds=0.1)),
]
for label, cfg in configs:
    envelope = tape_format.wrap(payload)
    try:
        recovered = tape_format.unwrap(demodulate(modulate(envelope, cfg), cfg.baud_rate))
        check(f"{label}: data recovered", recovered == payload)
    except ProtocolViolation as exc:
        check(f"{label}: data recovered", False, str(exc))

silence = modulate(b"", EncoderConfig(sync_seconds=0.0))
try:
    demodulate(silence)
    check("No data → ProtocolViolation", False, "no error raised")
except ProtocolViolation:
    check("No data → ProtocolViolation", True)


# =============================================================================
# TEST 5 — soundfile Cross-check
# =============================================================================
print("\n" + "="*60)
print("TEST 5 — soundfile Cross-check")
print("="*60)

for bits, subtype in ((8, "PCM_U8"), (16, "PCM_16")):
    wav = modulate(tape_format.wrap(b"HELLO"), EncoderConfig(bits_per_sample=bits, sync_seconds=0.1))
    info = sf.info(io.BytesIO(wav))
    ours = WavReader(wav)
    check(f"{bits}-bit: subtype {subtype}", info.subtype == subtype, f"got {info.subtype}")
    check(f"{bits}-bit: mono", info.channels == 1)
    check(f"{bits}-bit: sample rate", info.samplerate == SAMPLE_RATE)
    check(f"{bits}-bit: frame count matches", info.frames == ours.sample_count,
          f"{info.frames} vs {ours.sample_count}")
    theirs, _ = sf.read(io.BytesIO(wav), dtype="float32")
    check(f"{bits}-bit: same sample signs", bool(np.all(np.sign(theirs) == np.sign(ours.samples))))
    print(f"  {INFO} {bits}-bit: {info.frames:,} frames, {info.frames / info.samplerate:.3f} s")


# =============================================================================
# Summary
# =============================================================================
print("\n" + "="*60)
if failures == 0:
    print("  ALL TESTS PASSED")
else:
    print(f"  {failures} TEST(S) FAILED")
print("="*60 + "\n")
sys.exit(0 if failures == 0 else 1)
