#!/usr/bin/env python3
# =============================================================================
# load_sim.py — Tape Load Simulator
# =============================================================================
#
# Plays a captured (or generated) WAV through the decoder the way the target
# machine's loader would, and reports whether the load would succeed.
#
# Usage:
#   python -m FLTE.SVM.load_sim <path_to_wav>
#   python -m FLTE.SVM.load_sim <path_to_wav> --baud 2500
#   python -m FLTE.SVM.load_sim <path_to_wav> --dump-bytes
#
# Output sections:
#   [1] File info          — sample rate, channels, duration, subtype
#   [2] Decoder config     — design frequencies, decision point, threshold
#   [3] Block report       — every block found, with pilot / low / high counts
#   [4] Envelope report    — length prefix, checksum, data size
#   [5] VERDICT            — PASS / FAIL with reason
#
# =============================================================================

from __future__ import annotations
import argparse
import os
import sys

import soundfile as sf

from FLTE.errors import TapeError
from FLTE.SMM import tape_format
from FLTE.SMM.constants import BAUD_RATE, CYCLE_THRESHOLD, ENVELOPE_OVERHEAD
from .tape_decoder import TapeDecoder

DIVIDER = "=" * 68
DUMP_BYTES = 64


def _hex(data: bytes) -> str:
    return " ".join(f"{b:02X}" for b in data)


def run_sim(wav_path: str, baud: int = BAUD_RATE, dump_bytes: bool = False) -> bool:
    """
    Run the full decode pipeline on one WAV file.
    Returns True if the file would load, False otherwise.
    """
    reasons: list[str] = []

    # -----------------------------------------------------------------------
    # [1] File info
    # -----------------------------------------------------------------------
    print(f"\n{DIVIDER}")
    print("  Fast-Load Tape Simulator")
    print(DIVIDER)

    if not os.path.exists(wav_path):
        print(f"  [!!] File not found: {wav_path}")
        return False

    try:
        info = sf.info(wav_path)
        with open(wav_path, "rb") as fh:
            wav_bytes = fh.read()
    except (RuntimeError, OSError) as exc:
        # soundfile reports unreadable audio as LibsndfileError (a RuntimeError)
        print(f"  [FAIL] Could not read {os.path.basename(wav_path)}: {exc}")
        reasons.append(f"unreadable audio file: {exc}")
        return _verdict(reasons)

    print(f"  File     : {os.path.basename(wav_path)}")
    print(f"  Rate     : {info.samplerate} Hz")
    print(f"  Channels : {info.channels}")
    print(f"  Duration : {info.frames / info.samplerate:.2f} s  ({info.frames:,} frames)")
    print(f"  Format   : {info.subtype}")

    try:
        decoder = TapeDecoder(wav_bytes, baud)
    except (TapeError, ValueError) as exc:
        print(f"  [FAIL] {exc}")
        reasons.append(str(exc))
        return _verdict(reasons)

    # -----------------------------------------------------------------------
    # [2] Decoder config
    # -----------------------------------------------------------------------
    sync = decoder.sync
    rate = decoder.reader.sample_rate
    print("\n  -- Decoder Configuration --")
    print(f"  Baud rate         : {baud}")
    print(f"  '0' frequency     : {sync.low_frequency} Hz")
    print(f"  '1' frequency     : {sync.high_frequency} Hz")
    print(f"  Decision point    : {sync.mid_frequency} Hz")
    print(f"  '0' cycle length  : {rate // sync.low_frequency} samples")
    print(f"  '1' cycle length  : {rate // sync.high_frequency} samples")
    print(f"  Crossing level    : +/-{CYCLE_THRESHOLD}")

    # -----------------------------------------------------------------------
    # [3] Block report
    # -----------------------------------------------------------------------
    print("\n  -- Block Report --")
    blocks = []
    try:
        for block in decoder.blocks():
            blocks.append(block)
    except TapeError as exc:
        reasons.append(f"decode stopped at sample {decoder.reader.sample_position}: {exc}")
        print(f"  [FAIL] {exc}")

    rows = [(block, "") for block in blocks]
    if decoder.failed_block is not None:
        rows.append((decoder.failed_block, "failed"))

    print(f"  Blocks found      : {len(blocks)}")
    if rows:
        print(f"  {'#':>3}  {'Start (s)':>9}  {'End (s)':>9}  {'Cycles':>8}  {'Pilot':>7}  {'Low':>7}  {'High':>7}  {'Bytes':>7}")
        print(f"  {'-'*3}  {'-'*9}  {'-'*9}  {'-'*8}  {'-'*7}  {'-'*7}  {'-'*7}  {'-'*7}")
        for n, (block, note) in enumerate(rows):
            print(
                f"  {n:>3}  {block.start_sample / rate:>9.3f}  {block.end_sample / rate:>9.3f}  "
                f"{block.cycle_count:>8,}  {block.pilot_cycles:>7,}  {block.low_cycles:>7,}  {block.high_cycles:>7,}  {len(block.data):>7,}  {note}".rstrip()
            )

    # -----------------------------------------------------------------------
    # [4] Envelope report
    # -----------------------------------------------------------------------
    print("\n  -- Envelope Report --")
    candidate = next((b for b in blocks if len(b.data) >= ENVELOPE_OVERHEAD), None)
    if candidate is None:
        if blocks or not reasons:
            reasons.append("no block long enough to hold a tape envelope")
        print("  [FAIL] Could not extract data from the audio")
    else:
        try:
            envelope = tape_format.parse(candidate.data)
        except TapeError as exc:
            reasons.append(str(exc))
            print(f"  [FAIL] {exc}")
        else:
            print(f"  Length prefix     : {len(envelope.payload)}")
            print(f"  Checksum          : 0x{envelope.checksum:06X}")
            print(f"  Data bytes        : {len(envelope.data):,}")
            print("  [PASS] Length and checksum OK")
            if dump_bytes:
                print(f"\n  -- Data Dump (first {DUMP_BYTES} bytes) --")
                shown = envelope.data[:DUMP_BYTES]
                for offset in range(0, len(shown), 16):
                    print(f"  {offset:04X}  {_hex(shown[offset:offset + 16])}")

    return _verdict(reasons)


def _verdict(reasons: list[str]) -> bool:
    print(f"\n{DIVIDER}")
    if not reasons:
        print("  VERDICT: PASS — the loader would accept this tape")
    else:
        print("  VERDICT: FAIL — the loader would reject this tape")
        for r in reasons:
            print(f"    - {r}")
    print(f"{DIVIDER}\n")
    return not reasons


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main() -> None:
    parser = argparse.ArgumentParser(
        description="Fast-Load Tape Simulator",
    )
    parser.add_argument("wav", help="Path to a mono 8- or 16-bit PCM WAV file")
    parser.add_argument(
        "--baud", type=int, default=BAUD_RATE,
        help=f"Baud rate the tape was written at, default {BAUD_RATE}",
    )
    parser.add_argument(
        "--dump-bytes", action="store_true",
        help=f"Print the first {DUMP_BYTES} decoded data bytes",
    )
    args = parser.parse_args()

    ok = run_sim(
        wav_path=args.wav,
        baud=args.baud,
        dump_bytes=args.dump_bytes,
    )
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
