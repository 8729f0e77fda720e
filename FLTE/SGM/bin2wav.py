#!/usr/bin/env python3
# =============================================================================
# bin2wav.py — Binary / Tape File → Fast-Load WAV
# =============================================================================
#
# Usage:
#   python -m FLTE.SGM.bin2wav program.bin
#   python -m FLTE.SGM.bin2wav program.bin program.wav --sync 1.5
#   python -m FLTE.SGM.bin2wav program.tap               (already wrapped)
#   python -m FLTE.SGM.bin2wav program.bin --tap         (write program.tap)
#   python -m FLTE.SGM.bin2wav program.bin --bits 16 --rate 40000
#
# Input type:
#   .tap (or --type tap) → the file is an envelope; it is validated as-is
#   anything else        → raw data, wrapped in a new envelope
#
# Output type:
#   .tap (or --tap)      → envelope bytes
#   anything else        → WAV audio
# =============================================================================

from __future__ import annotations
import argparse
import sys
from pathlib import Path

from FLTE import __version__
from FLTE.errors import TapeError
from FLTE.SMM import tape_format
from FLTE.SMM.constants import (
    SAMPLE_RATE, BAUD_RATE, BITS_PER_SAMPLE, SYNC_SECONDS,
    SUPPORTED_BITS_PER_SAMPLE, ENVELOPE_OVERHEAD,
)
from .fsk_encoder import EncoderConfig
from .tape_builder import TapeBuilder

PROG = "fbin2wav"


def _error(message: str, quiet: bool) -> int:
    if not quiet:
        print(f"{PROG}: {message}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Convert a binary or tape file to fast-load cassette audio.",
    )
    parser.add_argument("src", help="Source file (.bin/.img raw data, or .tap envelope)")
    parser.add_argument("dst", nargs="?", help="Destination file (.wav or .tap)")
    parser.add_argument(
        "-t", "--type", choices=["img", "bin", "tap"],
        help="Source file type (default: from extension)",
    )
    parser.add_argument(
        "-s", "--sync", type=float, default=SYNC_SECONDS,
        help=f"Leader (pilot tone) length in seconds, default {SYNC_SECONDS}",
    )
    parser.add_argument("--tap", action="store_true", help="Write a .tap envelope instead of audio")
    parser.add_argument("-q", "--quiet", action="store_true", help="Print nothing")
    parser.add_argument(
        "--rate", type=int, default=SAMPLE_RATE,
        help=f"Output sample rate in Hz, default {SAMPLE_RATE}",
    )
    parser.add_argument(
        "--baud", type=int, default=BAUD_RATE,
        help=f"Baud rate, default {BAUD_RATE}",
    )
    parser.add_argument(
        "--bits", type=int, choices=SUPPORTED_BITS_PER_SAMPLE, default=BITS_PER_SAMPLE,
        help=f"Bits per sample, default {BITS_PER_SAMPLE}",
    )
    parser.add_argument("--reverse-phase", action="store_true", help="Invert the waveform")
    parser.add_argument("--version", action="version", version=f"%(prog)s version {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    src = Path(args.src)

    read_tape = (args.type == "tap") if args.type else src.suffix.lower() == ".tap"

    # ── Read + wrap / validate ───────────────────────────────────────────────
    try:
        data = src.read_bytes()
        envelope = tape_format.validate(data) if read_tape else tape_format.wrap(data)
    except (OSError, TapeError) as exc:
        return _error(f"Could not read input file - {exc}", args.quiet)

    if args.dst:
        dst = Path(args.dst)
    else:
        dst = Path(src.stem + (".tap" if args.tap else ".wav"))
    write_tape = args.tap or dst.suffix.lower() == ".tap"
    bytes_read = len(envelope) - (0 if read_tape else ENVELOPE_OVERHEAD + 1)

    # ── Write ────────────────────────────────────────────────────────────────
    try:
        if write_tape:
            dst.write_bytes(envelope)
            report = f"wrote {len(envelope)} bytes"
        else:
            cfg = EncoderConfig(
                sample_rate=args.rate,
                baud_rate=args.baud,
                bits_per_sample=args.bits,
                sync_seconds=args.sync,
                reverse_phase=args.reverse_phase,
            )
            writer = TapeBuilder(cfg).build_writer(envelope)
            dst.write_bytes(writer.finish())
            report = f"wrote {writer.duration_seconds:g} seconds of audio"
    except (OSError, ValueError) as exc:
        return _error(f"Could not write output file - {exc}", args.quiet)

    if not args.quiet:
        print(f"Read {bytes_read} bytes from {src.name} and {report} to {dst.name}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
