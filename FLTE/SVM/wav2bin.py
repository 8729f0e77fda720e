#!/usr/bin/env python3
# =============================================================================
# wav2bin.py — Fast-Load WAV / Tape File → Binary
# =============================================================================
#
# Usage:
#   python -m FLTE.SVM.wav2bin capture.wav                 (→ capture.img)
#   python -m FLTE.SVM.wav2bin capture.wav program.bin
#   python -m FLTE.SVM.wav2bin capture.wav program.tap     (keep the envelope)
#   python -m FLTE.SVM.wav2bin program.tap --type bin      (unwrap a .tap)
#
# The envelope is ALWAYS validated (length prefix + checksum) before anything
# is written.  Nothing is written on failure.
# =============================================================================

from __future__ import annotations
import argparse
import sys
from pathlib import Path

from FLTE import __version__
from FLTE.SMM import tape_format
from FLTE.SMM.constants import BAUD_RATE
from .tape_decoder import demodulate

PROG = "fwav2bin"


def _error(message: str, quiet: bool) -> int:
    if not quiet:
        print(f"{PROG}: {message}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Recover binary data from fast-load cassette audio.",
    )
    parser.add_argument("src", help="Source file (.wav audio, or .tap envelope)")
    parser.add_argument("dst", nargs="?", help="Destination file (default: SRC stem + .img)")
    parser.add_argument(
        "-t", "--type", choices=["img", "bin", "tap"],
        help="Destination file type (default: from extension)",
    )
    parser.add_argument("--tap", action="store_true", help="Source is a .tap envelope, not audio")
    parser.add_argument("-q", "--quiet", action="store_true", help="Print nothing")
    parser.add_argument(
        "--baud", type=int, default=BAUD_RATE,
        help=f"Baud rate the audio was written at, default {BAUD_RATE}",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s version {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    src = Path(args.src)

    read_tape = args.tap or src.suffix.lower() == ".tap"

    try:
        data = src.read_bytes()
        envelope = tape_format.validate(data) if read_tape else demodulate(data, args.baud)
    except (OSError, ValueError) as exc:
        return _error(str(exc), args.quiet)

    if args.dst:
        dst = Path(args.dst)
    else:
        dst = Path(src.stem + "." + (args.type or "img"))

    if args.type:
        write_tape = args.type == "tap"
    else:
        write_tape = dst.suffix.lower() == ".tap"

    output = envelope if write_tape else tape_format.unwrap(envelope)

    try:
        dst.write_bytes(output)
    except OSError as exc:
        return _error(str(exc), args.quiet)

    if not args.quiet:
        print(f"Read {len(envelope)} bytes from {src.name} and wrote {len(output)} bytes to {dst.name}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
