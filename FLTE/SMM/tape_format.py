# =============================================================================
# tape_format.py — Tape Envelope ("tap" container) Codec
# =============================================================================
#
# Wraps raw data in the length + checksum envelope the target machine expects
# on tape, and validates/unwraps it again.
#
# ON-WIRE LAYOUT (big-endian):
#
#   +--------+---------------------------+----------+
#   | length |          payload          | checksum |
#   |  u16   |      length bytes         |   u24    |
#   +--------+---------------------------+----------+
#
#   payload  = data + [0xFF]         (explicit terminator, not in the source)
#   length   = len(data) + 1
#   checksum = sum(payload) & 0xFFFFFF   (plain wrapping add, no carry fold)
#
# Example: data 01 02 03  →  00 04 | 01 02 03 FF | 00 01 05
#
# Pure and stateless.  Used the same way for envelopes read from a .tap file
# and envelopes reassembled from demodulated audio.
# =============================================================================

from __future__ import annotations
from typing import NamedTuple

from FLTE.errors import ChecksumMismatch, LengthMismatch
from FLTE.SMM.constants import (
    TERMINATOR, LENGTH_BYTES, CHECKSUM_BYTES, CHECKSUM_MASK,
    ENVELOPE_OVERHEAD, MAX_DATA,
)


class TapeEnvelope(NamedTuple):
    payload:  bytes     # data + terminator
    checksum: int       # 24-bit, sum(payload) & 0xFFFFFF

    @property
    def data(self) -> bytes:
        """The raw data: payload with the trailing terminator trimmed."""
        return self.payload[:-1]

    def to_bytes(self) -> bytes:
        return (
            len(self.payload).to_bytes(LENGTH_BYTES, "big")
            + self.payload
            + self.checksum.to_bytes(CHECKSUM_BYTES, "big")
        )


def checksum24(payload: bytes) -> int:
    return sum(payload) & CHECKSUM_MASK


def build_envelope(raw: bytes) -> TapeEnvelope:
    """
    Build the envelope for a block of raw data.

    Raises LengthMismatch if the data is too long for the u16 length prefix.
    """
    raw = bytes(raw)
    if len(raw) > MAX_DATA:
        raise LengthMismatch(
            f"{len(raw)} bytes of data will not fit a tape block "
            f"(maximum {MAX_DATA})"
        )
    payload = raw + bytes([TERMINATOR])
    return TapeEnvelope(payload=payload, checksum=checksum24(payload))


def wrap(raw: bytes) -> bytes:
    """Raw data → full on-wire envelope bytes."""
    return build_envelope(raw).to_bytes()


def parse(buffer: bytes) -> TapeEnvelope:
    """
    Validate an on-wire envelope and return it.

    Raises
    ------
    LengthMismatch   : buffer shorter than the 5-byte overhead, or the length
                       prefix disagrees with the buffer size
    ChecksumMismatch : stored checksum != sum of the declared payload
    """
    buffer = bytes(buffer)
    if len(buffer) < ENVELOPE_OVERHEAD:
        raise LengthMismatch(
            f"Tape data is {len(buffer)} bytes, shorter than the "
            f"{ENVELOPE_OVERHEAD}-byte envelope"
        )

    length = int.from_bytes(buffer[:LENGTH_BYTES], "big")
    if len(buffer) != length + ENVELOPE_OVERHEAD:
        raise LengthMismatch(
            f"Length prefix ({length}) does not match amount of data "
            f"({len(buffer) - ENVELOPE_OVERHEAD})"
        )

    payload    = buffer[LENGTH_BYTES:LENGTH_BYTES + length]
    calculated = checksum24(payload)
    received   = int.from_bytes(buffer[-CHECKSUM_BYTES:], "big")
    if calculated != received:
        raise ChecksumMismatch(
            f"Stored checksum 0x{received:06X} does not match "
            f"calculated checksum 0x{calculated:06X}"
        )

    return TapeEnvelope(payload=payload, checksum=received)


def validate(buffer: bytes) -> bytes:
    """Validate an envelope and hand the same bytes back."""
    return parse(buffer).to_bytes()


def unwrap(buffer: bytes) -> bytes:
    """Validated envelope bytes → raw data (length, terminator, checksum removed)."""
    return parse(buffer).data
