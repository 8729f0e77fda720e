# =============================================================================
# tape_decoder.py — Tape Block Decoder (demodulator)
# =============================================================================
#
# Inverse of TapeBuilder.  WAV bytes in, validated envelope bytes out.
#
# Pipeline:
#   WavReader  →  WaveCycleReader  →  ByteSynchroniser  →  tape_format.validate
#    samples       cycle events        block bytes          length + checksum
#
# Block handling:
#   - Outside a block only START_OF_BLOCK (or END_OF_FILE) is legal.  A
#     regular cycle or END_OF_BLOCK there is a ProtocolViolation.
#   - Inside a block every CYCLE goes to the synchroniser; END_OF_BLOCK or
#     END_OF_FILE closes the block (partial byte → ProtocolViolation).
#     A block that fails this way is kept in `failed_block` for reporting.
#   - Blocks shorter than the 5-byte envelope overhead are clicks / noise and
#     are skipped.  The first block long enough to hold an envelope is
#     validated and returned — a bad length or checksum there is fatal.
# =============================================================================

from __future__ import annotations
from typing import Iterator, NamedTuple

from FLTE.errors import ProtocolViolation
from FLTE.SMM.constants import BAUD_RATE, ENVELOPE_OVERHEAD
from FLTE.SMM import tape_format
from .byte_sync import ByteSynchroniser
from .cycle_reader import CycleKind, WaveCycleReader
from .wav_reader import WavReader


class DecodedBlock(NamedTuple):
    start_sample: int       # sample index of the start-of-block cycle
    end_sample:   int       # sample index where the block closed
    cycle_count:  int       # cycles in the block, start marker included
    pilot_cycles: int       # high cycles seen while awaiting a start bit
    low_cycles:   int       # '0' bits, start bits included
    high_cycles:  int       # halves of '1' bits inside bytes
    data:         bytes     # reassembled bytes (not yet validated)


class TapeDecoder:
    """
    Parameters
    ----------
    wav_bytes : bytes   complete mono PCM WAV file
    baud_rate : int     rate the tape was written at (default 2500)
    """

    def __init__(self, wav_bytes: bytes, baud_rate: int = BAUD_RATE) -> None:
        self.reader = WavReader(wav_bytes)
        self.cycles = WaveCycleReader(self.reader)
        self.sync   = ByteSynchroniser(baud_rate)
        # Block that raised during the last read_block, as far as it got.
        self.failed_block: DecodedBlock | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_block(self) -> DecodedBlock | None:
        """Decode the next block, or return None at end of file."""
        while True:
            event = self.cycles.read_cycle()
            if event.kind is CycleKind.START_OF_BLOCK:
                return self._read_block_body(event.start)
            if event.kind is CycleKind.END_OF_FILE:
                return None
            if event.kind is CycleKind.CYCLE:
                raise ProtocolViolation(
                    f"Received a wave cycle outside a data block (sample {event.start})"
                )
            raise ProtocolViolation(
                f"Received an end of data cycle outside a data block (sample {event.start})"
            )

    def blocks(self) -> Iterator[DecodedBlock]:
        while True:
            block = self.read_block()
            if block is None:
                return
            yield block

    def scan(self) -> list[DecodedBlock]:
        """Every block in the file, unvalidated."""
        return list(self.blocks())

    def decode(self) -> bytes:
        """First envelope-sized block, validated.  Raises if there is none."""
        for block in self.blocks():
            if len(block.data) >= ENVELOPE_OVERHEAD:
                return tape_format.validate(block.data)
        raise ProtocolViolation("Could not extract data from the audio")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_block_body(self, start_sample: int) -> DecodedBlock:
        sync = self.sync
        sync.reset()
        self.failed_block = None
        cycle_count = 1

        try:
            while True:
                event = self.cycles.read_cycle()
                if event.kind is CycleKind.CYCLE:
                    cycle_count += 1
                    sync.feed(event.frequency)
                elif event.kind is CycleKind.START_OF_BLOCK:
                    raise ProtocolViolation(
                        f"Received a start of data cycle inside a data block (sample {event.start})"
                    )
                else:
                    # END_OF_BLOCK or END_OF_FILE
                    return self._block(start_sample, event.start, cycle_count, sync.finish())
        except ProtocolViolation:
            # Keep what was gathered so a report can still show the block.
            self.failed_block = self._block(start_sample, event.start, cycle_count, bytes(sync.data))
            raise

    def _block(self, start_sample: int, end_sample: int, cycle_count: int, data: bytes) -> DecodedBlock:
        sync = self.sync
        return DecodedBlock(
            start_sample=start_sample,
            end_sample=end_sample,
            cycle_count=cycle_count,
            pilot_cycles=sync.pilot_cycles,
            low_cycles=sync.low_cycles,
            high_cycles=sync.high_cycles,
            data=data,
        )


def demodulate(wav_bytes: bytes, baud_rate: int = BAUD_RATE) -> bytes:
    """WAV file bytes → validated envelope bytes."""
    return TapeDecoder(wav_bytes, baud_rate).decode()
