# =============================================================================
# byte_sync.py — Bit / Byte Synchroniser
# =============================================================================
#
# Consumes the regular cycles of one block and rebuilds the bytes.
#
# There is no clock recovery: the synchroniser counts half-cycle UNITS.
#   low-frequency cycle  (< mid)  = a whole '0' bit          = 2 units
#   high-frequency cycle (>= mid) = one half of a '1' bit    = 1 unit
#
# Byte state machine:
#
#   AWAITING_START_BIT (units == 0)
#       high cycle → pilot tone / gap / stop bit, ignored
#       low cycle  → start bit, units = 2            → ACCUMULATING_BYTE
#
#   ACCUMULATING_BYTE (2 <= units < 18)
#       low cycle  → units must be even (a '0' cannot land inside a '1'),
#                    units += 2, shift in 0 at bit 7
#       high cycle → units += 1; when units becomes even, shift in 1 at bit 7
#       units == 18 (start + 8 data bits) → emit byte   → AWAITING_START_BIT
#
# Bits arrive LSB first, so shifting right with the new bit at the top leaves
# the byte in natural order after 8 bits.
#
# The design frequencies derive from the baud rate:
#   low = baud, high = 2 x baud, mid = (low + high) // 2   (3750 Hz default)
# =============================================================================

from __future__ import annotations
from enum import Enum, auto

from FLTE.errors import ProtocolViolation
from FLTE.SMM.constants import BAUD_RATE, UNITS_PER_BIT, UNITS_PER_BYTE


class SyncState(Enum):
    AWAITING_START_BIT = auto()
    ACCUMULATING_BYTE  = auto()


class ByteSynchroniser:
    """
    Stateful byte rebuilder for one block.

    Parameters
    ----------
    baud_rate : int
        Bit rate the tape was written at (default 2500).  Sets the low / high
        design frequencies and the decision point between them.
    """

    def __init__(self, baud_rate: int = BAUD_RATE) -> None:
        if baud_rate <= 0:
            raise ValueError(f"baud_rate must be positive, got {baud_rate}")
        self.low_frequency  = baud_rate
        self.high_frequency = 2 * baud_rate
        self.mid_frequency  = (self.low_frequency + self.high_frequency) // 2
        self.reset()

    def reset(self) -> None:
        """Start a new block: empty output, accumulator cleared."""
        self.units        = 0
        self.working_byte = 0
        self.data         = bytearray()

        # Diagnostics for reports
        self.pilot_cycles = 0
        self.low_cycles   = 0
        self.high_cycles  = 0

    @property
    def state(self) -> SyncState:
        return SyncState.AWAITING_START_BIT if self.units == 0 else SyncState.ACCUMULATING_BYTE

    # ── Core synchroniser ────────────────────────────────────────────────────

    def feed(self, frequency: int) -> int | None:
        """
        Consume one regular cycle.

        Returns the completed byte when this cycle finishes one, else None.
        Raises ProtocolViolation for a '0' bit inside a '1' bit.
        """
        low = frequency < self.mid_frequency

        if self.state is SyncState.AWAITING_START_BIT:
            if low:
                self.low_cycles += 1
                self.units = UNITS_PER_BIT
            else:
                self.pilot_cycles += 1
            return None

        if low:
            self.low_cycles += 1
            if self.units & 1:
                raise ProtocolViolation("Received a 0 bit in the middle of a 1 bit")
            self.units += UNITS_PER_BIT
            self.working_byte >>= 1
        else:
            self.high_cycles += 1
            self.units += 1
            if not self.units & 1:
                self.working_byte = (self.working_byte >> 1) | 0x80

        if self.units == UNITS_PER_BYTE:
            byte = self.working_byte
            self.data.append(byte)
            self.units = 0
            self.working_byte = 0
            return byte
        return None

    def finish(self) -> bytes:
        """
        End of block.  Returns the block's bytes.
        Raises ProtocolViolation if a byte was left half-built.
        """
        if self.units != 0:
            raise ProtocolViolation(
                f"Received partial byte ({self.units} of {UNITS_PER_BYTE} half-cycle units)"
            )
        return bytes(self.data)
