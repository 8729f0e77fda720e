# =============================================================================
# cycle_reader.py — Wave Cycle Detector
# =============================================================================
#
# Walks a WavReader's cursor forward and reports one event per call:
#
#   START_OF_BLOCK : first cycle found after silence / file start
#   CYCLE          : a regular cycle inside a block (length + frequency)
#   END_OF_BLOCK   : a loud sample that did not complete a cycle while in-block
#   END_OF_FILE    : ran out of samples
#
# Cycle detection (three threshold crossings):
#
#        start            mid               end
#          |               |                 |
#   +thr --*---.           |           .-----*----   start: |x| > thr, sign s
#              \           |          /              mid  : first later sample
#   ------------\----------|---------/------------          past -thr·s
#                \         |        /                end  : first later sample
#   -thr ---------'--------*-------'---------------          past +thr·s
#
#   length    = end - start            (samples)
#   frequency = sample_rate // length  (Hz, integer division)
#
# The cursor lands on `end`, which is then the start candidate for the next
# cycle — consecutive cycles share their boundary sample.
#
# Detector state machine:
#
#   AWAITING_CYCLE --cycle found-->    IN_BLOCK        (emit START_OF_BLOCK)
#   IN_BLOCK       --cycle found-->    IN_BLOCK        (emit CYCLE)
#   IN_BLOCK       --loud, no cycle--> AWAITING_CYCLE  (emit END_OF_BLOCK)
#   any            --no samples-->     (emit END_OF_FILE)
# =============================================================================

from __future__ import annotations
from enum import Enum, auto
from typing import NamedTuple

import numpy as np

from FLTE.SMM.constants import CYCLE_THRESHOLD
from .wav_reader import WavReader


class CycleKind(Enum):
    START_OF_BLOCK = auto()
    CYCLE          = auto()
    END_OF_BLOCK   = auto()
    END_OF_FILE    = auto()


class DetectorState(Enum):
    AWAITING_CYCLE = auto()
    IN_BLOCK       = auto()


class WaveCycle(NamedTuple):
    kind:      CycleKind
    start:     int      # sample index where the event was detected
    length:    int      # samples (0 for END_OF_BLOCK / END_OF_FILE)
    frequency: int      # Hz      (0 for END_OF_BLOCK / END_OF_FILE)


class WaveCycleReader:
    """
    Cycle detector over a WavReader.

    Parameters
    ----------
    reader    : WavReader   its cursor is owned by this detector while in use
    threshold : float       normalised crossing level, default 0.2
    """

    def __init__(self, reader: WavReader, threshold: float = CYCLE_THRESHOLD) -> None:
        self.reader = reader
        # Compared at float32 precision, like the samples themselves.
        self.threshold = float(np.float32(threshold))
        self.state = DetectorState.AWAITING_CYCLE
        self._levels: list[float] = reader.samples.tolist()
        # Once a loud sample fails to close a cycle, no later sample can:
        # either nothing crosses back after it, or nothing returns after the
        # first sample that does.
        self._dead_from = len(self._levels)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_cycle(self) -> WaveCycle:
        """Advance to and return the next cycle event."""
        levels = self._levels
        total  = len(levels)
        thr    = self.threshold

        start = self.reader.sample_position
        while start < total:
            level = levels[start]
            if level > thr or level < -thr:
                length = 0 if start >= self._dead_from else self._measure(start)
                if length > 0:
                    self._seek(start + length)
                    frequency = self.reader.sample_rate // length
                    if self.state is DetectorState.AWAITING_CYCLE:
                        self.state = DetectorState.IN_BLOCK
                        return WaveCycle(CycleKind.START_OF_BLOCK, start, length, frequency)
                    return WaveCycle(CycleKind.CYCLE, start, length, frequency)

                # Loud sample but no complete cycle after it.
                self._dead_from = min(self._dead_from, start)
                self._seek(start + 1)
                if self.state is DetectorState.IN_BLOCK:
                    self.state = DetectorState.AWAITING_CYCLE
                    return WaveCycle(CycleKind.END_OF_BLOCK, start, 0, 0)
            start += 1

        self.reader.seek_end()
        return WaveCycle(CycleKind.END_OF_FILE, total, 0, 0)

    def __iter__(self):
        """Yield events up to and including END_OF_FILE."""
        while True:
            event = self.read_cycle()
            yield event
            if event.kind is CycleKind.END_OF_FILE:
                return

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _measure(self, start: int) -> int:
        """Length of the cycle beginning at `start`, or 0 if it never closes."""
        levels = self._levels
        total  = len(levels)
        thr    = self.threshold
        positive = levels[start] > thr

        for mid in range(start + 1, total):
            m = levels[mid]
            if (m < -thr) if positive else (m > thr):
                for end in range(mid + 1, total):
                    e = levels[end]
                    if (e > thr) if positive else (e < -thr):
                        return end - start
                return 0
        return 0

    def _seek(self, index: int) -> None:
        if index < self.reader.sample_count:
            self.reader.sample_position = index
        else:
            self.reader.seek_end()
