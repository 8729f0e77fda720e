# =============================================================================
# tape_builder.py — Tape Stream Builder (modulator)
# =============================================================================
#
# Turns an envelope byte sequence into a complete mono WAV file.
#
# STREAM LAYOUT:
#   leader : ceil(sample_rate * sync_seconds / cycle_samples) x '1' cycles
#   then for every envelope byte, in order:
#       2 x '1'        inter-byte gap
#       1 x '0'        start bit
#       8 x data bit   LSB first
#       1 x '1'        stop bit
#
# One byte = 12 cycle windows.  At the defaults (8 samples per window,
# 20 kHz) that is 96 samples = 4.8 ms per byte.
#
# TIMING GUARANTEE:
#   Output is a pure function of (envelope bytes, EncoderConfig).  Every window
#   is an exact copy of a pre-computed table — no per-sample arithmetic, no
#   phase accumulation, no randomness.
# =============================================================================

from __future__ import annotations
import math

from FLTE.SMM.constants import LEADER_BIT, GAP_BIT, GAP_CYCLES, START_BIT, STOP_BIT
from .fsk_encoder import EncoderConfig, FSKEncoder
from .wav_writer import WavWriter


class TapeBuilder:
    """
    Builds the WAV for one tape envelope.

    Example:
        builder = TapeBuilder(EncoderConfig(sync_seconds=1.0))
        wav_bytes = builder.build(wrap(b"HELLO"))
    """

    def __init__(self, cfg: EncoderConfig | None = None) -> None:
        self.encoder = FSKEncoder(cfg)
        self.cfg     = self.encoder.cfg

        # Pre-built framing pieces
        enc = self.encoder
        self._gap   = enc.cycle(GAP_BIT) * GAP_CYCLES
        self._start = enc.cycle(START_BIT)
        self._stop  = enc.cycle(STOP_BIT)

    # ── Stream pieces ────────────────────────────────────────────────────────

    @property
    def leader_cycles(self) -> int:
        return math.ceil(
            self.cfg.sample_rate * self.cfg.sync_seconds / self.encoder.cycle_samples
        )

    def leader(self) -> bytes:
        return self.encoder.cycle(LEADER_BIT) * self.leader_cycles

    def frame_byte(self, byte: int) -> bytes:
        """Gap + start + 8 data bits (LSB first) + stop for one byte."""
        return self._gap + self._start + self.encoder.encode_byte(byte) + self._stop

    # ── Full WAV ─────────────────────────────────────────────────────────────

    def build_writer(self, envelope: bytes) -> WavWriter:
        writer = WavWriter(self.cfg.sample_rate, self.cfg.bits_per_sample)
        writer.write(self.leader())
        for byte in bytes(envelope):
            writer.write(self.frame_byte(byte))
        return writer

    def build(self, envelope: bytes) -> bytes:
        return self.build_writer(envelope).finish()


def modulate(envelope: bytes, cfg: EncoderConfig | None = None) -> bytes:
    """Envelope bytes → complete WAV file bytes."""
    return TapeBuilder(cfg).build(envelope)
