# =============================================================================
# fsk_encoder.py — FSK Cycle Encoder
# =============================================================================
#
# Converts bits into raw PCM sample bytes using the fast-load FSK scheme.
#
# FSK RULES (PocketTools compatible):
#   - Every bit occupies exactly one cycle window of N = sample_rate // baud
#     samples.
#   - Bit '0': ONE full oscillation in the window  (baud Hz).
#   - Bit '1': TWO full oscillations in the window (2 x baud Hz).
#   - reverse_phase negates both waveforms.
#
# Sample c of a window is taken at angle a = (c + 1/N) * 2*pi / N, so
#   '0' = sin(a),  '1' = sin(2a).
#
# With the defaults (20 kHz / 2500 baud, N = 8):
#   Bit '0': [H H H H L L L L]
#   Bit '1': [H H L L H H L L]
# At N <= 8 the encoder clips to H = +0.706 / L = -0.705 instead of
# drawing a sine.  Decoders in the field were tuned on that output.
#
# The two windows are pre-computed once; encoding is then table lookup.
# =============================================================================

from __future__ import annotations
import math
from typing import Iterable, NamedTuple

import numpy as np

from FLTE.SMM.constants import (
    SAMPLE_RATE, BAUD_RATE, BITS_PER_SAMPLE, SYNC_SECONDS, REVERSE_PHASE,
    SUPPORTED_BITS_PER_SAMPLE,
    SQUARE_WAVE_MAX_SAMPLES, SQUARE_HIGH, SQUARE_LOW,
    PCM8_CENTRE, PCM8_MAX, PCM16_SCALE, PCM16_MIN, PCM16_MAX,
    DATA_BITS,
)


class EncoderConfig(NamedTuple):
    sample_rate:     int   = SAMPLE_RATE
    baud_rate:       int   = BAUD_RATE
    bits_per_sample: int   = BITS_PER_SAMPLE
    sync_seconds:    float = SYNC_SECONDS
    reverse_phase:   bool  = REVERSE_PHASE


def check_config(cfg: EncoderConfig) -> None:
    """Raise ValueError for a configuration the encoder cannot render."""
    if cfg.sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {cfg.sample_rate}")
    if cfg.baud_rate <= 0:
        raise ValueError(f"baud_rate must be positive, got {cfg.baud_rate}")
    if cfg.baud_rate > cfg.sample_rate:
        raise ValueError(
            f"baud_rate ({cfg.baud_rate}) cannot exceed sample_rate ({cfg.sample_rate})"
        )
    if cfg.bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
        raise ValueError(f"bits_per_sample must be 8 or 16, got {cfg.bits_per_sample}")
    if not math.isfinite(cfg.sync_seconds) or cfg.sync_seconds < 0:
        raise ValueError(f"sync_seconds must be a finite value >= 0, got {cfg.sync_seconds}")


def _to_pcm(values: np.ndarray, bits_per_sample: int) -> bytes:
    """Normalised [-1, +1] float64 samples → little-endian PCM bytes."""
    if bits_per_sample == 8:
        pcm = np.round(np.clip(PCM8_CENTRE + PCM8_CENTRE * values, 0, PCM8_MAX))
        return pcm.astype(np.uint8).tobytes()
    pcm = np.round(np.clip(PCM16_SCALE * values, PCM16_MIN, PCM16_MAX))
    return pcm.astype("<i2").tobytes()


class FSKEncoder:
    """
    Stateless FSK encoder: every bit maps to one of two fixed cycle tables.

    Usage:
        enc = FSKEncoder(EncoderConfig())
        pcm = enc.encode_byte(0x41)           # start/data/stop framing NOT added
        raw = enc.cycle(1) * 3                # three '1' windows
    """

    def __init__(self, cfg: EncoderConfig | None = None) -> None:
        cfg = cfg or EncoderConfig()
        check_config(cfg)
        self.cfg = cfg

        self.cycle_samples = cfg.sample_rate // cfg.baud_rate
        self.square_wave   = self.cycle_samples <= SQUARE_WAVE_MAX_SAMPLES

        self._cycles = (self._render(0), self._render(1))

    # ── Cycle tables ─────────────────────────────────────────────────────────

    def waveform(self, bit: int) -> np.ndarray:
        """Normalised samples of one cycle window for `bit` (before PCM)."""
        n = self.cycle_samples
        c = np.arange(n, dtype=np.float64)
        angle = ((c + 1.0 / n) * math.pi * 2.0) / n
        values = np.sin(angle * (1.0 + bit))
        if self.cfg.reverse_phase:
            values = -values
        if self.square_wave:
            values = np.where(values > 0, SQUARE_HIGH, SQUARE_LOW)
        return values

    def _render(self, bit: int) -> bytes:
        return _to_pcm(self.waveform(bit), self.cfg.bits_per_sample)

    def cycle(self, bit: int) -> bytes:
        """PCM bytes of one cycle window for `bit` (0 or 1)."""
        return self._cycles[1 if bit else 0]

    # ── Bit / byte encoding ──────────────────────────────────────────────────

    def encode_bits(self, bits: Iterable[int]) -> bytes:
        return b"".join(self.cycle(bit) for bit in bits)

    def encode_byte(self, byte: int) -> bytes:
        """The 8 data-bit windows of `byte`, LSB first."""
        return self.encode_bits((byte >> i) & 1 for i in range(DATA_BITS))
