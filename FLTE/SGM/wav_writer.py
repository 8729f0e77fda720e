# =============================================================================
# wav_writer.py — Mono PCM WAV Container Writer
# =============================================================================
#
# Builds a RIFF/WAVE file incrementally in memory:
#
#   1. RIFF header with a placeholder size
#   2. "fmt " chunk (fixed 16-byte body: PCM, mono, rate, byte rate,
#      block align, bits per sample)
#   3. "data" chunk header with a placeholder size
#   4. raw sample bytes, appended as the modulator produces them
#   5. finish(): seek back and patch both size fields
#
# Byte rate and block align are DERIVED from sample rate and bit depth —
# they are never configured independently.
#
# No pad byte is appended after an odd-length data chunk; PocketTools
# does not write one and its files are the compatibility target.
# =============================================================================

from __future__ import annotations
import io
import struct

from FLTE.SMM.constants import (
    RIFF_TAG, WAVE_TAG, FMT_TAG, DATA_TAG,
    FMT_CHUNK_SIZE, WAVE_FORMAT_PCM, CHANNEL_COUNT,
    SUPPORTED_BITS_PER_SAMPLE,
)


class WavWriter:
    """
    Usage:
        w = WavWriter(sample_rate=20000, bits_per_sample=8)
        w.write(cycle_bytes)
        ...
        wav_bytes = w.finish()
    """

    def __init__(self, sample_rate: int, bits_per_sample: int) -> None:
        if bits_per_sample not in SUPPORTED_BITS_PER_SAMPLE:
            raise ValueError(f"bits_per_sample must be 8 or 16, got {bits_per_sample}")
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")

        self.sample_rate     = sample_rate
        self.bits_per_sample = bits_per_sample
        self.block_align     = CHANNEL_COUNT * bits_per_sample // 8
        self.byte_rate       = sample_rate * self.block_align

        self._buf = io.BytesIO()
        self._finished = False

        self._buf.write(RIFF_TAG)
        self._riff_size_pos = self._buf.tell()
        self._buf.write(struct.pack("<I", 0))           # patched in finish()
        self._buf.write(WAVE_TAG)

        self._buf.write(struct.pack(
            "<4sIHHIIHH",
            FMT_TAG, FMT_CHUNK_SIZE, WAVE_FORMAT_PCM, CHANNEL_COUNT,
            sample_rate, self.byte_rate, self.block_align, bits_per_sample,
        ))

        self._buf.write(DATA_TAG)
        self._data_size_pos = self._buf.tell()
        self._buf.write(struct.pack("<I", 0))           # patched in finish()
        self._data_start = self._buf.tell()

    # ── Sample data ──────────────────────────────────────────────────────────

    def write(self, sample_bytes: bytes) -> None:
        """Append already-encoded PCM sample bytes to the data chunk."""
        if self._finished:
            raise ValueError("WAV writer already finished")
        self._buf.write(sample_bytes)

    @property
    def data_size(self) -> int:
        return self._buf.tell() - self._data_start if not self._finished else self._final_data_size

    @property
    def sample_count(self) -> int:
        return self.data_size // self.block_align

    @property
    def duration_seconds(self) -> float:
        return self.data_size / self.byte_rate

    # ── Finalise ─────────────────────────────────────────────────────────────

    def finish(self) -> bytes:
        """Back-patch the size fields and return the complete WAV file."""
        if not self._finished:
            end = self._buf.seek(0, io.SEEK_END)
            self._final_data_size = end - self._data_start

            self._buf.seek(self._data_size_pos)
            self._buf.write(struct.pack("<I", self._final_data_size))

            self._buf.seek(self._riff_size_pos)
            self._buf.write(struct.pack("<I", end - 8))

            self._buf.seek(0, io.SEEK_END)
            self._finished = True
        return self._buf.getvalue()
