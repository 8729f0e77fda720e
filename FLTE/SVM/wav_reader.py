# =============================================================================
# wav_reader.py — Mono PCM WAV Container Reader
# =============================================================================
#
# Parses a RIFF/WAVE buffer and exposes normalised samples with a cursor.
#
# Container walk:
#   "RIFF" <u32 size> "WAVE"  then chunks  <tag:4> <u32 size> <body>
#   Each body is padded to an even length.  Unknown chunks are skipped by
#   size.  Exactly one "fmt " and one "data" chunk must appear before the
#   declared end of the RIFF container.
#
# Accepted formats: integer PCM (tag 1), 1 channel, 8- or 16-bit.
#
# Normalisation:
#   8-bit  : u8 / 255 - 0.5, * 2            → [-1, +1]
#   16-bit : negative / 32768, positive / 32767, then clamp to [-1, +1]
# Samples are held as float32 and the crossing threshold is compared at the
# same precision.
# =============================================================================

from __future__ import annotations
import struct

import numpy as np

from FLTE.errors import MalformedContainer, OutOfRange, UnsupportedFormat
from FLTE.SMM.constants import (
    RIFF_TAG, WAVE_TAG, FMT_TAG, DATA_TAG,
    FMT_CHUNK_SIZE, WAVE_FORMAT_PCM, CHANNEL_COUNT,
    SUPPORTED_BITS_PER_SAMPLE, PCM8_MAX, PCM16_MIN, PCM16_MAX,
)


def _parse_chunks(wav_bytes: bytes) -> tuple[bytes, bytes]:
    """
    Walk the RIFF container and return (fmt_body, data_body).

    Raises MalformedContainer on bad tags, truncation, or a missing /
    duplicated fmt or data chunk.
    """
    if len(wav_bytes) < 12:
        raise MalformedContainer("File is too short to be a WAVE file")
    riff, riff_size, wave = struct.unpack_from("<4sI4s", wav_bytes, 0)
    if riff != RIFF_TAG:
        raise MalformedContainer("Missing RIFF identifier")
    if wave != WAVE_TAG:
        raise MalformedContainer("Missing WAVE identifier")

    riff_end = 8 + riff_size + (riff_size & 1)
    scan_end = min(riff_end, len(wav_bytes))

    fmt_body = None
    data_body = None
    pos = 12

    while pos + 8 <= scan_end:
        chunk_id, chunk_size = struct.unpack_from("<4sI", wav_bytes, pos)
        body_start = pos + 8
        body_end   = body_start + chunk_size

        if chunk_id == FMT_TAG:
            if fmt_body is not None:
                raise MalformedContainer("Found more than one fmt chunk in file")
            if body_end > len(wav_bytes):
                raise MalformedContainer("fmt chunk runs past the end of the file")
            fmt_body = wav_bytes[body_start:body_end]
        elif chunk_id == DATA_TAG:
            if data_body is not None:
                raise MalformedContainer("Found more than one data chunk in file")
            if body_end > len(wav_bytes):
                raise MalformedContainer("data chunk runs past the end of the file")
            data_body = wav_bytes[body_start:body_end]

        pos = body_end + (chunk_size & 1)

    if fmt_body is None or data_body is None:
        raise MalformedContainer("Could not find WAVE fmt and data in file")

    return fmt_body, data_body


class WavReader:
    """
    Read-only view of a mono PCM WAV buffer.

    Attributes
    ----------
    sample_rate     : int
    channel_count   : int   (always 1)
    bits_per_sample : int   (8 or 16)
    sample_count    : int
    sample_position : int   cursor, advanced by read_sample()
    """

    def __init__(self, wav_bytes: bytes) -> None:
        fmt_body, data_body = _parse_chunks(bytes(wav_bytes))

        if len(fmt_body) < FMT_CHUNK_SIZE:
            raise MalformedContainer("WAVE fmt is not at least 16 bytes in length")

        (format_tag, channels, sample_rate,
         _byte_rate, _block_align, bits) = struct.unpack_from("<HHIIHH", fmt_body, 0)

        if format_tag != WAVE_FORMAT_PCM:
            raise UnsupportedFormat("Only integer PCM WAV files are supported")
        if channels != CHANNEL_COUNT:
            raise UnsupportedFormat("Only mono WAV files are supported")
        if bits not in SUPPORTED_BITS_PER_SAMPLE:
            raise UnsupportedFormat("Only 8- or 16-bit WAV files are supported")

        self.sample_rate     = sample_rate
        self.channel_count   = channels
        self.bits_per_sample = bits
        # Derived, not trusted from the header: mono → bytes per sample.
        self.block_align     = bits // 8

        usable = len(data_body) - len(data_body) % self.block_align
        self._samples = self._normalise(data_body[:usable], bits)

        self._position = 0

    @staticmethod
    def _normalise(pcm: bytes, bits: int) -> np.ndarray:
        if not pcm:
            return np.zeros(0, dtype=np.float32)
        if bits == 8:
            raw  = np.frombuffer(pcm, dtype=np.uint8).astype(np.float32)
            norm = (raw / np.float32(PCM8_MAX) - np.float32(0.5)) * np.float32(2.0)
        else:
            raw  = np.frombuffer(pcm, dtype="<i2").astype(np.float32)
            norm = np.where(raw < 0, raw / np.float32(-PCM16_MIN), raw / np.float32(PCM16_MAX))
        return np.clip(norm, np.float32(-1.0), np.float32(1.0)).astype(np.float32)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def sample_count(self) -> int:
        return int(self._samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        return self.sample_count / self.sample_rate

    @property
    def samples(self) -> np.ndarray:
        """All normalised samples as a read-only float32 array."""
        view = self._samples.view()
        view.flags.writeable = False
        return view

    @property
    def sample_position(self) -> int:
        return self._position

    @sample_position.setter
    def sample_position(self, value: int) -> None:
        if value < 0 or value >= self.sample_count:
            raise OutOfRange(
                f"Sample position {value} outside [0, {self.sample_count})"
            )
        self._position = value

    @property
    def at_end(self) -> bool:
        return self._position >= self.sample_count

    def seek_end(self) -> None:
        """Park the cursor one past the last sample (exhausted)."""
        self._position = self.sample_count

    # ------------------------------------------------------------------
    # Sample access
    # ------------------------------------------------------------------

    def read_sample_at(self, index: int) -> float:
        """Normalised sample at `index` (does not move the cursor)."""
        if index < 0 or index >= self.sample_count:
            raise OutOfRange(
                f"Sample index {index} outside [0, {self.sample_count})"
            )
        return float(self._samples[index])

    def read_sample(self) -> float:
        """Normalised sample at the cursor; advances the cursor by one."""
        value = self.read_sample_at(self._position)
        self._position += 1
        return value
