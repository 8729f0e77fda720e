# =============================================================================
# Fast Load Tape Engine (FLTE)
# Binary data <-> cassette-interface audio for the fast-load tape format.
# =============================================================================
#
# ── WHAT THIS PACKAGE OWNS ────────────────────────────────────────────────────
#
# RESPONSIBLE for:
#   - Tape envelope        length prefix + 0xFF terminator + 24-bit checksum
#   - FSK modulation       envelope bytes → deterministic mono PCM WAV
#   - FSK demodulation     captured WAV → cycles → bits → validated envelope
#   - RIFF/WAVE container  parsing and building (mono, 8/16-bit PCM)
#
# NOT responsible for:
#   - Real-time capture or playback (whole files are held in memory)
#   - Multi-channel or non-PCM audio
#
# ── SIGNAL SPEC ───────────────────────────────────────────────────────────────
#
# ┌─────────────────────────────────────────────────────────────────────────┐
# │  Sample rate : 20,000 Hz (default)                                      │
# │  Baud rate   : 2,500 baud → 8 samples per bit window                    │
# │  '0' bit     : one cycle at 2,500 Hz                                    │
# │  '1' bit     : two cycles at 5,000 Hz                                   │
# │  Leader      : 3.0 s of '1' cycles (pilot tone)                         │
# │  Per byte    : 2 x '1' gap | '0' start | 8 data bits LSB first | '1'    │
# │  Waveform    : clipped square (+0.706 / -0.705) at <= 8 samples/cycle,  │
# │                sine otherwise                                           │
# │  Decode      : |x| > 0.2 threshold crossings, decision point 3,750 Hz   │
# └─────────────────────────────────────────────────────────────────────────┘
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   raw bytes  → encode_to_envelope → modulate   → WAV bytes
#   WAV bytes  → demodulate         → decode_from_envelope → raw bytes
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   SMM/  constants.py, tape_format.py         — standards + envelope codec
#   SGM/  fsk_encoder.py, tape_builder.py,
#         wav_writer.py, bin2wav.py            — generation
#   SVM/  wav_reader.py, cycle_reader.py,
#         byte_sync.py, tape_decoder.py,
#         wav2bin.py, load_sim.py, validate.py — verification / decoding
# =============================================================================

from FLTE.errors import (
    TapeError, MalformedContainer, UnsupportedFormat, LengthMismatch,
    ChecksumMismatch, ProtocolViolation, OutOfRange,
)
from FLTE.SMM.tape_format import wrap as encode_to_envelope
from FLTE.SMM.tape_format import unwrap as decode_from_envelope
from FLTE.SGM.fsk_encoder import EncoderConfig
from FLTE.SGM.tape_builder import modulate
from FLTE.SVM.tape_decoder import demodulate

__all__ = [
    "encode_to_envelope",
    "decode_from_envelope",
    "modulate",
    "demodulate",
    "EncoderConfig",
    "TapeError",
    "MalformedContainer",
    "UnsupportedFormat",
    "LengthMismatch",
    "ChecksumMismatch",
    "ProtocolViolation",
    "OutOfRange",
]

__version__ = "1.0.0"
