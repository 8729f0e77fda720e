# =============================================================================
# SGM — Signal Generation Module
# Subfolder of FLTE (Fast Load Tape Engine)
# =============================================================================
#
# Generates deterministic FSK PCM audio from tape envelopes, using the
# fast-load timing constants.
#
# Modules:
#   fsk_encoder.py   — per-bit cycle tables (sine or clipped square)
#   tape_builder.py  — leader + byte framing; modulate()
#   wav_writer.py    — mono PCM RIFF/WAVE construction
#   bin2wav.py       — command-line encoder (fbin2wav)
#
# Constants live in FLTE/SMM/constants.py
# Decoding and verification tools live in FLTE/SVM/
# =============================================================================
