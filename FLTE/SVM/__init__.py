# =============================================================================
# FLTE/SVM/__init__.py — Signal Verification Module
# =============================================================================
#
# The SVM turns captured audio back into tape data and checks that generated
# signals would load on the target machine.
#
# Sub-modules:
#   wav_reader.py    — mono PCM RIFF/WAVE parser with a sample cursor
#   cycle_reader.py  — threshold-crossing wave cycle detector
#   byte_sync.py     — half-cycle unit counter that rebuilds bytes
#   tape_decoder.py  — block assembly + envelope validation; demodulate()
#   wav2bin.py       — command-line decoder (fwav2bin)
#   load_sim.py      — load simulator / diagnostic report (CLI + importable)
#   validate.py      — self-validation suite for the whole FLTE stack
# =============================================================================
