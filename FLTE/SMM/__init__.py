# =============================================================================
# FLTE/SMM/__init__.py — Signal Mapping Module
# =============================================================================
#
# The SMM is the single source of truth for the fast-load tape standard:
# sample and baud rates, cycle framing, detection threshold, PCM scaling,
# RIFF tags, and the tape envelope layout.
#
# All other FLTE sub-modules (SGM, SVM) import their constants from here.
# Never define format constants outside this module.
#
# Sub-modules:
#   constants.py    — all timing constants and container layout values
#   tape_format.py  — tape envelope wrap / validate / unwrap
# =============================================================================
