# =============================================================================
# errors.py — Tape / Audio Decode Errors
# =============================================================================
#
# Every failure the codec can detect.  All of them mean "this input cannot be
# decoded" — none are retried or recovered.  They subclass ValueError so that
# callers catching ValueError (the usual contract for bad input data) keep
# working.
# =============================================================================


class TapeError(ValueError):
    """Base class for every FLTE decode/encode failure."""


class MalformedContainer(TapeError):
    """Missing or duplicate required chunks, bad magic tags, truncated data."""


class UnsupportedFormat(TapeError):
    """Non-PCM, multi-channel, or unsupported bit depth."""


class LengthMismatch(TapeError):
    """Declared and actual byte counts disagree."""


class ChecksumMismatch(TapeError):
    """Stored checksum does not match the calculated checksum."""


class ProtocolViolation(TapeError):
    """A bit-sync or cycle-ordering rule was broken."""


class OutOfRange(TapeError, IndexError):
    """Cursor / sample position outside the valid range."""
