# =============================================================================
# constants.py — SMM Tape Timing Constants and Container Layout
# =============================================================================
#
# ALL values in this file match the fast-load tape format and the files
# PocketTools produces.  DO NOT change these without checking
# a real load on the target machine.
#
# Source: PocketTools WAV captures

# -----------------------------------------------------------------------------
# FSK TIMING
# -----------------------------------------------------------------------------

SAMPLE_RATE     = 20_000        # Hz — default output sample rate
BAUD_RATE       = 2_500         # baud — one "0" bit = one cycle at this frequency
BITS_PER_SAMPLE = 8             # default output bit depth (8 or 16)
SYNC_SECONDS    = 3.0           # default leader (pilot tone) duration
REVERSE_PHASE   = False         # negate the waveform when True

SAMPLES_PER_CYCLE = SAMPLE_RATE // BAUD_RATE   # = 8  (MUST stay integer)
# NOTE: cycle lengths are always floor(sample_rate / baud_rate).  The encoder
#       writes whole cycle tables, never a fractional sample grid.

# Design frequencies.  "1" bits are two cycles at double frequency.
LOW_FREQUENCY  = BAUD_RATE                          # = 2500 Hz — "0" bit
HIGH_FREQUENCY = 2 * BAUD_RATE                      # = 5000 Hz — half of a "1" bit
MID_FREQUENCY  = (LOW_FREQUENCY + HIGH_FREQUENCY) // 2   # = 3750 Hz decision point

SUPPORTED_BITS_PER_SAMPLE = (8, 16)


# -----------------------------------------------------------------------------
# SQUARE-WAVE COMPATIBILITY QUIRK
# -----------------------------------------------------------------------------
# At <= 8 samples per cycle the encoder stops drawing a sine and
# clips to two levels.  The levels are asymmetric on purpose: they reproduce
# PocketTools output byte-for-byte.  Do not re-derive them.

SQUARE_WAVE_MAX_SAMPLES = 8
SQUARE_HIGH =  0.706
SQUARE_LOW  = -0.705

# Sine phase offset: sample c is taken at angle (c + 1/N) * 2*pi / N
# (N = samples per cycle).


# -----------------------------------------------------------------------------
# BYTE FRAMING  (per byte, LSB first)
# -----------------------------------------------------------------------------
#   [gap: 2 x "1"] [start: "0"] [d0 .. d7] [stop: "1"]

LEADER_BIT = 1
GAP_BIT    = 1
GAP_CYCLES = 2
START_BIT  = 0
STOP_BIT   = 1
DATA_BITS  = 8

# Bit synchroniser unit accounting: a "0" cycle is worth 2 half-cycle units,
# each half of a "1" bit is worth 1.  Start bit + 8 data bits = 18 units.
UNITS_PER_BIT  = 2
UNITS_PER_BYTE = UNITS_PER_BIT * (1 + DATA_BITS)   # = 18


# -----------------------------------------------------------------------------
# CYCLE DETECTION
# -----------------------------------------------------------------------------

CYCLE_THRESHOLD = 0.2           # normalised amplitude that counts as a crossing


# -----------------------------------------------------------------------------
# PCM AMPLITUDE MAPPING
# -----------------------------------------------------------------------------
# 8-bit PCM is unsigned, centred on 127.5.  16-bit PCM is signed; the encoder
# scales by 32767.5, the reader divides negatives by 32768 and positives by
# 32767.  CYCLE_THRESHOLD was tuned against this scaling.

PCM8_CENTRE  = 127.5
PCM8_MAX     = 255
PCM16_SCALE  = 32_767.5
PCM16_MIN    = -32_768
PCM16_MAX    = 32_767


# -----------------------------------------------------------------------------
# RIFF / WAVE CONTAINER
# -----------------------------------------------------------------------------

RIFF_TAG        = b"RIFF"
WAVE_TAG        = b"WAVE"
FMT_TAG         = b"fmt "
DATA_TAG        = b"data"
FMT_CHUNK_SIZE  = 16
WAVE_FORMAT_PCM = 1
CHANNEL_COUNT   = 1             # mono only


# -----------------------------------------------------------------------------
# TAPE ENVELOPE
# -----------------------------------------------------------------------------
#   [length: u16 BE] [payload: length bytes] [checksum: u24 BE]
#   payload = data + [TERMINATOR];  checksum = sum(payload) & CHECKSUM_MASK

TERMINATOR        = 0xFF
LENGTH_BYTES      = 2
CHECKSUM_BYTES    = 3
CHECKSUM_MASK     = 0xFF_FFFF
ENVELOPE_OVERHEAD = LENGTH_BYTES + CHECKSUM_BYTES   # = 5
MAX_PAYLOAD       = 0xFFFF
MAX_DATA          = MAX_PAYLOAD - 1                 # terminator takes one byte
