import pytest

from FLTE import decode_from_envelope, encode_to_envelope
from FLTE.errors import ChecksumMismatch, LengthMismatch, TapeError
from FLTE.SMM import tape_format
from FLTE.SMM.constants import MAX_DATA


def test_known_vector():
    envelope = tape_format.wrap(b"\x01\x02\x03")
    assert envelope == bytes([0x00, 0x04, 0x01, 0x02, 0x03, 0xFF, 0x00, 0x01, 0x05])


def test_build_envelope_fields():
    env = tape_format.build_envelope(b"\x01\x02\x03")
    assert env.payload == b"\x01\x02\x03\xff"
    assert env.checksum == 261
    assert env.data == b"\x01\x02\x03"


def test_round_trip(sample_data):
    assert decode_from_envelope(encode_to_envelope(sample_data)) == sample_data


def test_empty_data():
    envelope = tape_format.wrap(b"")
    assert envelope == b"\x00\x01\xff\x00\x00\xff"
    assert tape_format.unwrap(envelope) == b""


def test_largest_block():
    data = b"\xff" * MAX_DATA
    env = tape_format.build_envelope(data)
    assert env.checksum == (0xFF * (MAX_DATA + 1)) & 0xFFFFFF
    assert tape_format.unwrap(env.to_bytes()) == data


def test_data_too_long():
    with pytest.raises(LengthMismatch):
        tape_format.wrap(b"\x00" * (MAX_DATA + 1))


@pytest.mark.parametrize("index", [2, 3, 5, 6, 8])
def test_bit_flip_fails_checksum(sample_envelope, index):
    corrupt = bytearray(sample_envelope)
    corrupt[index] ^= 0x10
    with pytest.raises(ChecksumMismatch):
        tape_format.unwrap(bytes(corrupt))


def test_checksum_field_flip(sample_envelope):
    corrupt = bytearray(sample_envelope)
    corrupt[-1] ^= 0x01
    with pytest.raises(ChecksumMismatch):
        tape_format.unwrap(bytes(corrupt))


def test_truncated(sample_envelope):
    with pytest.raises(LengthMismatch):
        tape_format.unwrap(sample_envelope[:-1])


def test_padded(sample_envelope):
    with pytest.raises(LengthMismatch):
        tape_format.unwrap(sample_envelope + b"\x00")


def test_shorter_than_overhead():
    with pytest.raises(LengthMismatch):
        tape_format.unwrap(b"\x00\x00\x00\x00")


def test_zero_length_prefix():
    # No payload at all, not even a terminator.
    assert tape_format.unwrap(b"\x00\x00\x00\x00\x00") == b""


def test_validate_returns_same_bytes(sample_envelope):
    assert tape_format.validate(sample_envelope) == sample_envelope


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        tape_format.unwrap(b"")
    assert issubclass(ChecksumMismatch, TapeError)
