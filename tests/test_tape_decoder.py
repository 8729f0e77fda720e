import pytest

from FLTE import decode_from_envelope, demodulate, encode_to_envelope, modulate
from FLTE.errors import ChecksumMismatch, MalformedContainer, ProtocolViolation
from FLTE.SGM.fsk_encoder import EncoderConfig, FSKEncoder
from FLTE.SGM.tape_builder import TapeBuilder
from FLTE.SGM.wav_writer import WavWriter
from FLTE.SVM.tape_decoder import TapeDecoder


def round_trip(data, cfg):
    wav = modulate(encode_to_envelope(data), cfg)
    return decode_from_envelope(demodulate(wav, cfg.baud_rate))


def test_round_trip_default_rate(fast_config, sample_data):
    assert round_trip(sample_data, fast_config) == sample_data


def test_round_trip_all_byte_values(fast_config):
    data = bytes(range(256))
    assert round_trip(data, fast_config) == data


@pytest.mark.parametrize("cfg", [
    EncoderConfig(bits_per_sample=16, sync_seconds=0.05),
    EncoderConfig(sample_rate=40_000, sync_seconds=0.05),
    EncoderConfig(sample_rate=40_000, bits_per_sample=16, sync_seconds=0.05),
    EncoderConfig(reverse_phase=True, sync_seconds=0.05),
    EncoderConfig(sample_rate=40_000, reverse_phase=True, sync_seconds=0.05),
    EncoderConfig(sync_seconds=0.0),
], ids=["16bit", "sine", "sine-16bit", "reverse", "sine-reverse", "no-leader"])
def test_round_trip_configs(cfg, sample_data):
    assert round_trip(sample_data, cfg) == sample_data


def test_round_trip_empty_data(fast_config):
    assert round_trip(b"", fast_config) == b""


def test_demodulate_returns_envelope(fast_config, sample_envelope):
    assert demodulate(modulate(sample_envelope, fast_config)) == sample_envelope


def test_scan_reports_block(fast_config, sample_envelope):
    blocks = TapeDecoder(modulate(sample_envelope, fast_config)).scan()
    assert len(blocks) == 1
    block = blocks[0]
    assert block.data == sample_envelope
    assert block.start_sample == 0
    assert block.pilot_cycles > 2 * 125
    assert block.low_cycles >= len(sample_envelope)


def test_corrupt_checksum_in_audio(fast_config, sample_envelope):
    corrupt = bytearray(sample_envelope)
    corrupt[-1] ^= 0x04
    with pytest.raises(ChecksumMismatch):
        demodulate(modulate(bytes(corrupt), fast_config))


def test_short_block_is_not_data(fast_config):
    wav = modulate(b"\x01\x02", fast_config)
    assert [b.data for b in TapeDecoder(wav).scan()] == [b"\x01\x02"]
    with pytest.raises(ProtocolViolation, match="Could not extract data"):
        demodulate(wav)


def test_silence_has_no_data():
    w = WavWriter(20000, 8)
    w.write(b"\x80" * 2000)
    with pytest.raises(ProtocolViolation):
        demodulate(w.finish())


def test_zero_bit_inside_one_bit():
    enc = FSKEncoder()
    half_one = enc.cycle(1)[:4]
    pcm = enc.cycle(1) * 2 + enc.cycle(0) + half_one + enc.cycle(0) * 2
    w = WavWriter(20000, 8)
    w.write(pcm)
    with pytest.raises(ProtocolViolation, match="0 bit"):
        demodulate(w.finish())


def test_truncated_audio_is_partial_byte(fast_config, sample_envelope):
    builder = TapeBuilder(fast_config)
    w = WavWriter(fast_config.sample_rate, fast_config.bits_per_sample)
    w.write(builder.leader())
    for byte in sample_envelope[:-1]:
        w.write(builder.frame_byte(byte))
    # Gap, start bit and three data bits of the last byte only.
    w.write(builder.frame_byte(sample_envelope[-1])[:6 * 8])
    with pytest.raises(ProtocolViolation, match="partial byte"):
        demodulate(w.finish())


def test_not_a_wav():
    with pytest.raises(MalformedContainer):
        demodulate(b"\x00\x04\x01\x02\x03\xff\x00\x01\x05")


def test_partial_byte_block_is_kept(fast_config, sample_envelope):
    builder = TapeBuilder(fast_config)
    w = WavWriter(fast_config.sample_rate, fast_config.bits_per_sample)
    w.write(builder.leader())
    for byte in sample_envelope[:-1]:
        w.write(builder.frame_byte(byte))
    w.write(builder.frame_byte(sample_envelope[-1])[:6 * 8])

    decoder = TapeDecoder(w.finish())
    assert decoder.failed_block is None
    with pytest.raises(ProtocolViolation, match="partial byte"):
        decoder.scan()
    block = decoder.failed_block
    assert block is not None
    assert block.start_sample == 0
    assert block.data == sample_envelope[:-1]
    assert block.end_sample <= decoder.reader.sample_count
    assert block.cycle_count > block.pilot_cycles


def test_failed_block_cleared_by_good_block(fast_config, sample_envelope):
    decoder = TapeDecoder(modulate(sample_envelope, fast_config))
    decoder.scan()
    assert decoder.failed_block is None
