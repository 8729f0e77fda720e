import itertools

import numpy as np
import pytest

from FLTE.SGM.fsk_encoder import EncoderConfig, FSKEncoder
from FLTE.SGM.tape_builder import TapeBuilder, modulate
from FLTE.SMM.constants import SQUARE_HIGH, SQUARE_LOW
from FLTE.SVM.wav_reader import WavReader


def runs(seq):
    return [len(list(g)) for _, g in itertools.groupby(seq)]


def test_default_square_cycles(default_config):
    enc = FSKEncoder(default_config)
    assert enc.cycle_samples == 8
    assert enc.square_wave
    assert list(enc.cycle(0)) == [218] * 4 + [38] * 4
    assert list(enc.cycle(1)) == [218, 218, 38, 38, 218, 218, 38, 38]


def test_square_levels_16_bit():
    enc = FSKEncoder(EncoderConfig(bits_per_sample=16))
    samples = np.frombuffer(enc.cycle(0), dtype="<i2").tolist()
    assert samples == [23134] * 4 + [-23101] * 4


def test_square_waveform_levels():
    values = FSKEncoder().waveform(1)
    assert set(values.tolist()) == {SQUARE_HIGH, SQUARE_LOW}


def test_reverse_phase_inverts():
    enc = FSKEncoder(EncoderConfig(reverse_phase=True))
    assert list(enc.cycle(0)) == [38] * 4 + [218] * 4
    assert list(enc.cycle(1)) == [38, 38, 218, 218, 38, 38, 218, 218]


def test_sine_above_eight_samples():
    enc = FSKEncoder(EncoderConfig(sample_rate=40_000))
    assert enc.cycle_samples == 16
    assert not enc.square_wave
    zero = list(enc.cycle(0))
    one = list(enc.cycle(1))
    assert len(zero) == len(one) == 16
    # One oscillation vs two in the same window.
    assert runs([s > 127 for s in zero]) == [8, 8]
    assert runs([s > 127 for s in one]) == [4, 4, 4, 4]
    assert max(zero) > 250 and min(zero) < 5


def test_sine_16_bit_is_symmetric_about_zero():
    enc = FSKEncoder(EncoderConfig(sample_rate=40_000, bits_per_sample=16))
    samples = np.frombuffer(enc.cycle(0), dtype="<i2")
    assert abs(int(samples.astype(np.int32).sum())) < 16
    assert samples.max() <= 32767 and samples.min() >= -32768


def test_encode_byte_lsb_first(default_config):
    enc = FSKEncoder(default_config)
    expected = b"".join(enc.cycle(bit) for bit in (1, 0, 0, 0, 0, 0, 1, 0))
    assert enc.encode_byte(0x41) == expected


@pytest.mark.parametrize("cfg", [
    EncoderConfig(sample_rate=0),
    EncoderConfig(baud_rate=0),
    EncoderConfig(baud_rate=30_000),
    EncoderConfig(bits_per_sample=12),
    EncoderConfig(sync_seconds=-1.0),
    EncoderConfig(sync_seconds=float("nan")),
    EncoderConfig(sync_seconds=float("inf")),
])
def test_bad_config(cfg):
    with pytest.raises(ValueError):
        FSKEncoder(cfg)


# ── Stream framing ───────────────────────────────────────────────────────────

def test_leader_length():
    builder = TapeBuilder(EncoderConfig(sync_seconds=0.5))
    assert builder.leader_cycles == 1250
    assert builder.leader() == builder.encoder.cycle(1) * 1250


def test_leader_rounds_up():
    # 20000 * 0.0005 / 8 = 1.25 cycles
    assert TapeBuilder(EncoderConfig(sync_seconds=0.0005)).leader_cycles == 2


def test_frame_byte_layout(default_config):
    builder = TapeBuilder(default_config)
    enc = builder.encoder
    framed = builder.frame_byte(0x00)
    assert framed == enc.cycle(1) * 2 + enc.cycle(0) + enc.cycle(0) * 8 + enc.cycle(1)
    assert len(framed) == 12 * 8


def test_modulate_sample_count():
    cfg = EncoderConfig(sync_seconds=0.5)
    wav = modulate(b"\x00\x02\xaa\xff\x00\x01\xa9", cfg)
    r = WavReader(wav)
    assert r.sample_rate == 20000
    assert r.sample_count == 1250 * 8 + 7 * 12 * 8


def test_modulate_is_deterministic(fast_config, sample_envelope):
    assert modulate(sample_envelope, fast_config) == modulate(sample_envelope, fast_config)
