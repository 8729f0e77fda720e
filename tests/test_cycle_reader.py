import time

import pytest

from FLTE.SGM.fsk_encoder import FSKEncoder
from FLTE.SGM.wav_writer import WavWriter
from FLTE.SVM.cycle_reader import CycleKind, DetectorState, WaveCycleReader
from FLTE.SVM.wav_reader import WavReader

SILENCE = b"\x80"


def reader_for(pcm, rate=20000, bits=8):
    w = WavWriter(rate, bits)
    w.write(pcm)
    return WavReader(w.finish())


def kinds(events):
    return [e.kind for e in events]


def test_silence_is_end_of_file():
    reader = reader_for(SILENCE * 400)
    events = list(WaveCycleReader(reader))
    assert kinds(events) == [CycleKind.END_OF_FILE]
    assert reader.at_end


def test_empty_file_is_end_of_file():
    cycles = WaveCycleReader(reader_for(b""))
    assert cycles.read_cycle().kind is CycleKind.END_OF_FILE


def test_block_events():
    enc = FSKEncoder()
    pcm = SILENCE * 10 + enc.cycle(1) * 3 + enc.cycle(0) * 2 + SILENCE * 10
    cycles = WaveCycleReader(reader_for(pcm))
    events = list(cycles)

    assert kinds(events) == (
        [CycleKind.START_OF_BLOCK]
        + [CycleKind.CYCLE] * 6
        + [CycleKind.END_OF_BLOCK, CycleKind.END_OF_FILE]
    )
    first = events[0]
    assert (first.start, first.length, first.frequency) == (10, 4, 5000)
    assert [e.frequency for e in events[1:6]] == [5000] * 5
    assert (events[6].start, events[6].length, events[6].frequency) == (34, 8, 2500)
    # Last '0' window never closes: no later high crossing.
    assert events[7].start == 42
    assert cycles.state is DetectorState.AWAITING_CYCLE


def test_consecutive_cycles_share_boundary():
    enc = FSKEncoder()
    cycles = WaveCycleReader(reader_for(enc.cycle(0) * 4))
    a = cycles.read_cycle()
    b = cycles.read_cycle()
    assert b.start == a.start + a.length


def test_reverse_phase_cycles():
    enc = FSKEncoder()
    inverted = bytes(255 - s for s in enc.cycle(1) * 4)
    events = list(WaveCycleReader(reader_for(inverted)))
    assert events[0].kind is CycleKind.START_OF_BLOCK
    assert all(e.frequency == 5000 for e in events if e.kind is CycleKind.CYCLE)


def test_quiet_tone_is_ignored():
    # +/-0.176: oscillating, but never past the crossing level.
    pcm = bytes([150, 105] * 20)
    events = list(WaveCycleReader(reader_for(pcm)))
    assert kinds(events) == [CycleKind.END_OF_FILE]


def test_custom_threshold():
    pcm = bytes([160, 96] * 20)
    assert kinds(list(WaveCycleReader(reader_for(pcm), threshold=0.5))) == [CycleKind.END_OF_FILE]
    events = list(WaveCycleReader(reader_for(pcm), threshold=0.2))
    assert events[0].kind is CycleKind.START_OF_BLOCK
    assert events[0].length == 2
    assert events[0].frequency == 10000


@pytest.mark.parametrize("rate, expected", [(20000, 2500), (22050, 2756)])
def test_frequency_is_integer(rate, expected):
    enc = FSKEncoder()
    event = WaveCycleReader(reader_for(enc.cycle(0) * 2, rate=rate)).read_cycle()
    assert event.frequency == expected
    assert isinstance(event.frequency, int)


def test_loud_dc_is_end_of_file():
    # Ten seconds of a stuck-high line: every sample is loud, none crosses.
    reader = reader_for(b"\xff" * 200_000)
    began = time.perf_counter()
    events = list(WaveCycleReader(reader))
    elapsed = time.perf_counter() - began
    assert kinds(events) == [CycleKind.END_OF_FILE]
    assert elapsed < 2.0


def test_dc_after_cycles_ends_block_once():
    enc = FSKEncoder()
    pcm = enc.cycle(0) * 3 + b"\xff" * 50_000
    began = time.perf_counter()
    events = list(WaveCycleReader(reader_for(pcm)))
    elapsed = time.perf_counter() - began
    assert kinds(events) == [
        CycleKind.START_OF_BLOCK, CycleKind.CYCLE, CycleKind.CYCLE,
        CycleKind.END_OF_BLOCK, CycleKind.END_OF_FILE,
    ]
    # The third cycle closes on the first DC sample.
    assert [e.start for e in events] == [0, 8, 16, 24, 24 + 50_000]
    assert elapsed < 2.0


def test_failed_cycle_does_not_hide_earlier_audio():
    enc = FSKEncoder()
    reader = reader_for(enc.cycle(0) * 2 + b"\xff" * 100)
    cycles = WaveCycleReader(reader)
    assert [e.kind for e in cycles][-2:] == [CycleKind.END_OF_BLOCK, CycleKind.END_OF_FILE]
    # Rewound, the detector still finds the cycles before the dead stretch.
    reader.sample_position = 0
    cycles.state = DetectorState.AWAITING_CYCLE
    first = cycles.read_cycle()
    assert (first.kind, first.start, first.length) == (CycleKind.START_OF_BLOCK, 0, 8)
