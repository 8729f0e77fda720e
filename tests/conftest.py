import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from FLTE.SGM.fsk_encoder import EncoderConfig
from FLTE.SMM import tape_format


@pytest.fixture
def default_config():
    return EncoderConfig()


@pytest.fixture
def fast_config():
    """Defaults with a short leader so round trips stay quick."""
    return EncoderConfig(sync_seconds=0.05)


@pytest.fixture
def sample_data():
    return b"10 PRINT \"HELLO\"\r20 GOTO 10\r" + bytes(range(0, 256, 7))


@pytest.fixture
def sample_envelope(sample_data):
    return tape_format.wrap(sample_data)
