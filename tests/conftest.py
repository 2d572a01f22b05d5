"""
Pytest configuration file for spatializer tests.
"""

import pytest
import numpy as np
from horo.spatial.config import SpatializerConfig
from horo.spatial.layouts import SpeakerLayout
from horo.spatial.utils import LayoutKind


@pytest.fixture
def test_config():
    """Return a test configuration with predefined settings."""
    return SpatializerConfig(layout='desktop', decay_db=6.0)


@pytest.fixture
def desktop_layout():
    """Stereo pair on the x axis with a 0 dB decay (rolloff 1)."""
    return SpeakerLayout(LayoutKind.DESKTOP, decay_db=0.0)


@pytest.fixture
def sphere_layout():
    """60-channel sphere with the default decay."""
    return SpeakerLayout(LayoutKind.SPHERE)


@pytest.fixture
def test_audio_mono():
    """Create a short mono test block."""
    # 512 samples of a 440 Hz sine at 48 kHz
    sr = 48000
    t = np.arange(512) / sr
    return (0.5 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)


@pytest.fixture
def rng():
    """Seeded random generator for reproducible positions."""
    return np.random.default_rng(1234)
