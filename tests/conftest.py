"""
Shared pytest fixtures for signal quality tests.
"""

import numpy as np
import pytest

from signal_quality.config.settings import reset_settings
from signal_quality.utils.signal_generators import (
    generate_silence,
    generate_sine,
    generate_white_noise,
)


SAMPLE_RATE = 44100.0


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read environment settings for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sample_rate():
    """Fixture providing the default test sample rate."""
    return SAMPLE_RATE


@pytest.fixture
def sine_1khz():
    """Fixture providing one second of a 1 kHz sine at amplitude 0.5."""
    return generate_sine(1000.0, SAMPLE_RATE, 44100, amplitude=0.5)


@pytest.fixture
def sine_440():
    """Fixture providing 4096 samples of a 440 Hz sine at amplitude 0.5."""
    return generate_sine(440.0, SAMPLE_RATE, 4096, amplitude=0.5)


@pytest.fixture
def white_noise():
    """Fixture providing seeded uniform white noise."""
    return generate_white_noise(8192, amplitude=0.5, seed=1234)


@pytest.fixture
def silence():
    """Fixture providing 4096 samples of digital silence."""
    return generate_silence(4096)


@pytest.fixture
def gaussian_noise():
    """Fixture providing seeded Gaussian noise."""
    rng = np.random.default_rng(7)
    return rng.standard_normal(44100)
