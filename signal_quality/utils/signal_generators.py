"""
Deterministic test-signal generators.

These produce the stimulus buffers handed to processors under test. Noise
generators take an explicit seed so repeated runs analyze identical input.
"""

import numpy as np


def generate_sine(
    frequency_hz: float,
    sample_rate: float,
    num_samples: int,
    amplitude: float = 1.0,
    phase: float = 0.0
) -> np.ndarray:
    """
    Generate a sine tone.

    Args:
        frequency_hz: Tone frequency in Hz
        sample_rate: Sample rate in Hz
        num_samples: Buffer length
        amplitude: Peak amplitude
        phase: Start phase in radians

    Returns:
        Float64 buffer of ``num_samples`` samples
    """
    n = np.arange(max(int(num_samples), 0), dtype=np.float64)
    return amplitude * np.sin(2.0 * np.pi * frequency_hz * n / sample_rate + phase)


def generate_white_noise(num_samples: int, amplitude: float = 1.0, seed: int = 42) -> np.ndarray:
    """Uniform white noise in ``[-amplitude, amplitude)`` from a seeded generator."""
    rng = np.random.default_rng(seed)
    return amplitude * rng.uniform(-1.0, 1.0, size=max(int(num_samples), 0))


def generate_impulse(num_samples: int, position: int = 0, amplitude: float = 1.0) -> np.ndarray:
    buffer = np.zeros(max(int(num_samples), 0), dtype=np.float64)
    if 0 <= position < len(buffer):
        buffer[position] = amplitude
    return buffer


def generate_silence(num_samples: int) -> np.ndarray:
    return np.zeros(max(int(num_samples), 0), dtype=np.float64)


def add_click(buffer: np.ndarray, position: int, amplitude: float) -> np.ndarray:
    """
    Return a copy of ``buffer`` with ``amplitude`` added at ``position``.

    Positions outside the buffer leave the copy unchanged.
    """
    result = np.array(buffer, dtype=np.float64, copy=True)
    if 0 <= position < len(result):
        result[position] += amplitude
    return result
