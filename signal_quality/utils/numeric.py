"""
Shared numeric guards.

Every small-number floor and sentinel used by the analyzers lives here so the
thresholds stay consistent across modules. Functions that depend on one of
these constants also accept it as a keyword argument for edge-case tests.
"""

import math

import numpy as np


# Floor for magnitudes and amplitudes (log/division guard)
EPSILON = 1e-10

# Floor for summed powers (energy sums are squared amplitudes)
POWER_EPSILON = 1e-20

# Energy below which an LPC frame is treated as silence
SILENCE_ENERGY = 1e-8

# Reported instead of +inf when the noise power is negligible
SNR_CEILING_DB = 200.0

# Reported instead of -inf for vanishing levels
DB_FLOOR = -200.0

# Half-width of the peak search window around harmonic bins
PEAK_SEARCH_BINS = 2


def amplitude_to_db(value: float, floor_db: float = DB_FLOOR,
                    epsilon: float = EPSILON) -> float:
    """Convert a linear amplitude to dB, clamping vanishing values to ``floor_db``."""
    if value <= epsilon:
        return floor_db
    return max(20.0 * math.log10(value), floor_db)


def power_to_db(value: float, epsilon: float = EPSILON) -> float:
    """Convert a mean power to dB with ``epsilon`` added inside the log."""
    return 10.0 * math.log10(value + epsilon)


def is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def largest_power_of_two(value: int) -> int:
    """Largest power of two not above ``value`` (0 for values below 1)."""
    if value < 1:
        return 0
    return 1 << (int(value).bit_length() - 1)


def all_finite(*values: float) -> bool:
    return bool(np.all(np.isfinite(np.asarray(values, dtype=np.float64))))


def as_signal(samples) -> np.ndarray:
    """
    Coerce caller input into a contiguous 1-D float64 array.

    ``None`` becomes an empty array so callers can treat it like any other
    too-short buffer.
    """
    if samples is None:
        return np.zeros(0, dtype=np.float64)
    return np.ascontiguousarray(samples, dtype=np.float64).reshape(-1)
