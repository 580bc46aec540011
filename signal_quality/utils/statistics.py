"""
Statistical building blocks for the detectors.

Plain functions over 1-D sample sequences (numpy arrays or lists). They
return 0.0 for empty or too-short input instead of raising.

Note that ``compute_median`` and ``compute_mad`` mutate their input: pass a
scratch copy when the original order or values still matter.
"""

import math
from typing import MutableSequence, Optional, Sequence

import numpy as np


def compute_mean(data: Sequence[float]) -> float:
    if len(data) == 0:
        return 0.0
    return float(np.mean(data))


def compute_variance(data: Sequence[float], mean: Optional[float] = None) -> float:
    """
    Sample variance with Bessel's correction (denominator n - 1).

    Args:
        data: Samples
        mean: Precomputed mean. Computed from ``data`` when omitted.

    Returns:
        Variance, or 0.0 for fewer than two samples
    """
    n = len(data)
    if n <= 1:
        return 0.0
    if mean is None:
        mean = compute_mean(data)
    deviations = np.asarray(data, dtype=np.float64) - mean
    return float(np.dot(deviations, deviations) / (n - 1))


def compute_std_dev(data: Sequence[float], mean: Optional[float] = None) -> float:
    return math.sqrt(compute_variance(data, mean))


def compute_median(data: MutableSequence[float]) -> float:
    """
    Median of ``data``, sorting it in place.

    Args:
        data: Writable numpy array or list. Left sorted on return.

    Returns:
        Middle value (mean of the middle pair for even lengths), 0.0 if empty
    """
    n = len(data)
    if n == 0:
        return 0.0
    data.sort()
    middle = n // 2
    if n % 2 == 0:
        return (float(data[middle - 1]) + float(data[middle])) / 2.0
    return float(data[middle])


def compute_mad(data: MutableSequence[float], median: float) -> float:
    """
    Median Absolute Deviation around ``median``.

    The input is overwritten with ``|x - median|`` and then sorted by
    ``compute_median``.

    Args:
        data: Writable numpy array or list
        median: Center the deviations are measured from

    Returns:
        Median of the absolute deviations, 0.0 if empty
    """
    if len(data) == 0:
        return 0.0
    data[:] = np.abs(np.asarray(data, dtype=np.float64) - median)
    return compute_median(data)


def compute_moment(data: Sequence[float], mean: float, order: int) -> float:
    """Central moment ``mean((x - mean) ** order)``."""
    if len(data) == 0:
        return 0.0
    deviations = np.asarray(data, dtype=np.float64) - mean
    return float(np.mean(deviations ** order))
