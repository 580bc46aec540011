"""
Aliasing Analyzer.

This module measures how much harmonic energy a nonlinear per-sample
processor folds back below Nyquist. A sine is driven through the processor,
and the spectrum is split into the fundamental, the in-band harmonic bins
and the bins where out-of-band harmonics land after folding.
"""

import math
from typing import Callable, Iterable, List

import numpy as np

from signal_quality.models.results import AliasingComparison, AliasingMeasurement
from signal_quality.models.verification_config import AliasingTestConfig
from signal_quality.utils.numeric import DB_FLOOR, EPSILON, amplitude_to_db
from signal_quality.utils.structured_logger import log_configuration_rejected
from signal_quality.utils.transform import SpectralTransform


_default_transform = SpectralTransform()


def frequency_to_bin(frequency_hz: float, sample_rate: float, fft_size: int) -> int:
    return int(round(frequency_hz * fft_size / sample_rate))


def calculate_aliased_frequency(frequency_hz: float, sample_rate: float) -> float:
    """
    Frequency at which a component appears after sampling.

    Example: the 5th harmonic of 5 kHz (25 kHz) at 44.1 kHz lands at 19.1 kHz.

    Args:
        frequency_hz: Component frequency, possibly above Nyquist
        sample_rate: Sample rate in Hz

    Returns:
        Folded frequency in [0, Nyquist]
    """
    folded = math.fmod(abs(frequency_hz), sample_rate)
    if folded > sample_rate / 2.0:
        folded = sample_rate - folded
    return folded


def will_alias(frequency_hz: float, sample_rate: float) -> bool:
    return frequency_hz > sample_rate / 2.0


def get_harmonic_bins(config: AliasingTestConfig) -> List[int]:
    """Bins of harmonics 2..max_harmonic that stay below Nyquist."""
    bins = []
    for harmonic in range(2, config.max_harmonic + 1):
        harmonic_hz = config.test_frequency_hz * harmonic
        if will_alias(harmonic_hz, config.sample_rate):
            continue
        bins.append(frequency_to_bin(harmonic_hz, config.sample_rate, config.fft_size))
    return bins


def get_aliased_bins(config: AliasingTestConfig) -> List[int]:
    """
    Bins where out-of-band harmonics land after folding.

    Bins coinciding with the fundamental or an in-band harmonic are left
    out so aliasing is never double-counted as harmonic distortion.

    Returns:
        Sorted, de-duplicated bin indices
    """
    excluded = set(get_harmonic_bins(config))
    excluded.add(frequency_to_bin(config.test_frequency_hz, config.sample_rate, config.fft_size))

    bins = set()
    for harmonic in range(2, config.max_harmonic + 1):
        harmonic_hz = config.test_frequency_hz * harmonic
        if not will_alias(harmonic_hz, config.sample_rate):
            continue
        aliased_hz = calculate_aliased_frequency(harmonic_hz, config.sample_rate)
        aliased_bin = frequency_to_bin(aliased_hz, config.sample_rate, config.fft_size)
        if aliased_bin not in excluded:
            bins.add(aliased_bin)
    return sorted(bins)


def to_db(value: float) -> float:
    """Linear magnitude to dB, -200 dB for values at or below 1e-10."""
    return amplitude_to_db(value, floor_db=DB_FLOOR, epsilon=EPSILON)


def sum_bin_power(spectrum: np.ndarray, bins: Iterable[int]) -> float:
    """Root of the summed squared magnitudes over in-range bins."""
    magnitudes = np.abs(np.asarray(spectrum))
    total = 0.0
    for index in bins:
        if 0 <= index < len(magnitudes):
            total += float(magnitudes[index]) ** 2
    return math.sqrt(total)


def measure_aliasing(
    config: AliasingTestConfig,
    processor: Callable[[float], float],
    transform=None
) -> AliasingMeasurement:
    """
    Measure aliasing produced by a per-sample processor.

    Algorithm:
    1. Generate fft_size samples of drive_gain * sin(2*pi*f*n/sr)
    2. Pass every sample through the processor
    3. Apply the Hann window and forward transform
    4. Report fundamental, harmonic-bin and aliased-bin levels in dB

    Args:
        config: Stimulus and analysis settings
        processor: Callable mapping one input sample to one output sample
        transform: Spectral transform. If None, uses SpectralTransform.

    Returns:
        AliasingMeasurement. An invalid config yields all levels at -200 dB
        and a signal-to-aliasing ratio of 0 dB.
    """
    errors = config.validate()
    if errors:
        log_configuration_rejected('measure_aliasing', errors)
        return AliasingMeasurement(
            fundamental_power_db=DB_FLOOR,
            harmonic_power_db=DB_FLOOR,
            aliasing_power_db=DB_FLOOR,
            signal_to_aliasing_db=0.0
        )

    transform = transform or _default_transform
    n = np.arange(config.fft_size, dtype=np.float64)
    stimulus = config.drive_gain * np.sin(
        2.0 * np.pi * config.test_frequency_hz * n / config.sample_rate
    )
    output = np.array([processor(float(x)) for x in stimulus], dtype=np.float64)

    window = transform.generate_hann(config.fft_size)
    spectrum = np.asarray(transform.forward(output * window))

    fundamental_bin = frequency_to_bin(config.test_frequency_hz, config.sample_rate, config.fft_size)
    fundamental_db = to_db(sum_bin_power(spectrum, [fundamental_bin]))
    harmonic_db = to_db(sum_bin_power(spectrum, get_harmonic_bins(config)))
    aliasing_db = to_db(sum_bin_power(spectrum, get_aliased_bins(config)))

    return AliasingMeasurement(
        fundamental_power_db=fundamental_db,
        harmonic_power_db=harmonic_db,
        aliasing_power_db=aliasing_db,
        signal_to_aliasing_db=fundamental_db - aliasing_db
    )


def compare_aliasing(
    config: AliasingTestConfig,
    reference_processor: Callable[[float], float],
    tested_processor: Callable[[float], float],
    transform=None
) -> AliasingComparison:
    """
    Measure a tested processor's aliasing against a reference processor.

    Returns:
        AliasingComparison whose reduction_db is positive when the tested
        processor aliases less than the reference
    """
    reference = measure_aliasing(config, reference_processor, transform)
    tested = measure_aliasing(config, tested_processor, transform)
    return AliasingComparison(
        reference=reference,
        tested=tested,
        reduction_db=tested.aliasing_reduction_vs(reference)
    )


def hard_clip_reference(sample: float) -> float:
    """Naive hard clipper to +/-1, the worst-case aliasing baseline."""
    return max(-1.0, min(1.0, sample))


def identity_reference(sample: float) -> float:
    return sample
