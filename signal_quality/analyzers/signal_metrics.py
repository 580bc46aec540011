"""
Signal Metrics.

This module provides the aggregate quality numbers used by the verification
drivers: SNR against a reference, THD, crest factor, kurtosis, zero-crossing
rate and spectral flatness. All functions are pure and return a defined
sentinel instead of NaN/Inf for degenerate input.
"""

import math
from typing import Optional

import numpy as np

from signal_quality.analyzers.spectral_anomaly_detector import compute_spectral_flatness
from signal_quality.models.results import SignalQualityMetrics
from signal_quality.utils.numeric import (
    DB_FLOOR,
    EPSILON,
    PEAK_SEARCH_BINS,
    POWER_EPSILON,
    SNR_CEILING_DB,
    amplitude_to_db,
    as_signal,
    largest_power_of_two,
)
from signal_quality.utils.statistics import compute_mean, compute_moment
from signal_quality.utils.transform import SpectralTransform, magnitude_spectrum


# Shortest buffer the THD measurement accepts
MIN_THD_SAMPLES = 256

# Shortest buffer the kurtosis accepts
MIN_KURTOSIS_SAMPLES = 4

DEFAULT_MAX_HARMONIC = 10

_default_transform = SpectralTransform()


def calculate_snr(
    signal: np.ndarray,
    reference: np.ndarray,
    ceiling_db: float = SNR_CEILING_DB,
    epsilon: float = POWER_EPSILON
) -> float:
    """
    Calculate SNR of a signal against its reference.

    SNR = 10 * log10(sum(ref^2) / sum((sig - ref)^2)), over the common length.

    Args:
        signal: Signal under test
        reference: Reference signal
        ceiling_db: Returned when the noise power is negligible
        epsilon: Power below which a sum is treated as zero

    Returns:
        SNR in dB. ``ceiling_db`` for identical signals, ``-ceiling_db`` when
        the reference is silent but the signal is not.
    """
    signal = as_signal(signal)
    reference = as_signal(reference)
    length = min(len(signal), len(reference))

    reference = reference[:length]
    noise = signal[:length] - reference
    signal_power = float(np.dot(reference, reference))
    noise_power = float(np.dot(noise, noise))

    if noise_power <= epsilon:
        return ceiling_db
    if signal_power <= epsilon:
        return -ceiling_db

    return float(np.clip(10.0 * math.log10(signal_power / noise_power), -ceiling_db, ceiling_db))


def _peak_near(magnitudes: np.ndarray, center_bin: int, search_bins: int) -> float:
    low = max(center_bin - search_bins, 0)
    high = min(center_bin + search_bins, len(magnitudes) - 1)
    if low > high:
        return 0.0
    return float(np.max(magnitudes[low:high + 1]))


def calculate_thd(
    signal: np.ndarray,
    fundamental_hz: float,
    sample_rate: float,
    max_harmonic: int = DEFAULT_MAX_HARMONIC,
    search_bins: int = PEAK_SEARCH_BINS,
    transform=None
) -> float:
    """
    Calculate Total Harmonic Distortion in percent.

    Algorithm:
    1. Analyze the largest power-of-two prefix of the buffer
    2. Apply the Hann window and forward transform
    3. Locate the fundamental bin round(f / bin_resolution)
    4. Peak-pick +/- search_bins around the fundamental and each harmonic
       h * f (h = 2..max_harmonic) below Nyquist
    5. THD = sqrt(sum(Hn^2)) / H1 * 100

    Args:
        signal: Samples to analyze
        fundamental_hz: Expected fundamental frequency
        sample_rate: Sample rate in Hz
        max_harmonic: Highest harmonic number included
        search_bins: Half-width of the peak search window
        transform: Spectral transform. If None, uses SpectralTransform.

    Returns:
        THD percentage. 0.0 for buffers under 256 samples, frequencies
        outside (0, Nyquist) or a silent fundamental.
    """
    samples = as_signal(signal)
    if len(samples) < MIN_THD_SAMPLES or sample_rate <= 0:
        return 0.0

    nyquist = sample_rate / 2.0
    if not (0.0 < fundamental_hz < nyquist):
        return 0.0

    fft_size = largest_power_of_two(len(samples))
    magnitudes = magnitude_spectrum(transform or _default_transform, samples[:fft_size])
    bin_resolution = sample_rate / fft_size

    fundamental_bin = int(round(fundamental_hz / bin_resolution))
    fundamental = _peak_near(magnitudes, fundamental_bin, search_bins)
    if fundamental < EPSILON:
        return 0.0

    harmonic_power = 0.0
    for harmonic in range(2, max_harmonic + 1):
        harmonic_hz = fundamental_hz * harmonic
        if harmonic_hz >= nyquist:
            break
        harmonic_bin = int(round(harmonic_hz / bin_resolution))
        harmonic_power += _peak_near(magnitudes, harmonic_bin, search_bins) ** 2

    return math.sqrt(harmonic_power) / fundamental * 100.0


def calculate_thd_db(thd_percent: float, floor_db: float = DB_FLOOR) -> float:
    """THD percentage expressed in dB relative to the fundamental."""
    return amplitude_to_db(thd_percent / 100.0, floor_db=floor_db)


def calculate_crest_factor(signal: np.ndarray, epsilon: float = EPSILON) -> float:
    """
    Calculate crest factor as the linear peak-to-RMS ratio.

    A sine measures sqrt(2), a square wave 1.

    Returns:
        peak / rms, or 0.0 for empty or silent buffers
    """
    samples = as_signal(signal)
    if len(samples) == 0:
        return 0.0

    rms = math.sqrt(float(np.dot(samples, samples)) / len(samples))
    if rms < epsilon:
        return 0.0

    return float(np.max(np.abs(samples))) / rms


def calculate_crest_factor_db(signal: np.ndarray, epsilon: float = EPSILON) -> float:
    """
    Calculate crest factor in dB.

    A sine measures ~3.01 dB, a square wave 0 dB, an isolated click in a
    quiet signal well above 20 dB.

    Returns:
        20 * log10(peak / rms), or 0.0 for empty or silent buffers
    """
    crest_factor = calculate_crest_factor(signal, epsilon)
    if crest_factor <= 0.0:
        return 0.0
    return 20.0 * math.log10(crest_factor)


def calculate_kurtosis(signal: np.ndarray, epsilon: float = POWER_EPSILON) -> float:
    """
    Calculate excess kurtosis m4 / m2^2 - 3.

    Gaussian noise measures ~0, uniform noise ~-1.2, sparse impulses large
    positive values.

    Returns:
        Excess kurtosis, or 0.0 for fewer than 4 samples or constant input
    """
    samples = as_signal(signal)
    if len(samples) < MIN_KURTOSIS_SAMPLES:
        return 0.0

    mean = compute_mean(samples)
    m2 = compute_moment(samples, mean, 2)
    if m2 < epsilon:
        return 0.0

    m4 = compute_moment(samples, mean, 4)
    return m4 / (m2 * m2) - 3.0


def calculate_zero_crossing_rate(signal: np.ndarray) -> float:
    """Fraction of adjacent sample pairs whose sign differs (zero counts as positive)."""
    samples = as_signal(signal)
    if len(samples) < 2:
        return 0.0

    positive = samples >= 0.0
    crossings = int(np.count_nonzero(positive[1:] != positive[:-1]))
    return crossings / (len(samples) - 1)


def calculate_spectral_flatness(signal: np.ndarray, transform=None) -> float:
    """
    Spectral flatness of a whole buffer.

    Uses the largest power-of-two prefix, the Hann window and magnitudes
    excluding DC.

    Returns:
        Flatness in [0, 1]; 0.0 for buffers under 2 samples or silence
    """
    samples = as_signal(signal)
    fft_size = largest_power_of_two(len(samples))
    if fft_size < 2:
        return 0.0

    magnitudes = magnitude_spectrum(transform or _default_transform, samples[:fft_size])
    return compute_spectral_flatness(magnitudes[1:])


def measure_quality(
    signal: np.ndarray,
    reference: np.ndarray,
    fundamental_hz: float,
    sample_rate: float,
    transform: Optional[SpectralTransform] = None
) -> SignalQualityMetrics:
    """
    Aggregate SNR, THD, crest factor and kurtosis of a signal.

    Args:
        signal: Signal under test
        reference: Reference for the SNR measurement
        fundamental_hz: Fundamental for the THD measurement
        sample_rate: Sample rate in Hz
        transform: Spectral transform. If None, uses SpectralTransform.

    Returns:
        SignalQualityMetrics with every field populated
    """
    thd_percent = calculate_thd(signal, fundamental_hz, sample_rate, transform=transform)

    return SignalQualityMetrics(
        snr_db=calculate_snr(signal, reference),
        thd_percent=thd_percent,
        thd_db=calculate_thd_db(thd_percent),
        crest_factor_db=calculate_crest_factor_db(signal),
        kurtosis=calculate_kurtosis(signal)
    )
