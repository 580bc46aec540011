"""
Signal quality analyzers.

This module contains the time-domain detectors (click, LPC), the spectral
anomaly detector, aggregate signal metrics and aliasing measurement.
"""

from signal_quality.analyzers.click_detector import ClickDetector
from signal_quality.analyzers.lpc_detector import LPCDetector
from signal_quality.analyzers.spectral_anomaly_detector import SpectralAnomalyDetector
from signal_quality.analyzers.signal_metrics import (
    calculate_crest_factor,
    calculate_crest_factor_db,
    calculate_kurtosis,
    calculate_snr,
    calculate_spectral_flatness,
    calculate_thd,
    calculate_thd_db,
    calculate_zero_crossing_rate,
    measure_quality,
)
from signal_quality.analyzers.aliasing_analyzer import (
    compare_aliasing,
    hard_clip_reference,
    identity_reference,
    measure_aliasing,
)

__all__ = [
    'ClickDetector',
    'LPCDetector',
    'SpectralAnomalyDetector',
    'calculate_crest_factor',
    'calculate_crest_factor_db',
    'calculate_kurtosis',
    'calculate_snr',
    'calculate_spectral_flatness',
    'calculate_thd',
    'calculate_thd_db',
    'calculate_zero_crossing_rate',
    'measure_quality',
    'compare_aliasing',
    'hard_clip_reference',
    'identity_reference',
    'measure_aliasing',
]
