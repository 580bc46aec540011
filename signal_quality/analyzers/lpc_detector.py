"""
LPC Detector.

This module provides artifact detection from linear-prediction residuals.
A short-term LPC model predicts each sample from its predecessors; clicks,
dropouts and discontinuities are unpredictable and show up as residual
spikes. Thresholds use median/MAD statistics so the artifacts being hunted
do not inflate the threshold.
"""

import time
from typing import Dict, List, Optional

import numpy as np
from scipy import signal as scipy_signal

from signal_quality.models.detector_config import LPCDetectorConfig
from signal_quality.models.results import ClickDetection
from signal_quality.utils.numeric import EPSILON, SILENCE_ENERGY, as_signal
from signal_quality.utils.statistics import compute_mad, compute_median
from signal_quality.utils.structured_logger import (
    log_configuration_rejected,
    log_detection_summary,
)


# Frames with fewer usable residual samples are skipped
MIN_RESIDUAL_SAMPLES = 10

# Lower bound on the MAD so perfectly predictable frames keep a usable threshold
MIN_MAD = 0.001


def compute_autocorrelation(frame: np.ndarray, order: int) -> np.ndarray:
    """
    Biased autocorrelation ``R[lag] = sum(x[n] * x[n + lag])`` for lags 0..order.

    Args:
        frame: Frame samples
        order: Highest lag

    Returns:
        Array of ``order + 1`` autocorrelation values
    """
    length = len(frame)
    autocorrelation = np.zeros(order + 1, dtype=np.float64)
    for lag in range(min(order, length - 1) + 1):
        autocorrelation[lag] = np.dot(frame[:length - lag], frame[lag:])
    return autocorrelation


def levinson_durbin(autocorrelation: np.ndarray, order: int,
                    error_floor: float = EPSILON) -> np.ndarray:
    """
    Solve for LPC coefficients with the Levinson-Durbin recursion.

    The returned polynomial has ``a[0] = 1``; the predictor is
    ``x_hat[n] = -sum(a[j] * x[n - j])`` for ``j = 1..order``.

    Algorithm, for i = 1..order:
        lambda = -sum(a[j] * R[i - j], j < i) / error
        a[j] = a[j] + lambda * a[i - j]   for j = 0..i
        error = error * (1 - lambda^2)

    Args:
        autocorrelation: R[0..order]
        order: Model order
        error_floor: Smallest prediction error magnitude used as divisor

    Returns:
        Coefficients a[0..order]
    """
    coefficients = np.zeros(order + 1, dtype=np.float64)
    coefficients[0] = 1.0
    error = float(autocorrelation[0])

    for i in range(1, order + 1):
        reflection = -float(np.dot(coefficients[:i], autocorrelation[i:0:-1]))
        if abs(error) < error_floor:
            error = error_floor
        reflection /= error

        coefficients[:i + 1] = coefficients[:i + 1] + reflection * coefficients[i::-1]
        error *= 1.0 - reflection * reflection

    return coefficients


def compute_residual(frame: np.ndarray, coefficients: np.ndarray) -> np.ndarray:
    """
    Prediction error ``e[n] = x[n] + sum(a[j] * x[n - j])`` for ``j = 1..min(n, order)``.

    Samples before the frame start are treated as zero, so the first
    ``order`` residual values lack full prediction context.
    """
    return scipy_signal.lfilter(coefficients, [1.0], frame)


class LPCDetector:
    """
    Detects artifacts as outliers of the LPC prediction residual.

    Attributes:
        config: Detector configuration
        detections: Detections from the most recent detect() call
    """

    def __init__(self, config: Optional[LPCDetectorConfig] = None):
        """
        Initialize LPC detector.

        Args:
            config: Detector configuration. If None, uses defaults.
        """
        self.config = config if config is not None else LPCDetectorConfig()
        self.detections: List[ClickDetection] = []
        self._prepared = False
        self._scratch = np.zeros(0, dtype=np.float64)

    @property
    def is_prepared(self) -> bool:
        return self._prepared

    def prepare(self) -> bool:
        """
        Allocates the residual scratch buffer.

        Returns:
            True if the configuration is valid and the detector is ready
        """
        errors = self.config.validate()
        if errors:
            log_configuration_rejected('LPCDetector', errors)
            self._prepared = False
            return False

        self._scratch = np.zeros(self.config.frame_size, dtype=np.float64)
        self.detections = []
        self._prepared = True
        return True

    def reset(self):
        """Clear detections from the previous call. Working buffers are kept."""
        self.detections = []

    def detect(self, audio: np.ndarray) -> List[ClickDetection]:
        """
        Detect residual outliers in a buffer.

        Algorithm, per frame:
        1. Autocorrelation R[0..order]; skip the frame if R[0] is near zero
        2. Levinson-Durbin recursion for the LPC polynomial
        3. Prediction residual over the frame
        4. Drop the first `order` residual samples
        5. Flag |e| > median + threshold * max(MAD, 0.001)

        Overlapping frames may flag the same sample twice; the result keeps
        one detection per sample index (the larger |residual|), sorted by index.

        Args:
            audio: Samples as a 1-D array

        Returns:
            Index-sorted detections. Empty for invalid configs or buffers
            shorter than one frame.
        """
        self.reset()

        if not self._prepared and not self.prepare():
            return []

        start_time = time.perf_counter()
        samples = as_signal(audio)
        num_samples = len(samples)
        frame_size = self.config.frame_size
        hop_size = self.config.hop_size

        if num_samples < frame_size:
            return []

        by_index: Dict[int, ClickDetection] = {}
        num_frames = (num_samples - frame_size) // hop_size + 1

        for frame_index in range(num_frames):
            start = frame_index * hop_size
            for detection in self._detect_in_frame(samples[start:start + frame_size], start):
                existing = by_index.get(detection.sample_index)
                if existing is None or abs(detection.amplitude) > abs(existing.amplitude):
                    by_index[detection.sample_index] = detection

        self.detections = [by_index[index] for index in sorted(by_index)]

        log_detection_summary(
            'lpc',
            len(self.detections),
            num_samples,
            (time.perf_counter() - start_time) * 1000
        )
        return self.detections

    def _detect_in_frame(self, frame: np.ndarray, offset: int) -> List[ClickDetection]:
        order = self.config.lpc_order

        autocorrelation = compute_autocorrelation(frame, order)
        if autocorrelation[0] < SILENCE_ENERGY:
            return []

        coefficients = levinson_durbin(autocorrelation, order)
        residual = compute_residual(frame, coefficients)[order:]

        if len(residual) < MIN_RESIDUAL_SAMPLES:
            return []

        # compute_median/compute_mad reorder their input
        scratch = self._scratch[:len(residual)]
        np.abs(residual, out=scratch)
        median = compute_median(scratch)
        mad = compute_mad(scratch, median)
        threshold = median + self.config.threshold * max(mad, MIN_MAD)

        hits = np.flatnonzero(np.abs(residual) > threshold)
        sample_rate = self.config.sample_rate
        return [
            ClickDetection(
                sample_index=int(offset + order + i),
                amplitude=float(residual[i]),
                time_seconds=(offset + order + i) / sample_rate
            )
            for i in hits
        ]
