"""
Spectral Anomaly Detector.

This module monitors spectral flatness frame by frame. Tonal program
material has a peaky spectrum (flatness near 0); clicks, glitches and
injected noise spread energy across all bins and push flatness toward 1.
"""

import time
from typing import List, Optional

import numpy as np

from signal_quality.models.detector_config import SpectralAnomalyConfig
from signal_quality.models.results import SpectralAnomalyDetection
from signal_quality.utils.numeric import EPSILON, as_signal
from signal_quality.utils.structured_logger import (
    log_configuration_rejected,
    log_detection_summary,
)
from signal_quality.utils.transform import SpectralTransform


def compute_spectral_flatness(magnitudes: np.ndarray, epsilon: float = EPSILON) -> float:
    """
    Geometric-to-arithmetic mean ratio of a magnitude spectrum.

    Args:
        magnitudes: Bin magnitudes (DC already excluded)
        epsilon: Magnitudes at or below this are left out of the geometric mean

    Returns:
        Flatness in [0, 1]; 0 for silent or empty spectra
    """
    if len(magnitudes) == 0:
        return 0.0

    arithmetic_mean = float(np.mean(magnitudes))
    if arithmetic_mean < epsilon:
        return 0.0

    significant = magnitudes[magnitudes > epsilon]
    if len(significant) == 0:
        return 0.0

    geometric_mean = float(np.exp(np.mean(np.log(significant))))
    return geometric_mean / arithmetic_mean


class SpectralAnomalyDetector:
    """
    Flags frames whose spectral flatness exceeds a threshold.

    Attributes:
        config: Detector configuration
        transform: Object providing forward() and generate_hann()
        detections: Detections from the most recent detect() call
    """

    def __init__(self, config: Optional[SpectralAnomalyConfig] = None, transform=None):
        """
        Initialize spectral anomaly detector.

        Args:
            config: Detector configuration. If None, uses defaults.
            transform: Spectral transform. If None, uses SpectralTransform.
        """
        self.config = config if config is not None else SpectralAnomalyConfig()
        self.transform = transform if transform is not None else SpectralTransform()
        self.detections: List[SpectralAnomalyDetection] = []
        self._prepared = False
        self._window = np.zeros(0, dtype=np.float64)
        self._windowed = np.zeros(0, dtype=np.float64)

    @property
    def is_prepared(self) -> bool:
        return self._prepared

    def prepare(self) -> bool:
        """
        Builds the analysis window and the windowed-frame buffer.

        Returns:
            True if the configuration is valid and the detector is ready
        """
        errors = self.config.validate()
        if errors:
            log_configuration_rejected('SpectralAnomalyDetector', errors)
            self._prepared = False
            return False

        self._window = np.asarray(self.transform.generate_hann(self.config.fft_size), dtype=np.float64)
        self._windowed = np.zeros(self.config.fft_size, dtype=np.float64)
        self.detections = []
        self._prepared = True
        return True

    def reset(self):
        """Clear detections from the previous call. Working buffers are kept."""
        self.detections = []

    def compute_flatness_track(self, audio: np.ndarray) -> List[float]:
        """
        Flatness of every analysis frame, without threshold gating.

        Args:
            audio: Samples as a 1-D array

        Returns:
            One flatness value per frame. Empty for invalid configs or
            buffers shorter than one FFT frame.
        """
        if not self._prepared and not self.prepare():
            return []

        samples = as_signal(audio)
        fft_size = self.config.fft_size
        hop_size = self.config.hop_size

        if len(samples) < fft_size:
            return []

        num_frames = (len(samples) - fft_size) // hop_size + 1
        return [
            self._frame_flatness(samples[i * hop_size:i * hop_size + fft_size])
            for i in range(num_frames)
        ]

    def detect(self, audio: np.ndarray) -> List[SpectralAnomalyDetection]:
        """
        Detect broadband anomalies.

        Algorithm, per frame:
        1. Apply the Hann window
        2. Forward transform and take magnitudes, excluding DC
        3. Flatness = exp(mean(log|X|)) / mean(|X|)
        4. Flag the frame when flatness > flatness_threshold

        Args:
            audio: Samples as a 1-D array

        Returns:
            Flagged frames in frame order
        """
        self.reset()
        start_time = time.perf_counter()

        samples = as_signal(audio)
        track = self.compute_flatness_track(samples)
        if not track:
            return []

        self.detections = [
            SpectralAnomalyDetection(
                frame_index=frame_index,
                time_seconds=frame_index * self.config.hop_size / self.config.sample_rate,
                flatness=flatness
            )
            for frame_index, flatness in enumerate(track)
            if flatness > self.config.flatness_threshold
        ]

        log_detection_summary(
            'spectral_anomaly',
            len(self.detections),
            len(samples),
            (time.perf_counter() - start_time) * 1000
        )
        return self.detections

    def _frame_flatness(self, frame: np.ndarray) -> float:
        np.multiply(frame, self._window, out=self._windowed)
        spectrum = np.asarray(self.transform.forward(self._windowed))
        return compute_spectral_flatness(np.abs(spectrum[1:]))
