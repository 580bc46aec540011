"""
Click Detector.

This module provides derivative-based click/pop detection. Each frame is
thresholded against its own derivative statistics so loud and quiet
passages are judged on their own terms.
"""

import time
from typing import List, Optional

import numpy as np

from signal_quality.models.detector_config import ClickDetectorConfig
from signal_quality.models.results import ClickDetection
from signal_quality.utils.numeric import as_signal, power_to_db
from signal_quality.utils.statistics import compute_mean, compute_std_dev
from signal_quality.utils.structured_logger import (
    log_configuration_rejected,
    log_detection_summary,
)


class ClickDetector:
    """
    Detects clicks and pops as outliers of the first derivative.

    The buffer is scanned in overlapping frames. Within each frame, the mean
    and standard deviation of ``|x[n] - x[n-1]|`` define an adaptive
    threshold; samples exceeding it are reported. Detections from all frames
    are then sorted and merged so one transient yields one detection.

    Attributes:
        config: Detector configuration
        detections: Detections from the most recent detect() call
    """

    def __init__(self, config: Optional[ClickDetectorConfig] = None):
        """
        Initialize click detector.

        Args:
            config: Detector configuration. If None, uses defaults.
        """
        self.config = config if config is not None else ClickDetectorConfig()
        self.detections: List[ClickDetection] = []
        self._prepared = False
        self._derivative = np.zeros(0, dtype=np.float64)
        self._abs_derivative = np.zeros(0, dtype=np.float64)

    @property
    def is_prepared(self) -> bool:
        return self._prepared

    def prepare(self) -> bool:
        """
        Allocates frame-sized working buffers.

        Returns:
            True if the configuration is valid and the detector is ready
        """
        errors = self.config.validate()
        if errors:
            log_configuration_rejected('ClickDetector', errors)
            self._prepared = False
            return False

        self._derivative = np.zeros(self.config.frame_size, dtype=np.float64)
        self._abs_derivative = np.zeros(self.config.frame_size, dtype=np.float64)
        self.detections = []
        self._prepared = True
        return True

    def reset(self):
        """Clear detections from the previous call. Working buffers are kept."""
        self.detections = []

    def detect(self, audio: np.ndarray) -> List[ClickDetection]:
        """
        Detect clicks in a buffer.

        Algorithm:
        1. Split the buffer into frames of frame_size advanced by hop_size
           (a buffer shorter than one frame is analyzed as a single frame)
        2. Skip frames whose RMS level is below energy_threshold_db
        3. Compute |derivative| mean and stddev per frame
        4. Record samples with |derivative| > mean + threshold * stddev
        5. Sort by sample index and merge detections within merge_gap

        Args:
            audio: Samples as a 1-D array

        Returns:
            Index-sorted, merged detections. Empty for invalid configs or
            buffers shorter than two samples.
        """
        self.reset()

        if not self._prepared and not self.prepare():
            return []

        start_time = time.perf_counter()
        samples = as_signal(audio)
        num_samples = len(samples)

        if num_samples < 2:
            return []

        frame_size = self.config.frame_size
        hop_size = self.config.hop_size

        if num_samples < frame_size:
            raw = self._detect_in_frame(samples, 0)
        else:
            raw = []
            num_frames = (num_samples - frame_size) // hop_size + 1
            for frame_index in range(num_frames):
                start = frame_index * hop_size
                raw.extend(self._detect_in_frame(samples[start:start + frame_size], start))

        self.detections = self._merge_detections(raw)

        log_detection_summary(
            'click',
            len(self.detections),
            num_samples,
            (time.perf_counter() - start_time) * 1000
        )
        return self.detections

    def _detect_in_frame(self, frame: np.ndarray, offset: int) -> List[ClickDetection]:
        length = len(frame)
        if length < 2:
            return []

        mean_square = float(np.dot(frame, frame)) / length
        if power_to_db(mean_square) < self.config.energy_threshold_db:
            return []

        derivative = self._derivative[:length]
        abs_derivative = self._abs_derivative[:length]
        derivative[0] = 0.0
        np.subtract(frame[1:], frame[:-1], out=derivative[1:])
        np.abs(derivative, out=abs_derivative)

        mean = compute_mean(abs_derivative)
        std_dev = compute_std_dev(abs_derivative, mean)
        threshold = mean + self.config.detection_threshold * std_dev

        hits = np.flatnonzero(abs_derivative[1:] > threshold) + 1
        sample_rate = self.config.sample_rate
        return [
            ClickDetection(
                sample_index=int(offset + i),
                amplitude=float(derivative[i]),
                time_seconds=(offset + i) / sample_rate
            )
            for i in hits
        ]

    def _merge_detections(self, detections: List[ClickDetection]) -> List[ClickDetection]:
        """
        Collapse detections closer than merge_gap, keeping the larger |amplitude|.

        Adjacency is measured from the currently kept detection, so a run of
        closely spaced hits collapses into a single entry.
        """
        if not detections:
            return []

        ordered = sorted(detections, key=lambda d: d.sample_index)
        merged = [ordered[0]]
        gap = self.config.merge_gap

        for detection in ordered[1:]:
            current = merged[-1]
            if detection.is_adjacent_to(current, gap):
                if abs(detection.amplitude) > abs(current.amplitude):
                    merged[-1] = detection
            else:
                merged.append(detection)

        return merged
