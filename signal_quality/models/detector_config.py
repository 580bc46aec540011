"""
Detector configuration data models.

This module defines the configuration dataclasses for the click, LPC and
spectral anomaly detectors.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from signal_quality.utils.numeric import is_power_of_two


MIN_SAMPLE_RATE = 22050.0
MAX_SAMPLE_RATE = 192000.0
MIN_FRAME_SIZE = 64
MAX_FRAME_SIZE = 8192


def _validate_sample_rate(sample_rate: float, errors: List[str]) -> None:
    if not (MIN_SAMPLE_RATE <= sample_rate <= MAX_SAMPLE_RATE):
        errors.append('Sample rate must be between 22050 and 192000 Hz')


def _validate_framing(frame_size: int, hop_size: int, errors: List[str],
                      label: str = 'Frame size', require_power_of_two: bool = True,
                      enforce_range: bool = True) -> None:
    if enforce_range and not (MIN_FRAME_SIZE <= frame_size <= MAX_FRAME_SIZE):
        errors.append(f'{label} must be between {MIN_FRAME_SIZE} and {MAX_FRAME_SIZE}')
    elif require_power_of_two and not is_power_of_two(frame_size):
        errors.append(f'{label} must be a power of two')

    if not (1 <= hop_size <= frame_size):
        errors.append(f'Hop size must be between 1 and {label.lower()}')


@dataclass(frozen=True)
class ClickDetectorConfig:
    """Configuration for derivative-based click detection."""

    sample_rate: float = 44100.0

    # Framing
    frame_size: int = 512
    hop_size: int = 256

    # Detection
    detection_threshold: float = 5.0  # Sigma multiplier over |derivative|
    energy_threshold_db: float = -60.0  # Quieter frames are skipped
    merge_gap: int = 5  # Max sample distance to coalesce detections

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        _validate_sample_rate(self.sample_rate, errors)
        _validate_framing(self.frame_size, self.hop_size, errors, enforce_range=False)

        if not (self.detection_threshold > 0):
            errors.append('Detection threshold must be positive')

        if not math.isfinite(self.energy_threshold_db):
            errors.append('Energy threshold must be finite')

        if self.merge_gap < 0:
            errors.append('Merge gap must be non-negative')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LPCDetectorConfig:
    """Configuration for linear-prediction residual detection."""

    sample_rate: float = 44100.0
    lpc_order: int = 16
    frame_size: int = 512
    hop_size: int = 256
    threshold: float = 5.0  # MAD multiplier over |residual|

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        _validate_sample_rate(self.sample_rate, errors)

        if not (4 <= self.lpc_order <= 32):
            errors.append('LPC order must be between 4 and 32')

        _validate_framing(self.frame_size, self.hop_size, errors, require_power_of_two=False)

        if self.frame_size <= self.lpc_order:
            errors.append('Frame size must exceed the LPC order')

        if not (self.threshold > 0):
            errors.append('Threshold must be positive')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SpectralAnomalyConfig:
    """Configuration for spectral flatness monitoring."""

    sample_rate: float = 44100.0
    fft_size: int = 512
    hop_size: int = 256
    flatness_threshold: float = 0.7  # Frames flatter than this are flagged
    baseline_flatness: float = 0.0  # Expected flatness of clean program material

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        _validate_sample_rate(self.sample_rate, errors)
        _validate_framing(self.fft_size, self.hop_size, errors, label='FFT size')

        if not (0.0 <= self.flatness_threshold <= 1.0):
            errors.append('Flatness threshold must be between 0 and 1')

        if not (0.0 <= self.baseline_flatness <= 1.0):
            errors.append('Baseline flatness must be between 0 and 1')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
