"""
Verification configuration data models.

This module defines the configuration dataclasses for golden-reference
comparison, parameter sweeps and aliasing measurement.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List

from signal_quality.models.detector_config import MAX_SAMPLE_RATE, MIN_SAMPLE_RATE
from signal_quality.utils.numeric import is_power_of_two


MAX_SWEEP_STEPS = 1000


class StepType(Enum):
    """Spacing of parameter values across a sweep."""

    LINEAR = 'linear'
    LOGARITHMIC = 'logarithmic'


@dataclass(frozen=True)
class GoldenReferenceConfig:
    """Pass/fail thresholds for comparing a signal against a golden reference."""

    sample_rate: float = 44100.0

    # Thresholds
    snr_threshold_db: float = 60.0  # Minimum acceptable SNR vs reference
    max_click_amplitude: float = 0.1  # Largest tolerated new transient
    thd_threshold_percent: float = 1.0  # THD ceiling
    max_crest_factor_db: float = 20.0  # Crest factor ceiling
    max_click_count: int = 0  # Clicks tolerated in the difference signal

    # Fundamental assumed for the THD measurement
    fundamental_hz: float = 1000.0

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        if not (MIN_SAMPLE_RATE <= self.sample_rate <= MAX_SAMPLE_RATE):
            errors.append('Sample rate must be between 22050 and 192000 Hz')

        if not math.isfinite(self.snr_threshold_db):
            errors.append('SNR threshold must be finite')

        if not (self.max_click_amplitude >= 0):
            errors.append('Max click amplitude must be non-negative')

        if not (self.thd_threshold_percent >= 0):
            errors.append('THD threshold must be non-negative')

        if not (self.max_crest_factor_db >= 0):
            errors.append('Max crest factor must be non-negative')

        if self.max_click_count < 0:
            errors.append('Max click count must be non-negative')

        if not (0.0 < self.fundamental_hz < self.sample_rate / 2.0):
            errors.append('Fundamental frequency must be between 0 Hz and Nyquist')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ParameterSweepConfig:
    """Range, spacing and checks for a parameter sweep."""

    parameter_name: str = 'parameter'

    # Range
    min_value: float = 0.0
    max_value: float = 1.0
    num_steps: int = 10
    step_type: StepType = StepType.LINEAR

    # Checks
    check_for_clicks: bool = True
    check_thd: bool = False
    thd_threshold_percent: float = 1.0
    click_threshold: float = 5.0  # Sigma multiplier for the click detector
    fundamental_hz: float = 1000.0  # Fundamental used by the THD check

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        if not self.parameter_name:
            errors.append('Parameter name must not be empty')

        if not (math.isfinite(self.min_value) and math.isfinite(self.max_value)):
            errors.append('Parameter range must be finite')
        elif self.min_value > self.max_value:
            errors.append('Min value must not exceed max value')

        if not (1 <= self.num_steps <= MAX_SWEEP_STEPS):
            errors.append(f'Number of steps must be between 1 and {MAX_SWEEP_STEPS}')

        if self.step_type == StepType.LOGARITHMIC and not (self.min_value > 0):
            errors.append('Logarithmic sweeps require a positive min value')

        if not (self.thd_threshold_percent > 0):
            errors.append('THD threshold must be positive')

        if not (self.click_threshold > 0):
            errors.append('Click threshold must be positive')

        if not (self.fundamental_hz > 0):
            errors.append('Fundamental frequency must be positive')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['step_type'] = self.step_type.value
        return result


@dataclass(frozen=True)
class AliasingTestConfig:
    """Stimulus and analysis settings for aliasing measurement."""

    test_frequency_hz: float = 5000.0
    sample_rate: float = 44100.0
    drive_gain: float = 1.0
    fft_size: int = 2048
    max_harmonic: int = 10

    def nyquist(self) -> float:
        return self.sample_rate / 2.0

    def bin_resolution(self) -> float:
        return self.sample_rate / self.fft_size

    def validate(self) -> List[str]:
        """
        Validates configuration parameters.

        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []

        if not (self.sample_rate > 0):
            errors.append('Sample rate must be positive')
        elif not (0.0 < self.test_frequency_hz < self.nyquist()):
            errors.append('Test frequency must be between 0 Hz and Nyquist')

        if not (self.drive_gain > 0):
            errors.append('Drive gain must be positive')

        if not (256 <= self.fft_size <= 65536 and is_power_of_two(self.fft_size)):
            errors.append('FFT size must be a power of two between 256 and 65536')

        if not (2 <= self.max_harmonic <= 64):
            errors.append('Max harmonic must be between 2 and 64')

        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
