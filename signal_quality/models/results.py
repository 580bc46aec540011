"""
Verification result data models.

This module defines the dataclasses returned by the detectors, metrics and
verification drivers. Results are always fully populated, including on the
failing path, so a test failure message can be built from them directly.
"""

import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Tuple

from signal_quality.utils.numeric import all_finite


@dataclass
class ClickDetection:
    """A single transient reported by a time-domain detector."""

    sample_index: int  # Global index into the analyzed buffer
    amplitude: float  # Signed derivative or residual value
    time_seconds: float  # sample_index / sample_rate

    def is_adjacent_to(self, other: 'ClickDetection', gap: int) -> bool:
        return abs(self.sample_index - other.sample_index) <= gap

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SpectralAnomalyDetection:
    """A frame whose spectrum is flatter than the configured threshold."""

    frame_index: int
    time_seconds: float  # Frame start in seconds
    flatness: float  # 0 = tonal, 1 = noise-like

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SignalQualityMetrics:
    """Aggregate quality numbers for one signal against its reference."""

    snr_db: float
    thd_percent: float
    thd_db: float
    crest_factor_db: float
    kurtosis: float

    def is_valid(self) -> bool:
        """True when every metric is finite. Says nothing about whether the values are good."""
        return all_finite(
            self.snr_db, self.thd_percent, self.thd_db,
            self.crest_factor_db, self.kurtosis
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GoldenComparisonResult:
    """Outcome of comparing a signal with its golden reference."""

    passed: bool
    snr_db: float
    thd_percent: float
    crest_factor_db: float
    clicks_detected: int
    max_click_amplitude: float
    failure_reasons: List[str] = field(default_factory=list)

    def is_valid(self) -> bool:
        return all_finite(
            self.snr_db, self.thd_percent, self.crest_factor_db,
            self.max_click_amplitude
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ABTestResult:
    """
    Differential comparison of two processing paths on the same input.

    Differences are A minus B.
    """

    snr_difference_db: float
    thd_difference_percent: float
    click_count_difference: int
    click_count_a: int
    click_count_b: int
    snr_a: float
    snr_b: float
    failure_reason: str = ''  # Set when a callback failed

    def equivalent(
        self,
        snr_tolerance_db: float = 1.0,
        thd_tolerance_percent: float = 0.5,
        click_tolerance: int = 0
    ) -> bool:
        """
        Checks whether both paths behave the same within tolerances.

        Args:
            snr_tolerance_db: Largest accepted |SNR difference| in dB
            thd_tolerance_percent: Largest accepted |THD difference| in percent
            click_tolerance: Largest accepted |click count difference|

        Returns:
            True when every difference is within its tolerance and both
            paths ran to completion
        """
        return (
            not self.failure_reason
            and abs(self.snr_difference_db) <= snr_tolerance_db
            and abs(self.thd_difference_percent) <= thd_tolerance_percent
            and abs(self.click_count_difference) <= click_tolerance
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StepResult:
    """Checks performed at one parameter value of a sweep."""

    parameter_value: float
    passed: bool
    clicks_detected: int = 0
    thd_percent: float = 0.0
    snr_db: float = 0.0
    failure_reason: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SweepResult:
    """Ordered step results of a parameter sweep."""

    parameter_name: str
    step_results: List[StepResult] = field(default_factory=list)

    def has_failed(self) -> bool:
        return any(not step.passed for step in self.step_results)

    def get_failed_steps(self) -> List[int]:
        """Indices of the failing steps, in sweep order."""
        return [i for i, step in enumerate(self.step_results) if not step.passed]

    def get_failing_ranges(self) -> List[Tuple[float, float]]:
        """
        Coalesces consecutive failing steps into parameter-value intervals.

        Example:
            passed = [T, T, F, F, F, T, F] over values [0, 1, 2, 3, 4, 5, 6]
            gives [(2, 4), (6, 6)].

        Returns:
            List of (start_value, end_value) tuples in sweep order
        """
        ranges = []
        range_start = None
        range_end = None

        for step in self.step_results:
            if not step.passed:
                if range_start is None:
                    range_start = step.parameter_value
                range_end = step.parameter_value
            elif range_start is not None:
                ranges.append((range_start, range_end))
                range_start = None

        if range_start is not None:
            ranges.append((range_start, range_end))

        return ranges

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AliasingMeasurement:
    """Power of the fundamental, in-band harmonics and aliased images, in dB."""

    fundamental_power_db: float
    harmonic_power_db: float
    aliasing_power_db: float
    signal_to_aliasing_db: float

    def is_valid(self) -> bool:
        return all(math.isfinite(value) for value in (
            self.fundamental_power_db, self.harmonic_power_db,
            self.aliasing_power_db, self.signal_to_aliasing_db
        ))

    def aliasing_reduction_vs(self, reference: 'AliasingMeasurement') -> float:
        """dB by which this measurement's aliasing is below ``reference``'s."""
        return reference.aliasing_power_db - self.aliasing_power_db

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AliasingComparison:
    """Aliasing of a tested processor relative to a reference processor."""

    reference: AliasingMeasurement
    tested: AliasingMeasurement
    reduction_db: float

    def meets_threshold(self, min_reduction_db: float) -> bool:
        return self.reduction_db >= min_reduction_db

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
