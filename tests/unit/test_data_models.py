"""Unit tests for result and configuration data models."""

import math

import pytest

from signal_quality.models.detector_config import (
    ClickDetectorConfig,
    LPCDetectorConfig,
    SpectralAnomalyConfig,
)
from signal_quality.models.results import (
    ABTestResult,
    AliasingComparison,
    AliasingMeasurement,
    ClickDetection,
    GoldenComparisonResult,
    SignalQualityMetrics,
)
from signal_quality.models.verification_config import AliasingTestConfig


class TestConfigSerialization:
    """Test suite for configuration to_dict."""

    @pytest.mark.parametrize("config_class", [
        ClickDetectorConfig, LPCDetectorConfig, SpectralAnomalyConfig, AliasingTestConfig
    ])
    def test_to_dict_round_trips_through_constructor(self, config_class):
        """Test that to_dict output rebuilds an equal config."""
        config = config_class()

        assert config_class(**config.to_dict()) == config

    def test_validation_collects_every_error(self):
        """Test that validate reports all problems at once."""
        errors = ClickDetectorConfig(
            sample_rate=1000.0,
            frame_size=500,
            detection_threshold=-1.0,
            merge_gap=-2
        ).validate()

        assert len(errors) >= 4, f"Expected one error per bad field, got {errors}"


class TestClickDetection:
    """Test suite for ClickDetection."""

    def test_adjacency_is_symmetric_and_inclusive(self):
        """Test the merge-gap adjacency check."""
        a = ClickDetection(100, 0.5, 0.0)
        b = ClickDetection(105, 0.2, 0.0)

        assert a.is_adjacent_to(b, 5)
        assert b.is_adjacent_to(a, 5)
        assert not a.is_adjacent_to(b, 4)

    def test_to_dict(self):
        """Test serialization."""
        assert ClickDetection(10, -0.25, 10 / 44100.0).to_dict() == {
            'sample_index': 10,
            'amplitude': -0.25,
            'time_seconds': 10 / 44100.0
        }


class TestValidityChecks:
    """Test suite for NaN/Inf detection on results."""

    def test_metrics_with_nan_are_invalid(self):
        """Test that a NaN metric invalidates SignalQualityMetrics."""
        assert SignalQualityMetrics(40.0, 0.1, -60.0, 3.0, -1.5).is_valid()
        assert not SignalQualityMetrics(float('nan'), 0.1, -60.0, 3.0, -1.5).is_valid()
        assert not SignalQualityMetrics(40.0, 0.1, -math.inf, 3.0, -1.5).is_valid()

    def test_golden_result_validity(self):
        """Test GoldenComparisonResult.is_valid."""
        assert GoldenComparisonResult(True, 200.0, 0.0, 3.0, 0, 0.0).is_valid()
        assert not GoldenComparisonResult(False, math.inf, 0.0, 3.0, 0, 0.0).is_valid()

    def test_aliasing_measurement_validity(self):
        """Test AliasingMeasurement.is_valid."""
        assert AliasingMeasurement(54.0, -10.0, -50.0, 104.0).is_valid()
        assert not AliasingMeasurement(54.0, float('nan'), -50.0, 104.0).is_valid()


class TestABTestResult:
    """Test suite for ABTestResult.equivalent."""

    @pytest.fixture
    def result(self):
        """Fixture for a result with small differences."""
        return ABTestResult(
            snr_difference_db=0.8,
            thd_difference_percent=-0.3,
            click_count_difference=1,
            click_count_a=1,
            click_count_b=0,
            snr_a=80.8,
            snr_b=80.0
        )

    def test_click_difference_exceeds_default_tolerance(self, result):
        """Test the default zero click tolerance."""
        assert not result.equivalent()
        assert result.equivalent(click_tolerance=1)

    def test_tolerances_are_inclusive(self, result):
        """Test boundary values."""
        assert result.equivalent(snr_tolerance_db=0.8, thd_tolerance_percent=0.3, click_tolerance=1)
        assert not result.equivalent(snr_tolerance_db=0.7, click_tolerance=1)

    def test_failure_reason_prevents_equivalence(self, result):
        """Test that a failed path is never equivalent."""
        result.failure_reason = "Callback failed during process_b: RuntimeError: boom"

        assert not result.equivalent(snr_tolerance_db=100.0, thd_tolerance_percent=100.0, click_tolerance=10)


class TestAliasingComparison:
    """Test suite for aliasing reduction bookkeeping."""

    def test_reduction_is_reference_minus_tested(self):
        """Test the reduction sign convention."""
        reference = AliasingMeasurement(54.0, 40.0, 30.0, 24.0)
        tested = AliasingMeasurement(54.0, 10.0, -20.0, 74.0)

        assert tested.aliasing_reduction_vs(reference) == pytest.approx(50.0)
        assert reference.aliasing_reduction_vs(tested) == pytest.approx(-50.0)

    def test_meets_threshold(self):
        """Test the inclusive threshold check."""
        measurement = AliasingMeasurement(54.0, 0.0, 0.0, 54.0)
        comparison = AliasingComparison(measurement, measurement, reduction_db=20.0)

        assert comparison.meets_threshold(20.0)
        assert not comparison.meets_threshold(20.1)
