"""Unit tests for parameter sweeps."""

import os
from unittest.mock import patch

import numpy as np
import pytest

from signal_quality.models.results import StepResult, SweepResult
from signal_quality.models.verification_config import ParameterSweepConfig, StepType
from signal_quality.utils.signal_generators import add_click, generate_sine
from signal_quality.verification.parameter_sweep import (
    ParameterSweep,
    generate_parameter_values,
    run_parameter_sweep,
)


SAMPLE_RATE = 44100.0


def _sine():
    return generate_sine(1000.0, SAMPLE_RATE, 44100, amplitude=0.5)


class GainProcessor:
    """Minimal parameterized processor used as the sweep target."""

    def __init__(self):
        self.gain = 1.0

    def set_gain(self, value):
        self.gain = value

    def process(self, buffer):
        return buffer * self.gain

    def process_clipped(self, buffer):
        return np.clip(buffer * self.gain, -1.0, 1.0)


class TestParameterSweepConfig:
    """Test suite for ParameterSweepConfig."""

    def test_defaults(self):
        """Test default sweep settings."""
        config = ParameterSweepConfig()

        assert config.is_valid()
        assert config.num_steps == 10
        assert config.step_type == StepType.LINEAR
        assert config.check_for_clicks is True
        assert config.check_thd is False

    @pytest.mark.parametrize("kwargs", [
        {'parameter_name': ''},
        {'min_value': 2.0, 'max_value': 1.0},
        {'num_steps': 0},
        {'num_steps': 1001},
        {'step_type': StepType.LOGARITHMIC, 'min_value': 0.0},
        {'thd_threshold_percent': 0.0},
        {'click_threshold': -1.0},
        {'max_value': float('inf')},
    ])
    def test_invalid_settings(self, kwargs):
        """Test rejection of invalid sweep settings."""
        assert not ParameterSweepConfig(**kwargs).is_valid()

    def test_to_dict_uses_step_type_value(self):
        """Test that the enum is serialized by value."""
        data = ParameterSweepConfig(step_type=StepType.LOGARITHMIC, min_value=1.0).to_dict()

        assert data['step_type'] == 'logarithmic'


class TestGenerateParameterValues:
    """Test suite for generate_parameter_values."""

    def test_linear_values(self):
        """Test evenly spaced values including both endpoints."""
        config = ParameterSweepConfig(min_value=0.0, max_value=10.0, num_steps=11)

        assert generate_parameter_values(config) == [float(i) for i in range(11)]

    def test_logarithmic_values(self):
        """Test geometric spacing across decades."""
        config = ParameterSweepConfig(
            min_value=1.0, max_value=1000.0, num_steps=4, step_type=StepType.LOGARITHMIC
        )

        assert generate_parameter_values(config) == pytest.approx([1.0, 10.0, 100.0, 1000.0])

    def test_single_step_uses_min_value(self):
        """Test that one step visits only min_value."""
        config = ParameterSweepConfig(min_value=0.3, max_value=0.9, num_steps=1)

        assert generate_parameter_values(config) == [0.3]

    def test_degenerate_range(self):
        """Test that min == max repeats the same value."""
        config = ParameterSweepConfig(min_value=0.5, max_value=0.5, num_steps=3)

        assert generate_parameter_values(config) == [0.5, 0.5, 0.5]

    def test_invalid_config_gives_no_values(self):
        """Test that invalid configs produce an empty list."""
        assert generate_parameter_values(ParameterSweepConfig(num_steps=0)) == []


class TestSweepResult:
    """Test suite for SweepResult bookkeeping."""

    @pytest.fixture
    def result(self):
        """Fixture for a sweep with failures at 2-4 and 6."""
        passed = [True, True, False, False, False, True, False]
        return SweepResult(
            parameter_name='gain',
            step_results=[StepResult(float(i), flag) for i, flag in enumerate(passed)]
        )

    def test_failing_ranges(self, result):
        """Test coalescing consecutive failures."""
        assert result.get_failing_ranges() == [(2.0, 4.0), (6.0, 6.0)]

    def test_failed_steps(self, result):
        """Test failing step indices."""
        assert result.get_failed_steps() == [2, 3, 4, 6]
        assert result.has_failed()

    def test_all_passing(self):
        """Test a sweep without failures."""
        result = SweepResult('gain', [StepResult(0.0, True), StepResult(1.0, True)])

        assert not result.has_failed()
        assert result.get_failing_ranges() == []
        assert result.get_failed_steps() == []

    def test_to_dict(self, result):
        """Test serialization including nested steps."""
        data = result.to_dict()

        assert data['parameter_name'] == 'gain'
        assert len(data['step_results']) == 7
        assert data['step_results'][2]['passed'] is False


class TestParameterSweep:
    """Test suite for ParameterSweep."""

    def test_clean_gain_sweep_passes(self):
        """Test that a pure gain stage is click- and distortion-free everywhere."""
        processor = GainProcessor()
        config = ParameterSweepConfig(
            parameter_name='gain',
            min_value=0.1,
            max_value=1.0,
            num_steps=10,
            check_for_clicks=True,
            check_thd=True
        )

        result = ParameterSweep(config, SAMPLE_RATE).run(processor.set_gain, _sine, processor.process)

        assert len(result.step_results) == 10
        assert not result.has_failed(), f"Failures: {[s.failure_reason for s in result.step_results]}"
        for step in result.step_results:
            assert step.clicks_detected == 0
            assert step.thd_percent < 0.1

    def test_step_snr_is_measured_against_input(self):
        """Test the recorded SNR of each step."""
        processor = GainProcessor()
        config = ParameterSweepConfig(min_value=0.5, max_value=1.0, num_steps=2)

        result = run_parameter_sweep(config, processor.set_gain, _sine, processor.process, SAMPLE_RATE)

        # Gain 0.5 leaves half the signal as error: 20*log10(1/0.5)
        assert result.step_results[0].snr_db == pytest.approx(6.02, abs=0.01)
        assert result.step_results[1].snr_db == 200.0

    def test_clipping_drive_sweep_finds_distortion(self):
        """Test that overdriving a clipper fails the THD check at high drive."""
        processor = GainProcessor()
        config = ParameterSweepConfig(
            parameter_name='drive',
            min_value=0.5,
            max_value=8.0,
            num_steps=5,
            step_type=StepType.LOGARITHMIC,
            check_for_clicks=False,
            check_thd=True,
            thd_threshold_percent=5.0
        )

        result = ParameterSweep(config, SAMPLE_RATE).run(
            processor.set_gain, _sine, processor.process_clipped
        )

        passed = [step.passed for step in result.step_results]
        assert passed == [True, True, True, False, False], \
            f"Only drives above 2 should clip, got {[(s.parameter_value, s.thd_percent) for s in result.step_results]}"
        ranges = result.get_failing_ranges()
        assert len(ranges) == 1
        assert ranges[0] == pytest.approx((4.0, 8.0))
        assert "THD" in result.step_results[-1].failure_reason

    def test_click_introduced_above_setting(self):
        """Test locating the parameter range where a processor clicks."""
        state = {'value': 0.0}

        def process(buffer):
            if state['value'] >= 0.75:
                return add_click(buffer, 22050, 0.3)
            return buffer

        config = ParameterSweepConfig(parameter_name='mix', min_value=0.0, max_value=1.0, num_steps=5)

        result = run_parameter_sweep(
            config, lambda v: state.update(value=v), _sine, process, SAMPLE_RATE
        )

        assert result.get_failing_ranges() == [(0.75, 1.0)]
        assert result.step_results[-1].failure_reason == "1 clicks detected"

    def test_clicks_ignored_when_check_disabled(self):
        """Test that clicks only fail a step when the click check is on."""

        def process(buffer):
            return add_click(buffer, 22050, 0.3)

        config = ParameterSweepConfig(num_steps=2, check_for_clicks=False)

        result = run_parameter_sweep(config, lambda v: None, _sine, process, SAMPLE_RATE)

        assert not result.has_failed()
        assert all(step.clicks_detected == 1 for step in result.step_results)

    def test_failing_callback_fails_only_its_step(self):
        """Test that a raising setter fails one step and the sweep continues."""

        def set_parameter(value):
            if value == 0.5:
                raise ValueError("unsupported value")

        config = ParameterSweepConfig(min_value=0.0, max_value=1.0, num_steps=3)

        result = run_parameter_sweep(config, set_parameter, _sine, lambda x: x, SAMPLE_RATE)

        assert [step.passed for step in result.step_results] == [True, False, True]
        assert result.step_results[1].failure_reason == \
            "Callback failed during set_parameter: ValueError: unsupported value"

    def test_non_numeric_output_fails_step(self):
        """Test that a processor returning garbage fails its step."""
        config = ParameterSweepConfig(num_steps=1)

        result = run_parameter_sweep(config, lambda v: None, _sine, lambda x: "garbage", SAMPLE_RATE)

        assert not result.step_results[0].passed
        assert result.step_results[0].failure_reason.startswith("Callback failed during process")

    def test_invalid_config_runs_nothing(self):
        """Test that an invalid config never calls the callbacks."""
        calls = []

        result = run_parameter_sweep(
            ParameterSweepConfig(num_steps=0),
            calls.append,
            _sine,
            lambda x: x,
            SAMPLE_RATE
        )

        assert calls == []
        assert result.step_results == []
        assert not result.has_failed()

    def test_click_threshold_is_applied(self):
        """Test that the sweep's click detector uses the configured threshold."""
        sweep = ParameterSweep(ParameterSweepConfig(click_threshold=8.0), SAMPLE_RATE)

        assert sweep.click_detector.config.detection_threshold == 8.0
        assert sweep.click_detector.config.sample_rate == SAMPLE_RATE

    @patch.dict(os.environ, {'SIGNAL_QUALITY_DEFAULT_SAMPLE_RATE': 'fast'})
    def test_malformed_environment_uses_fallback_rate(self):
        """Test that a bad sample rate variable falls back to 44.1 kHz."""
        processor = GainProcessor()
        sweep = ParameterSweep(ParameterSweepConfig(min_value=0.5, max_value=1.0, num_steps=3))

        result = sweep.run(processor.set_gain, _sine, processor.process)

        assert sweep.sample_rate == 44100.0
        assert len(result.step_results) == 3
        assert not result.has_failed()
