"""
Parameter Sweep.

This module runs a parameterized processor across a value range and checks
every step for clicks and distortion. The failing ranges of the resulting
SweepResult show where in the parameter's range an algorithm misbehaves.
"""

import logging
import time
from typing import Callable, List, Optional

import numpy as np

from signal_quality.analyzers.click_detector import ClickDetector
from signal_quality.analyzers.signal_metrics import calculate_snr, calculate_thd
from signal_quality.config.settings import default_sample_rate
from signal_quality.exceptions import AnalysisError
from signal_quality.models.detector_config import ClickDetectorConfig
from signal_quality.models.results import StepResult, SweepResult
from signal_quality.models.verification_config import ParameterSweepConfig, StepType
from signal_quality.utils.graceful_degradation import (
    describe_failure,
    invoke_callback,
    invoke_signal_callback,
)
from signal_quality.utils.structured_logger import (
    log_analysis_operation,
    log_configuration_rejected,
    log_quality_issue,
)

logger = logging.getLogger(__name__)


def generate_parameter_values(config: ParameterSweepConfig) -> List[float]:
    """
    Generate the parameter values visited by a sweep.

    Linear: min + i * (max - min) / (n - 1)
    Logarithmic: min * (max / min) ** (i / (n - 1))

    Args:
        config: Sweep configuration

    Returns:
        num_steps values in ascending order, [min_value] for a single step,
        or an empty list for an invalid config
    """
    if not config.is_valid():
        return []

    if config.num_steps == 1:
        return [config.min_value]

    last = config.num_steps - 1
    if config.step_type == StepType.LOGARITHMIC:
        ratio = config.max_value / config.min_value
        return [config.min_value * ratio ** (i / last) for i in range(config.num_steps)]

    span = config.max_value - config.min_value
    return [config.min_value + i * span / last for i in range(config.num_steps)]


class ParameterSweep:
    """
    Drives a processor through a parameter range.

    The click detector is prepared once and reused for every step.

    Attributes:
        config: Sweep configuration
        sample_rate: Sample rate of the generated signals in Hz
    """

    def __init__(self, config: ParameterSweepConfig, sample_rate: Optional[float] = None):
        """
        Initialize parameter sweep.

        Args:
            config: Sweep configuration
            sample_rate: Sample rate in Hz. If None, uses the configured default.
        """
        self.config = config
        self.sample_rate = sample_rate if sample_rate is not None else default_sample_rate()
        self.click_detector = ClickDetector(ClickDetectorConfig(
            sample_rate=self.sample_rate,
            detection_threshold=config.click_threshold
        ))

    def run(
        self,
        set_parameter: Callable[[float], None],
        generate_signal: Callable[[], np.ndarray],
        process: Callable[[np.ndarray], np.ndarray]
    ) -> SweepResult:
        """
        Run every step of the sweep.

        Per step:
        1. set_parameter(value)
        2. Generate the input and process it
        3. Check clicks (check_for_clicks) and THD (check_thd)
        4. Record SNR of the output against the input

        A failing callback fails only its own step; the sweep continues.

        Args:
            set_parameter: Applies a parameter value to the processor
            generate_signal: Returns the input buffer for a step
            process: Processor under test

        Returns:
            SweepResult with one StepResult per value. No steps for an
            invalid config.
        """
        result = SweepResult(parameter_name=self.config.parameter_name)

        errors = self.config.validate()
        if errors:
            log_configuration_rejected('ParameterSweep', errors)
            return result

        start_time = time.perf_counter()
        for value in generate_parameter_values(self.config):
            result.step_results.append(
                self._run_step(value, set_parameter, generate_signal, process)
            )

        failed = result.get_failed_steps()
        if failed:
            log_quality_issue('sweep_failed', {
                'parameter': self.config.parameter_name,
                'failed_steps': len(failed),
                'failing_ranges': result.get_failing_ranges()
            })

        log_analysis_operation('run_parameter_sweep', (time.perf_counter() - start_time) * 1000)
        return result

    def _run_step(
        self,
        value: float,
        set_parameter: Callable[[float], None],
        generate_signal: Callable[[], np.ndarray],
        process: Callable[[np.ndarray], np.ndarray]
    ) -> StepResult:
        try:
            invoke_callback('set_parameter', set_parameter, value)
            source = invoke_signal_callback('generate', generate_signal)
            output = invoke_signal_callback('process', process, source.copy())
        except AnalysisError as e:
            return StepResult(
                parameter_value=value,
                passed=False,
                failure_reason=describe_failure(e)
            )

        reasons = []
        clicks = len(self.click_detector.detect(output))
        thd_percent = calculate_thd(output, self.config.fundamental_hz, self.sample_rate)
        snr_db = calculate_snr(output, source)

        if self.config.check_for_clicks and clicks > 0:
            reasons.append(f"{clicks} clicks detected")

        if self.config.check_thd and thd_percent > self.config.thd_threshold_percent:
            reasons.append(
                f"THD {thd_percent:.3f}% exceeds threshold "
                f"{self.config.thd_threshold_percent:.3f}%"
            )

        if reasons:
            logger.debug(f"{self.config.parameter_name}={value}: {'; '.join(reasons)}")

        return StepResult(
            parameter_value=value,
            passed=not reasons,
            clicks_detected=clicks,
            thd_percent=thd_percent,
            snr_db=snr_db,
            failure_reason='; '.join(reasons)
        )


def run_parameter_sweep(
    config: ParameterSweepConfig,
    set_parameter: Callable[[float], None],
    generate_signal: Callable[[], np.ndarray],
    process: Callable[[np.ndarray], np.ndarray],
    sample_rate: Optional[float] = None
) -> SweepResult:
    """
    Run a parameter sweep in one call.

    Args:
        config: Sweep configuration
        set_parameter: Applies a parameter value to the processor
        generate_signal: Returns the input buffer for a step
        process: Processor under test
        sample_rate: Sample rate in Hz. If None, uses the configured default.

    Returns:
        SweepResult with one StepResult per parameter value
    """
    return ParameterSweep(config, sample_rate).run(set_parameter, generate_signal, process)
