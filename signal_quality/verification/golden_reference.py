"""
Golden Reference comparison.

This module checks a processed signal against a known-good reference and
compares two processing paths on the same input (A/B testing). Results carry
measured values and thresholds so a failing assertion explains itself.
"""

import time
from typing import Callable, Optional

import numpy as np

from signal_quality.analyzers.click_detector import ClickDetector
from signal_quality.analyzers.signal_metrics import (
    calculate_crest_factor_db,
    calculate_snr,
    calculate_thd,
)
from signal_quality.config.settings import default_sample_rate
from signal_quality.exceptions import AnalysisError
from signal_quality.models.detector_config import ClickDetectorConfig
from signal_quality.models.results import ABTestResult, GoldenComparisonResult
from signal_quality.models.verification_config import GoldenReferenceConfig
from signal_quality.utils.graceful_degradation import describe_failure, invoke_signal_callback
from signal_quality.utils.numeric import SNR_CEILING_DB, as_signal
from signal_quality.utils.structured_logger import (
    log_analysis_operation,
    log_configuration_rejected,
    log_quality_issue,
)


# Only new artifacts count, so the difference signal gets a low energy floor
DIFFERENCE_ENERGY_FLOOR_DB = -80.0


def _difference_click_config(sample_rate: float) -> ClickDetectorConfig:
    return ClickDetectorConfig(
        sample_rate=sample_rate,
        frame_size=512,
        hop_size=256,
        detection_threshold=5.0,
        energy_threshold_db=DIFFERENCE_ENERGY_FLOOR_DB,
        merge_gap=5
    )


def compare_with_reference(
    signal: np.ndarray,
    reference: np.ndarray,
    config: Optional[GoldenReferenceConfig] = None
) -> GoldenComparisonResult:
    """
    Compare a signal with its golden reference.

    Checks, each adding a failure reason when violated:
    - SNR against the reference below snr_threshold_db
    - More clicks in (signal - reference) than max_click_count
    - Largest click amplitude above max_click_amplitude
    - THD at fundamental_hz above thd_threshold_percent
    - Crest factor above max_crest_factor_db

    Args:
        signal: Signal under test
        reference: Known-good output for the same input
        config: Thresholds. If None, uses defaults.

    Returns:
        GoldenComparisonResult; passed is True only when no check failed.
        An invalid config yields passed=False, zeroed metrics and the
        validation errors as failure reasons.
    """
    config = config if config is not None else GoldenReferenceConfig()
    start_time = time.perf_counter()

    errors = config.validate()
    if errors:
        log_configuration_rejected('compare_with_reference', errors)
        return GoldenComparisonResult(
            passed=False,
            snr_db=0.0,
            thd_percent=0.0,
            crest_factor_db=0.0,
            clicks_detected=0,
            max_click_amplitude=0.0,
            failure_reasons=[f"Invalid configuration: {error}" for error in errors]
        )

    signal = as_signal(signal)
    reference = as_signal(reference)
    failure_reasons = []

    length = min(len(signal), len(reference))
    if len(signal) != len(reference):
        failure_reasons.append(
            f"Length mismatch: signal has {len(signal)} samples, "
            f"reference has {len(reference)}"
        )
    signal = signal[:length]
    reference = reference[:length]

    snr_db = calculate_snr(signal, reference)
    thd_percent = calculate_thd(signal, config.fundamental_hz, config.sample_rate)
    crest_factor_db = calculate_crest_factor_db(signal)

    detector = ClickDetector(_difference_click_config(config.sample_rate))
    clicks = detector.detect(signal - reference)
    max_click_amplitude = max((abs(click.amplitude) for click in clicks), default=0.0)

    if snr_db < config.snr_threshold_db:
        failure_reasons.append(
            f"SNR {snr_db:.2f} dB below threshold {config.snr_threshold_db:.2f} dB"
        )

    if len(clicks) > config.max_click_count:
        failure_reasons.append(
            f"{len(clicks)} clicks detected (max {config.max_click_count})"
        )

    if max_click_amplitude > config.max_click_amplitude:
        failure_reasons.append(
            f"Click amplitude {max_click_amplitude:.4f} exceeds "
            f"max {config.max_click_amplitude:.4f}"
        )

    if thd_percent > config.thd_threshold_percent:
        failure_reasons.append(
            f"THD {thd_percent:.3f}% exceeds threshold {config.thd_threshold_percent:.3f}%"
        )

    if crest_factor_db > config.max_crest_factor_db:
        failure_reasons.append(
            f"Crest factor {crest_factor_db:.2f} dB exceeds "
            f"max {config.max_crest_factor_db:.2f} dB"
        )

    result = GoldenComparisonResult(
        passed=not failure_reasons,
        snr_db=snr_db,
        thd_percent=thd_percent,
        crest_factor_db=crest_factor_db,
        clicks_detected=len(clicks),
        max_click_amplitude=max_click_amplitude,
        failure_reasons=failure_reasons
    )

    if not result.passed:
        log_quality_issue('golden_mismatch', {'reasons': failure_reasons})

    log_analysis_operation('compare_with_reference', (time.perf_counter() - start_time) * 1000)
    return result


def ab_compare(
    generate_signal: Callable[[], np.ndarray],
    process_a: Callable[[np.ndarray], np.ndarray],
    process_b: Callable[[np.ndarray], np.ndarray],
    sample_rate: Optional[float] = None,
    fundamental_hz: float = 1000.0
) -> ABTestResult:
    """
    Run one input through two processing paths and report their differences.

    Each path receives its own copy of the generated input. SNR is measured
    against that input, THD at fundamental_hz, clicks with a default
    ClickDetector. Differences are A minus B.

    Args:
        generate_signal: Returns the input buffer
        process_a: Baseline processing path
        process_b: Candidate processing path
        sample_rate: Sample rate in Hz. If None, uses the configured default.
        fundamental_hz: Fundamental for the THD measurement

    Returns:
        ABTestResult. When a callback fails, the failing side is measured
        as SNR -200 dB with no THD or clicks, failure_reason is set and
        equivalent() returns False.
    """
    if sample_rate is None:
        sample_rate = default_sample_rate()
    start_time = time.perf_counter()

    failures = []
    try:
        source = invoke_signal_callback('generate', generate_signal)
    except AnalysisError as e:
        failures.append(describe_failure(e))
        source = None

    detector = ClickDetector(ClickDetectorConfig(sample_rate=sample_rate))
    measurements = []

    for stage, process in (('process_a', process_a), ('process_b', process_b)):
        if source is None:
            measurements.append((-SNR_CEILING_DB, 0.0, 0))
            continue

        try:
            output = invoke_signal_callback(stage, process, source.copy())
        except AnalysisError as e:
            failures.append(describe_failure(e))
            measurements.append((-SNR_CEILING_DB, 0.0, 0))
            continue

        snr = calculate_snr(output, source)
        thd = calculate_thd(output, fundamental_hz, sample_rate)
        clicks = len(detector.detect(output))
        measurements.append((snr, thd, clicks))

    (snr_a, thd_a, clicks_a), (snr_b, thd_b, clicks_b) = measurements
    failure_reason = '; '.join(failures)

    log_analysis_operation(
        'ab_compare',
        (time.perf_counter() - start_time) * 1000,
        success=not failures,
        error=failure_reason or None
    )

    return ABTestResult(
        snr_difference_db=snr_a - snr_b,
        thd_difference_percent=thd_a - thd_b,
        click_count_difference=clicks_a - clicks_b,
        click_count_a=clicks_a,
        click_count_b=clicks_b,
        snr_a=snr_a,
        snr_b=snr_b,
        failure_reason=failure_reason
    )
