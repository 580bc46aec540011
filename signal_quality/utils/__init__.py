"""
Signal quality utilities package.

This package provides numeric guards, statistics, the spectral transform,
test-signal generators, structured logging and callback error handling.
"""

from signal_quality.utils.graceful_degradation import (
    describe_failure,
    invoke_callback,
    invoke_signal_callback,
)
from signal_quality.utils.signal_generators import (
    add_click,
    generate_impulse,
    generate_silence,
    generate_sine,
    generate_white_noise,
)
from signal_quality.utils.statistics import (
    compute_mad,
    compute_mean,
    compute_median,
    compute_moment,
    compute_std_dev,
    compute_variance,
)
from signal_quality.utils.structured_logger import (
    configure_logging,
    log_analysis_operation,
    log_configuration_rejected,
    log_detection_summary,
    log_quality_issue,
)
from signal_quality.utils.transform import SpectralTransform

__all__ = [
    'describe_failure',
    'invoke_callback',
    'invoke_signal_callback',
    'add_click',
    'generate_impulse',
    'generate_silence',
    'generate_sine',
    'generate_white_noise',
    'compute_mad',
    'compute_mean',
    'compute_median',
    'compute_moment',
    'compute_std_dev',
    'compute_variance',
    'configure_logging',
    'log_analysis_operation',
    'log_configuration_rejected',
    'log_detection_summary',
    'log_quality_issue',
    'SpectralTransform',
]
