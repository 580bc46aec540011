"""
Signal Quality Verification Package.

This package provides offline verification of DSP output, including click
detection, LPC residual analysis, spectral anomaly detection, distortion and
aliasing metrics, golden-reference comparison and parameter sweeps.
"""

__version__ = '1.0.0'

# Import main classes for convenient access
from signal_quality.exceptions import AnalysisError, ConfigurationError, SignalQualityError
from signal_quality.models.detector_config import (
    ClickDetectorConfig,
    LPCDetectorConfig,
    SpectralAnomalyConfig,
)
from signal_quality.models.verification_config import (
    AliasingTestConfig,
    GoldenReferenceConfig,
    ParameterSweepConfig,
    StepType,
)
from signal_quality.models.results import (
    ABTestResult,
    AliasingComparison,
    AliasingMeasurement,
    ClickDetection,
    GoldenComparisonResult,
    SignalQualityMetrics,
    SpectralAnomalyDetection,
    StepResult,
    SweepResult,
)
from signal_quality.analyzers.click_detector import ClickDetector
from signal_quality.analyzers.lpc_detector import LPCDetector
from signal_quality.analyzers.spectral_anomaly_detector import SpectralAnomalyDetector
from signal_quality.analyzers.signal_metrics import measure_quality
from signal_quality.analyzers.aliasing_analyzer import compare_aliasing, measure_aliasing
from signal_quality.verification.golden_reference import ab_compare, compare_with_reference
from signal_quality.verification.parameter_sweep import (
    ParameterSweep,
    generate_parameter_values,
    run_parameter_sweep,
)
from signal_quality.utils.transform import SpectralTransform

__all__ = [
    'AnalysisError',
    'ConfigurationError',
    'SignalQualityError',
    'ClickDetectorConfig',
    'LPCDetectorConfig',
    'SpectralAnomalyConfig',
    'AliasingTestConfig',
    'GoldenReferenceConfig',
    'ParameterSweepConfig',
    'StepType',
    'ABTestResult',
    'AliasingComparison',
    'AliasingMeasurement',
    'ClickDetection',
    'GoldenComparisonResult',
    'SignalQualityMetrics',
    'SpectralAnomalyDetection',
    'StepResult',
    'SweepResult',
    'ClickDetector',
    'LPCDetector',
    'SpectralAnomalyDetector',
    'measure_quality',
    'compare_aliasing',
    'measure_aliasing',
    'ab_compare',
    'compare_with_reference',
    'ParameterSweep',
    'generate_parameter_values',
    'run_parameter_sweep',
    'SpectralTransform',
]
