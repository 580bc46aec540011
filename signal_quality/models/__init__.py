"""
Signal quality data models.

This module contains dataclasses for detector and verification
configuration and for the results they produce.
"""

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

__all__ = [
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
]
