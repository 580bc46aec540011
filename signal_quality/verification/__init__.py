"""
Verification drivers.

Golden-reference comparison, A/B testing and parameter sweeps built on top
of the analyzers.
"""

from signal_quality.verification.golden_reference import ab_compare, compare_with_reference
from signal_quality.verification.parameter_sweep import (
    ParameterSweep,
    generate_parameter_values,
    run_parameter_sweep,
)

__all__ = [
    'ab_compare',
    'compare_with_reference',
    'ParameterSweep',
    'generate_parameter_values',
    'run_parameter_sweep',
]
