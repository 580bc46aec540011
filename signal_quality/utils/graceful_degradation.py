"""
Graceful degradation utilities for signal quality verification.

Verification drivers call user-supplied generators, processors and setters.
Those callbacks may fail; this module converts such failures into
``AnalysisError`` so the drivers can record them as failed checks instead of
aborting the surrounding test run.
"""

import logging
from typing import Any, Callable

import numpy as np

from signal_quality.exceptions import AnalysisError
from signal_quality.utils.numeric import as_signal

logger = logging.getLogger(__name__)


def invoke_callback(stage: str, callback: Callable[..., Any], *args: Any) -> Any:
    """
    Runs a user callback, wrapping any failure in AnalysisError.

    Args:
        stage: Name of the verification stage (generate, process, set_parameter)
        callback: User-supplied callable
        *args: Arguments forwarded to the callable

    Returns:
        Whatever the callback returns

    Raises:
        AnalysisError: If the callback raises. The original exception is
            chained and kept on ``original_error``.
    """
    try:
        return callback(*args)
    except Exception as e:
        raise AnalysisError(
            f"{type(e).__name__}: {e}",
            analysis_type=stage,
            original_error=e
        ) from e


def invoke_signal_callback(stage: str, callback: Callable[..., Any], *args: Any) -> np.ndarray:
    """
    Runs a callback that must return a buffer and coerces the result.

    Raises:
        AnalysisError: If the callback raises or returns something that is
            not convertible to a 1-D float buffer.
    """
    result = invoke_callback(stage, callback, *args)
    try:
        return as_signal(result)
    except (TypeError, ValueError) as e:
        raise AnalysisError(
            f"returned a non-numeric buffer ({type(result).__name__})",
            analysis_type=stage,
            original_error=e
        ) from e


def describe_failure(error: AnalysisError) -> str:
    """
    Logs a callback failure and returns the reason string recorded on results.

    Args:
        error: The wrapped callback failure

    Returns:
        Human-readable failure reason
    """
    logger.error(f"Verification callback failed: {error}", exc_info=error)
    return f"Callback failed during {error}"
