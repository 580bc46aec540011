"""
Structured logging utilities for signal quality verification.

Provides JSON-formatted log entries so verification runs inside CI can be
filtered and aggregated by event type.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from signal_quality.config.settings import Settings, get_settings, structured_logs_enabled


logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'signal_quality'


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _convert_to_json_serializable(obj: Any) -> Any:
    """
    Converts numpy types to Python native types for JSON serialization.

    Args:
        obj: Object to convert

    Returns:
        JSON-serializable version of the object
    """
    import numpy as np

    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, np.ndarray):
        return [_convert_to_json_serializable(item) for item in obj.tolist()]
    elif isinstance(obj, dict):
        return {k: _convert_to_json_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_convert_to_json_serializable(item) for item in obj]
    else:
        return obj


def _render(log_entry: Dict[str, Any]) -> str:
    """Render an entry as JSON, or as ``event key=value ...`` when structured logs are off."""
    entry = _convert_to_json_serializable(log_entry)
    if structured_logs_enabled():
        return json.dumps(entry)
    fields = ' '.join(
        f"{key}={value}" for key, value in entry.items()
        if key not in ('event', 'timestamp')
    )
    return f"{entry['event']} {fields}".rstrip()


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the package logger from settings.

    Installs a single stdout handler on the ``signal_quality`` logger and
    sets its level. Calling it again replaces the previous handler.

    Args:
        settings: Settings to apply. Uses the global settings if None.

    Returns:
        The configured package logger
    """
    settings = settings or get_settings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(settings.log_level.upper())

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if settings.structured_logs:
        handler.setFormatter(logging.Formatter('%(message)s'))
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    package_logger.addHandler(handler)
    return package_logger


def log_detection_summary(
    detector: str,
    detections: int,
    samples: int,
    duration_ms: float
) -> None:
    """
    Logs the outcome of a detector pass.

    Args:
        detector: Detector name (click, lpc, spectral_anomaly)
        detections: Number of detections reported
        samples: Number of samples analyzed
        duration_ms: Detection duration in milliseconds
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    log_entry = {
        'event': 'detection_summary',
        'timestamp': _timestamp(),
        'detector': detector,
        'detections': detections,
        'samples': samples,
        'duration_ms': round(duration_ms, 3)
    }

    logger.debug(_render(log_entry))


def log_configuration_rejected(component: str, errors: List[str]) -> None:
    """
    Logs a configuration that failed validation.

    The component keeps running as a no-op, so this warning is the only
    trace of the misconfiguration.

    Args:
        component: Component that received the config
        errors: Validation error messages
    """
    log_entry = {
        'event': 'configuration_rejected',
        'timestamp': _timestamp(),
        'component': component,
        'errors': list(errors)
    }

    logger.warning(_render(log_entry))


def log_quality_issue(
    issue_type: str,
    details: Dict[str, Any],
    severity: str = 'warning'
) -> None:
    """
    Logs a verification failure in structured format.

    Args:
        issue_type: Type of issue (golden_mismatch, sweep_step_failed, ...)
        details: Issue-specific details
        severity: Issue severity (warning, error)
    """
    log_entry = {
        'event': 'quality_issue',
        'timestamp': _timestamp(),
        'issueType': issue_type,
        'severity': severity,
        'details': details
    }

    log_message = _render(log_entry)

    if severity == 'error':
        logger.error(log_message)
    else:
        logger.warning(log_message)


def log_analysis_operation(
    operation: str,
    duration_ms: float,
    success: bool = True,
    error: Optional[str] = None
) -> None:
    """
    Logs a verification operation.

    Args:
        operation: Operation name (compare_with_reference, ab_compare, run_parameter_sweep, ...)
        duration_ms: Operation duration in milliseconds
        success: Whether the operation completed without callback failures
        error: Error message if the operation failed
    """
    level = logging.DEBUG if success else logging.ERROR
    if not logger.isEnabledFor(level):
        return

    log_entry = {
        'event': 'analysis_operation',
        'timestamp': _timestamp(),
        'operation': operation,
        'duration_ms': round(duration_ms, 2),
        'success': success
    }

    if error:
        log_entry['error'] = error

    logger.log(level, _render(log_entry))
