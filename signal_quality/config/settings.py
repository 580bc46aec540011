"""
Configuration settings for signal quality verification.

Loads configuration from environment variables with sensible defaults.
"""

import logging
import os
from typing import List, Optional

from signal_quality.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Used when the environment settings cannot be loaded
FALLBACK_SAMPLE_RATE = 44100.0


class Settings:
    """
    Process-wide settings for the verification engine.

    All settings are loaded from environment variables with defaults.
    Per-analysis tuning lives in the config dataclasses, not here.
    """

    def __init__(self):
        """Initialize settings from environment variables."""
        # Logging Configuration
        self.log_level: str = os.getenv('SIGNAL_QUALITY_LOG_LEVEL', 'WARNING')
        self.structured_logs: bool = self._parse_bool(
            os.getenv('SIGNAL_QUALITY_STRUCTURED_LOGS', 'true')
        )

        # Analysis Defaults
        self.default_sample_rate: float = self._parse_float(
            'SIGNAL_QUALITY_DEFAULT_SAMPLE_RATE',
            os.getenv('SIGNAL_QUALITY_DEFAULT_SAMPLE_RATE', '44100')
        )

        # Validate configuration
        self._validate()

    def _parse_bool(self, value: str) -> bool:
        """
        Parse boolean value from string.

        Args:
            value: String value to parse

        Returns:
            Boolean value
        """
        return value.lower() in ('true', '1', 'yes', 'on')

    def _parse_float(self, name: str, value: str) -> float:
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {name}",
                validation_errors=[f"{name} must be numeric, got {value!r}"]
            ) from e

    def _validate(self):
        """Validate configuration values."""
        errors: List[str] = []

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level.upper() not in valid_log_levels:
            errors.append(
                f"Invalid SIGNAL_QUALITY_LOG_LEVEL: {self.log_level}. "
                f"Must be one of {sorted(valid_log_levels)}"
            )

        if not (22050.0 <= self.default_sample_rate <= 192000.0):
            errors.append(
                "SIGNAL_QUALITY_DEFAULT_SAMPLE_RATE must be between 22050 and 192000, "
                f"got {self.default_sample_rate}"
            )

        if errors:
            raise ConfigurationError("Invalid signal quality settings", validation_errors=errors)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


def structured_logs_enabled() -> bool:
    """
    Whether log lines are rendered as JSON.

    Falls back to JSON when the environment settings are malformed, so a
    bad variable never turns a log call into an exception.
    """
    try:
        return get_settings().structured_logs
    except ConfigurationError:
        return True


def default_sample_rate() -> float:
    """
    Configured default sample rate for the verification drivers.

    Returns:
        SIGNAL_QUALITY_DEFAULT_SAMPLE_RATE, or 44100 Hz when the environment
        settings are malformed
    """
    try:
        return get_settings().default_sample_rate
    except ConfigurationError as e:
        logger.warning(f"Ignoring invalid settings, using {FALLBACK_SAMPLE_RATE} Hz: {e}")
        return FALLBACK_SAMPLE_RATE
