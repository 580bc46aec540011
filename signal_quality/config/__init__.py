"""
Configuration module for signal quality verification.

Provides environment variable loading for process-wide settings.
"""

from .settings import (
    Settings,
    default_sample_rate,
    get_settings,
    reset_settings,
    structured_logs_enabled,
)

__all__ = [
    'Settings',
    'default_sample_rate',
    'get_settings',
    'reset_settings',
    'structured_logs_enabled',
]
