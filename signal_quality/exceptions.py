"""
Custom exceptions for signal quality verification.

This module defines the exception classes used inside the verification
engine. Public analysis entry points never let these escape: configuration
problems turn into empty results and callback failures turn into failure
reasons on the returned result objects.
"""


class SignalQualityError(Exception):
    """
    Base exception for signal quality verification errors.

    All verification-specific exceptions inherit from this base class,
    allowing for easy catching of all signal quality-related errors.
    """
    pass


class ConfigurationError(SignalQualityError):
    """
    Raised when configuration is invalid.

    This exception is raised when:
    - Environment settings cannot be parsed
    - Environment settings are out of their valid range

    Attributes:
        message: Error message describing the configuration issue
        validation_errors: List of validation error messages

    Examples:
        >>> raise ConfigurationError(
        ...     "Invalid settings",
        ...     validation_errors=["SIGNAL_QUALITY_LOG_LEVEL must be one of ..."]
        ... )
    """

    def __init__(self, message: str, validation_errors: list = None):
        """
        Initialize ConfigurationError.

        Args:
            message: Error message
            validation_errors: List of validation error messages (optional)
        """
        super().__init__(message)
        self.validation_errors = validation_errors or []

    def __str__(self):
        """Return string representation with validation errors if available."""
        if self.validation_errors:
            errors_str = "; ".join(self.validation_errors)
            return f"{super().__str__()}: {errors_str}"
        return super().__str__()


class AnalysisError(SignalQualityError):
    """
    Raised when a verification stage fails.

    This exception is raised when:
    - A signal generator callback fails
    - A processor-under-test callback fails
    - A parameter setter callback fails

    Attributes:
        message: Error message describing the failure
        analysis_type: Stage that failed (e.g., 'generate', 'process')
        original_error: Original exception that caused the failure (if any)

    Examples:
        >>> raise AnalysisError("callback raised", analysis_type='process')
        >>> try:
        ...     output = process(signal)
        ... except Exception as e:
        ...     raise AnalysisError(
        ...         "Processor failed",
        ...         analysis_type='process',
        ...         original_error=e
        ...     ) from e
    """

    def __init__(
        self,
        message: str,
        analysis_type: str = None,
        original_error: Exception = None
    ):
        """
        Initialize AnalysisError.

        Args:
            message: Error message
            analysis_type: Stage that failed (optional)
            original_error: Original exception that caused the failure (optional)
        """
        super().__init__(message)
        self.analysis_type = analysis_type
        self.original_error = original_error

    def __str__(self):
        """Return string representation with analysis type if available."""
        if self.analysis_type:
            return f"{self.analysis_type}: {super().__str__()}"
        return super().__str__()
