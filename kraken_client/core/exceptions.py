"""
Custom Exceptions Module

Defines all custom exceptions raised by the Kraken client.
All exceptions inherit from KrakenClientError base class.
"""

from typing import Optional, Dict, Any, List


class KrakenClientError(Exception):
    """
    Base exception for all Kraken client errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional context information
            original_exception: Original exception if wrapping another error
        """
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception

        full_message = message
        if details:
            details_str = ", ".join(f"{k}={v}" for k, v in details.items())
            full_message = f"{message} ({details_str})"

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(KrakenClientError):
    """Client configuration is invalid or missing"""
    pass


class AuthenticationError(ConfigurationError):
    """API key or secret is missing or unusable for signing"""
    pass


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(KrakenClientError):
    """Caller-supplied endpoint parameters failed validation"""
    pass


# ============================================================================
# Transport Errors
# ============================================================================

class TransportError(KrakenClientError):
    """The request never produced a parseable response"""
    pass


class RequestTimeoutError(TransportError):
    """The request deadline expired"""
    pass


class ResponseParseError(TransportError):
    """The response body is not a JSON object"""
    pass


# ============================================================================
# Exchange Errors
# ============================================================================

class APIError(KrakenClientError):
    """
    The exchange rejected the request.

    Raised for envelopes whose ``error`` array is non-empty, even when
    the HTTP exchange itself succeeded.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.errors = list(errors or [])
        super().__init__(message, details=details, original_exception=original_exception)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


# ============================================================================
# Utility Functions
# ============================================================================

def wrap_exception(
    original_exception: Exception,
    custom_exception_class: type,
    message: Optional[str] = None,
    **details
) -> KrakenClientError:
    """
    Wrap an exception in a custom exception class.

    Args:
        original_exception: The original exception
        custom_exception_class: The custom exception class to wrap with
        message: Optional custom message
        **details: Additional details

    Returns:
        Custom exception instance

    Example:
        try:
            await session.request(...)
        except aiohttp.ClientError as e:
            raise wrap_exception(
                e,
                TransportError,
                "Connection failed",
                path="/0/public/Time",
            )
    """
    error_message = message or str(original_exception)

    return custom_exception_class(
        message=error_message,
        details=details,
        original_exception=original_exception
    )


def handle_exception(
    exception: Exception,
    logger,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an exception together with its details and context.

    Args:
        exception: The exception to handle
        logger: Logger instance
        context: Additional context information
    """
    context = context or {}

    if isinstance(exception, KrakenClientError):
        logger.error(
            f"{exception.__class__.__name__}: {exception.message}",
            extra={
                "exception_details": exception.details,
                "context": context
            },
            exc_info=exception.original_exception
        )
    else:
        logger.error(
            f"Unexpected error: {str(exception)}",
            extra={"context": context},
            exc_info=exception
        )
