"""
Error handling for the delivery analytics engine
Provides custom exceptions and a centralized converter for host layers
"""

import traceback
from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(Enum):
    """Error codes for different types of errors"""
    VALIDATION_ERROR = "VAL_001"
    CONFIGURATION_ERROR = "CONFIG_001"
    NOT_FOUND_ERROR = "DATA_001"
    UNKNOWN_ERROR = "UNKNOWN_001"


class AnalyticsError(Exception):
    """Base exception for the analytics engine"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary"""
        return {
            'error_code': self.error_code.value,
            'message': self.message,
            'details': self.details
        }


class ValidationError(AnalyticsError):
    """Malformed or out-of-range input, raised before any computation runs"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        details = dict(details or {})
        if field is not None:
            details.setdefault('field', field)
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class ConfigurationError(AnalyticsError):
    """Configuration related errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class NotFoundError(AnalyticsError):
    """A requested record is missing from the repository"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.NOT_FOUND_ERROR, details)


def error_handler(error: Exception) -> Dict[str, Any]:
    """
    Centralized error handler that converts exceptions to standardized format

    Args:
        error: Exception to handle

    Returns:
        Dictionary with error information
    """
    if isinstance(error, AnalyticsError):
        return {
            'error': True,
            'error_code': error.error_code.value,
            'message': error.message,
            'details': error.details,
            'type': error.__class__.__name__
        }
    else:
        return {
            'error': True,
            'error_code': ErrorCode.UNKNOWN_ERROR.value,
            'message': str(error),
            'details': {
                'traceback': traceback.format_exc()
            },
            'type': error.__class__.__name__
        }
