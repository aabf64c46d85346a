"""
Custom exception classes for the anytra prompt enhancement server.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorType(str, Enum):
    """Types of errors that can occur."""

    VALIDATION = "validation"
    THOUGHT_VALIDATION = "thought_validation"
    PROVIDER_ERROR = "provider_error"
    CONFIGURATION = "configuration"


class AnytraError(Exception):
    """Base exception for all anytra errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.VALIDATION,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}


class ConfigurationError(AnytraError):
    """Raised when configuration is invalid."""

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        super().__init__(
            f"Invalid configuration for '{setting}': {reason}",
            ErrorType.CONFIGURATION,
            {"setting": setting},
        )


# =============================================================================
# Provider errors
# =============================================================================


class ProviderError(AnytraError):
    """Raised when the completion backend cannot produce an enhancement."""

    prefix = "provider error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            f"{self.prefix}: {reason}",
            ErrorType.PROVIDER_ERROR,
            {"reason": reason},
        )


class NotConfiguredError(ProviderError):
    """Raised at construction when required credentials are absent."""

    prefix = "provider not configured"


class RequestFailedError(ProviderError):
    """Raised when the backend answers with a non-success status."""

    prefix = "request failed"


class UnexpectedResponseError(ProviderError):
    """Raised when a success response has an unusable body."""

    prefix = "unexpected response"


# =============================================================================
# Validation gate errors
# =============================================================================


class PromptValidationError(AnytraError):
    """Raised when an enhanced prompt fails the validation gate."""

    default_message = "Enhanced prompt is invalid"

    def __init__(self, message: Optional[str] = None, **details: Any):
        super().__init__(message or self.default_message, ErrorType.VALIDATION, details)


class EmptyPromptError(PromptValidationError):
    default_message = "Enhanced prompt is empty"


class TooShortError(PromptValidationError):
    default_message = "Enhanced prompt is too short"


class TooLongError(PromptValidationError):
    default_message = "Enhanced prompt is too long"


class TooSimpleError(PromptValidationError):
    default_message = "Enhanced prompt is too simple"


class InappropriateContentError(PromptValidationError):
    """Raised when the text contains a denylisted word."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Inappropriate content detected: {word}", word=word)


# =============================================================================
# Sequential thinking errors
# =============================================================================


class ThoughtValidationError(AnytraError):
    """Raised when a thought record is malformed."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid {field}: {reason}",
            ErrorType.THOUGHT_VALIDATION,
            {"field": field, "value": value, "reason": reason},
        )
