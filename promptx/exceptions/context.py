"""
Context Exception Definitions for PromptX

All context-related exceptions inherit from PromptXBaseError.
"""

from typing import Any

from promptx.exceptions.base import PromptXBaseError


class ContextError(PromptXBaseError):
    """Base exception for context management errors."""

    pass


class ContextValidationError(ContextError):
    """Raised when context validation fails."""

    def __init__(
        self,
        message: str,
        validation_type: str = None,
        invalid_value: Any = None,
        original_error: Exception = None,
        user_hint: str = None,
    ):
        super().__init__(message, original_error=original_error, user_hint=user_hint)
        self.validation_type = validation_type
        self.invalid_value = invalid_value

