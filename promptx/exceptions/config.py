#!/usr/bin/env python3
"""
Configuration Exception Definitions for PromptX

All configuration-related exceptions inherit from PromptXBaseError.
"""

from promptx.exceptions.base import PromptXBaseError


class ConfigError(PromptXBaseError):
    """Raised when settings validation fails."""

    def __init__(self, message, field_name=None, invalid_value=None, user_hint=None):
        super().__init__(
            message, user_hint=user_hint or "Check your PROMPTX_* settings."
        )
        self.field_name = field_name
        self.invalid_value = invalid_value


class ModelConfigError(PromptXBaseError):
    """Raised when the model catalog cannot be loaded or extended."""

    def __init__(self, message, config_file=None, original_error=None):
        super().__init__(
            message,
            original_error=original_error,
            user_hint="Check the model map file and its context_window values.",
        )
        self.config_file = config_file


class ConversationFileError(PromptXBaseError):
    """Raised when a conversation file cannot be read or parsed."""

    def __init__(self, message, file_path=None, original_error=None, user_hint=None):
        super().__init__(
            message,
            original_error=original_error,
            user_hint=user_hint or "Expected a JSON list of {role, content} objects.",
        )
        self.file_path = file_path
