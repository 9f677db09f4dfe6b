#!/usr/bin/env python3
"""
PromptX Exceptions Package

Unified exception hierarchy for the context window manager.
"""

# Base exceptions
from .base import PromptXBaseError, wrap_exception

# Context exceptions
from .context import (
    ContextError,
    ContextValidationError,
)

# Config exceptions
from .config import (
    ConfigError,
    ConversationFileError,
    ModelConfigError,
)


__all__ = [
    # Base
    "PromptXBaseError",
    "wrap_exception",
    # Context
    "ContextError",
    "ContextValidationError",
    # Config
    "ConfigError",
    "ConversationFileError",
    "ModelConfigError",
]
