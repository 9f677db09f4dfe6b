"""PromptX context window management."""

from promptx.context import (
    ContextPreparationResult,
    ContextWindowManager,
    Message,
    Role,
    prepare_context_window,
)

__version__ = "0.1.0"

__all__ = [
    "ContextPreparationResult",
    "ContextWindowManager",
    "Message",
    "Role",
    "prepare_context_window",
]
