#!/usr/bin/env python3
"""
Base Exception Contract for PromptX

Every error PromptX raises on purpose derives from PromptXBaseError, so
entry points can catch one type and show ``message`` plus ``user_hint``.
"""

from typing import Any, Dict, Optional


class PromptXBaseError(Exception):
    """
    Base error carrying a user-facing hint and optional structured details.
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        user_hint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.user_hint = user_hint or "An internal error occurred."
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable form for JSON output."""
        payload: Dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
            "hint": self.user_hint,
        }
        if self.original_error is not None:
            payload["cause"] = repr(self.original_error)
        if self.details:
            payload["details"] = self.details
        return payload


def wrap_exception(exception_class, user_hint=None):
    """
    Re-raise anything the wrapped function throws as ``exception_class``.
    PromptX errors pass through untouched.
    """

    def decorator(func):
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PromptXBaseError:
                raise
            except Exception as e:
                raise exception_class(
                    message=str(e), original_error=e, user_hint=user_hint
                ) from e

        return wrapper

    return decorator
