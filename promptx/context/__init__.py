from .message import (
    ContextPreparationResult,
    ContextStats,
    Message,
    Role,
    coerce_messages,
)
from .summary_cache import SummaryCache
from .summarizer import LocalSummarizer, generate_local_summary
from .window import (
    ContextWindowManager,
    get_context_stats,
    get_context_window_manager,
    prepare_context_window,
    reset_context_window_manager,
)

__all__ = [
    "ContextPreparationResult",
    "ContextStats",
    "ContextWindowManager",
    "LocalSummarizer",
    "Message",
    "Role",
    "SummaryCache",
    "coerce_messages",
    "generate_local_summary",
    "get_context_stats",
    "get_context_window_manager",
    "prepare_context_window",
    "reset_context_window_manager",
]
