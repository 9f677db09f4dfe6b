#!/usr/bin/env python3
"""
Context Window Manager
======================
Decides what part of a conversation is sent to the model.

If the conversation fits within the model's budget it is sent as is.
Otherwise older messages are replaced by a local summary and the most
recent messages are kept verbatim, dropping the oldest of those as well
when the summary plus recent messages still do not fit.
"""

import logging
import math
from typing import List, Optional, Sequence

from promptx.config.models import ModelCatalog
from promptx.config.settings import ContextSettings
from promptx.context.message import (
    ContextPreparationResult,
    ContextStats,
    Message,
)
from promptx.context.summarizer import LocalSummarizer
from promptx.context.summary_cache import SummaryCache
from promptx.utils.token_estimation import MESSAGE_OVERHEAD, HeuristicTokenEstimator

NEAR_LIMIT_PERCENT = 70

SUMMARY_HEADER = "CONVERSATION SUMMARY (earlier messages condensed):"
SUMMARY_FOOTER = "The following are the most recent messages in this conversation:"


def build_summary_message(summary: str) -> Message:
    return Message.system(f"{SUMMARY_HEADER}\n{summary}\n\n{SUMMARY_FOOTER}")


class ContextWindowManager:
    """
    Prepares message lists that fit a model's context window.

    Holds no conversation state; the only state carried between calls is
    the summarizer's cache.
    """

    def __init__(
        self,
        settings: Optional[ContextSettings] = None,
        catalog: Optional[ModelCatalog] = None,
        estimator: Optional[HeuristicTokenEstimator] = None,
        summarizer: Optional[LocalSummarizer] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.settings = settings or ContextSettings()
        self.catalog = catalog or self.settings.build_catalog()
        self.estimator = estimator or HeuristicTokenEstimator()
        self.summarizer = summarizer or LocalSummarizer(
            cache=SummaryCache(
                capacity=self.settings.summary_cache_size,
                policy=self.settings.summary_cache_policy,
                key_strategy=self.settings.summary_cache_key,
            ),
            estimator=self.estimator,
            max_tokens=self.settings.summary_max_tokens,
        )

    def _max_tokens(self, model_id: str) -> int:
        context_limit = self.catalog.context_limit(model_id)
        return math.floor(context_limit * self.settings.max_context_ratio)

    def _message_tokens(self, message: Message) -> int:
        return self.estimator.estimate_tokens(message.content) + MESSAGE_OVERHEAD

    def prepare(
        self,
        system_prompt: Message,
        all_messages: Sequence[Message],
        model_id: Optional[str] = None,
    ) -> ContextPreparationResult:
        """
        Build the message list for one API call.

        Args:
            system_prompt: The system message, always sent first
            all_messages: The full conversation, oldest first
            model_id: Target model; defaults to settings.default_model

        Returns:
            ContextPreparationResult
        """
        model_id = self.settings.default_model if model_id is None else model_id
        all_messages = list(all_messages)
        max_tokens = self._max_tokens(model_id)

        system_tokens = self._message_tokens(system_prompt)
        all_messages_tokens = self.estimator.estimate_messages_tokens(all_messages)
        total_tokens = system_tokens + all_messages_tokens

        # 1. Everything fits, or the conversation is too short to summarize
        if (
            total_tokens <= max_tokens
            or len(all_messages) < self.settings.min_messages_for_summary
        ):
            if total_tokens > max_tokens:
                self.logger.warning(
                    "Conversation of %d messages exceeds budget (%d > %d) "
                    "but is below the summarization minimum; sending as is",
                    len(all_messages),
                    total_tokens,
                    max_tokens,
                )
            else:
                self.logger.debug(
                    f"Context fits: {total_tokens}/{max_tokens} tokens ({model_id})"
                )
            return ContextPreparationResult(
                messages=[system_prompt, *all_messages],
                token_count=total_tokens,
                was_truncated=False,
                summarized_count=0,
                kept_count=len(all_messages),
            )

        # 2. Summarize old messages, keep recent ones verbatim
        recent_count = min(self.settings.recent_messages_to_keep, len(all_messages))
        split_at = len(all_messages) - recent_count
        recent_messages = all_messages[split_at:]
        old_messages = all_messages[:split_at]

        summary = self.summarizer.summarize(old_messages)
        summary_message = build_summary_message(summary)

        prepared_messages = [system_prompt, summary_message, *recent_messages]
        prepared_tokens = self.estimator.estimate_messages_tokens(prepared_messages)

        # 3. Still over: drop the oldest of the recent messages
        if prepared_tokens > max_tokens:
            trimmed_recent = self._trim_to_fit(
                [system_prompt, summary_message], recent_messages, max_tokens
            )
            final_messages = [system_prompt, summary_message, *trimmed_recent]
            dropped = len(recent_messages) - len(trimmed_recent)
            self.logger.info(
                "Summarized %d messages and dropped %d recent ones to fit %d tokens",
                len(old_messages),
                dropped,
                max_tokens,
            )
            return ContextPreparationResult(
                messages=final_messages,
                token_count=self.estimator.estimate_messages_tokens(final_messages),
                was_truncated=True,
                summary=summary,
                summarized_count=len(old_messages) + dropped,
                kept_count=len(trimmed_recent),
            )

        self.logger.info(
            "Summarized %d messages, kept %d verbatim (%d/%d tokens)",
            len(old_messages),
            len(recent_messages),
            prepared_tokens,
            max_tokens,
        )
        return ContextPreparationResult(
            messages=prepared_messages,
            token_count=prepared_tokens,
            was_truncated=True,
            summary=summary,
            summarized_count=len(old_messages),
            kept_count=len(recent_messages),
        )

    async def prepare_context_window(
        self,
        system_prompt: Message,
        all_messages: Sequence[Message],
        model_id: Optional[str] = None,
    ) -> ContextPreparationResult:
        """Awaitable form of prepare(). Does not suspend."""
        return self.prepare(system_prompt, all_messages, model_id)

    def _trim_to_fit(
        self,
        prefix: List[Message],
        recent: List[Message],
        max_tokens: int,
    ) -> List[Message]:
        """
        Keep the newest messages that fit after the prefix.
        Stops at the first message that does not fit; messages are never split.
        """
        available_tokens = max_tokens - self.estimator.estimate_messages_tokens(prefix)

        kept: List[Message] = []
        for msg in reversed(recent):
            msg_tokens = self._message_tokens(msg)
            if available_tokens - msg_tokens < 0:
                break
            kept.append(msg)
            available_tokens -= msg_tokens

        kept.reverse()
        return kept

    def context_stats(
        self,
        system_prompt: Message,
        messages: Sequence[Message],
        model_id: Optional[str] = None,
    ) -> ContextStats:
        """Usage numbers for a context indicator."""
        model_id = self.settings.default_model if model_id is None else model_id
        context_limit = self.catalog.context_limit(model_id)
        total_tokens = self._message_tokens(
            system_prompt
        ) + self.estimator.estimate_messages_tokens(messages)
        usage_percent = min(100.0, (total_tokens / context_limit) * 100)

        return ContextStats(
            total_tokens=total_tokens,
            context_limit=context_limit,
            usage_percent=usage_percent,
            message_count=len(messages),
            is_near_limit=usage_percent >= NEAR_LIMIT_PERCENT,
            is_over_limit=total_tokens
            > context_limit * self.settings.max_context_ratio,
        )

    def clear_cache(self) -> None:
        self.summarizer.cache.clear()


_default_manager: Optional[ContextWindowManager] = None


def get_context_window_manager() -> ContextWindowManager:
    """Shared manager built from environment settings on first use."""
    global _default_manager
    if _default_manager is None:
        _default_manager = ContextWindowManager()
    return _default_manager


def reset_context_window_manager() -> None:
    global _default_manager
    _default_manager = None


async def prepare_context_window(
    system_prompt: Message,
    all_messages: Sequence[Message],
    model_id: str = "grok-3",
) -> ContextPreparationResult:
    """
    Prepare the context window for an API call using the shared manager.
    """
    return get_context_window_manager().prepare(system_prompt, all_messages, model_id)


def get_context_stats(
    system_prompt: Message,
    messages: Sequence[Message],
    model_id: str = "grok-3",
) -> ContextStats:
    return get_context_window_manager().context_stats(system_prompt, messages, model_id)
