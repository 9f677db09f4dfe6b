#!/usr/bin/env python3
"""
Token Estimation for PromptX
============================
Word-based token estimator with no tokenizer dependency.

English text averages ~1.3 tokens per word for GPT-style tokenizers, which
keeps the estimate within roughly 10% of a real count. Estimates are for
sizing decisions only.
"""

import math
import re
from typing import Optional, Sequence

from promptx.config.models import ModelCatalog, default_catalog

TOKENS_PER_WORD = 1.33
MESSAGE_OVERHEAD = 4  # role label, formatting, separators
REQUEST_PRIMING_TOKENS = 3
CODE_BLOCK_TOKENS = 3
URL_TOKENS = 5
NUMBER_TOKEN_RATIO = 0.3

_CODE_FENCE_PATTERN = re.compile(r"```")
_URL_PATTERN = re.compile(r"https?://\S+")
_NUMBER_PATTERN = re.compile(r"\d+", re.ASCII)


class HeuristicTokenEstimator:
    """
    Estimates token counts from word counts plus small surcharges for
    code fences, URLs and digit runs.

    Any object exposing ``estimate_tokens`` and ``estimate_messages_tokens``
    can stand in for this one (e.g. a wrapper around a real BPE tokenizer).
    """

    def __init__(self, tokens_per_word: float = TOKENS_PER_WORD):
        self.tokens_per_word = tokens_per_word

    def estimate_tokens(self, text: str) -> int:
        """
        Estimate the number of tokens in a text string.

        Args:
            text: Input text, may be empty

        Returns:
            0 for empty text, otherwise at least 1
        """
        if not text:
            return 0

        words = text.split()
        token_count = math.ceil(len(words) * self.tokens_per_word)

        # Only complete ``` pairs count
        fence_count = len(_CODE_FENCE_PATTERN.findall(text))
        token_count += (fence_count // 2) * CODE_BLOCK_TOKENS

        # URLs get split into many pieces by real tokenizers
        token_count += len(_URL_PATTERN.findall(text)) * URL_TOKENS

        number_count = len(_NUMBER_PATTERN.findall(text))
        token_count += math.ceil(number_count * NUMBER_TOKEN_RATIO)

        return max(1, token_count)

    def estimate_messages_tokens(self, messages: Sequence) -> int:
        """
        Estimate total tokens for a list of messages, including per-message
        overhead and the request priming constant.
        """
        total = 0
        for msg in messages:
            total += self.estimate_tokens(msg.content) + MESSAGE_OVERHEAD

        total += REQUEST_PRIMING_TOKENS
        return total


_default_estimator = HeuristicTokenEstimator()


def estimate_tokens(text: str) -> int:
    """Estimate tokens for a single string with the default estimator."""
    return _default_estimator.estimate_tokens(text)


def estimate_messages_tokens(messages: Sequence) -> int:
    """Estimate tokens for a message list with the default estimator."""
    return _default_estimator.estimate_messages_tokens(messages)


def get_model_context_limit(model_id: str) -> int:
    """Get the context limit for a given model from the compiled-in catalog."""
    return default_catalog().context_limit(model_id)


# --- Display helpers ---


def format_token_count(tokens: int) -> str:
    """Format a token count for display (e.g. "3.2K", "1.0M")."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1000:
        return f"{tokens / 1000:.1f}K"
    return f"{tokens}"


def get_context_usage_percent(
    tokens: int, model_id: str, catalog: Optional[ModelCatalog] = None
) -> float:
    """Percentage of the model's context window used, capped at 100."""
    limit = (catalog or default_catalog()).context_limit(model_id)
    return min(100.0, (tokens / limit) * 100)


def get_context_status_color(percent: float) -> str:
    """Traffic-light color for a usage percentage."""
    if percent >= 85:
        return "red"
    if percent >= 70:
        return "yellow"
    return "green"
