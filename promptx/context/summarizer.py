#!/usr/bin/env python3
"""
Local Summarizer
================
Builds a short digest of older conversation messages without calling a
model: the user's initial request, the topics raised, and the first
substantive sentence of each assistant reply.
"""

import logging
import math
import re
from typing import List, Optional, Sequence

from promptx.context.message import Message, Role
from promptx.context.summary_cache import SummaryCache
from promptx.utils.token_estimation import TOKENS_PER_WORD, HeuristicTokenEstimator

SUMMARY_MAX_TOKENS = 600

GOAL_MIN_CHARS = 20
GOAL_MAX_CHARS = 200
TOPIC_SENTENCE_MAX_CHARS = 100
TOPIC_LINE_MAX_CHARS = 80
KEY_POINT_MIN_CHARS = 15
KEY_POINT_MAX_CHARS = 120
MAX_TOPICS = 8
MAX_KEY_POINTS = 6

_FIRST_SENTENCE_PATTERN = re.compile(r"^[^.!?]+[.!?]")
_SENTENCE_SPLIT_PATTERN = re.compile(r"[.!?]+")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def extract_topic(content: str) -> str:
    """Short topic description from a user message."""
    first_sentence = _FIRST_SENTENCE_PATTERN.match(content)
    if first_sentence and len(first_sentence.group(0)) <= TOPIC_SENTENCE_MAX_CHARS:
        return first_sentence.group(0).strip()

    first_line = content.split("\n")[0]
    if len(first_line) <= TOPIC_LINE_MAX_CHARS:
        return first_line.strip()
    return first_line[:TOPIC_LINE_MAX_CHARS].strip() + "..."


def extract_key_point(content: str) -> str:
    """First meaningful sentence of an assistant message, or ''."""
    sentences = [
        s for s in _SENTENCE_SPLIT_PATTERN.split(content)
        if len(s.strip()) > KEY_POINT_MIN_CHARS
    ]
    if not sentences:
        return ""

    first = sentences[0].strip()
    if len(first) > KEY_POINT_MAX_CHARS:
        return first[:KEY_POINT_MAX_CHARS] + "..."
    return first


def generate_local_summary(
    messages: Sequence[Message],
    estimator: Optional[HeuristicTokenEstimator] = None,
    max_tokens: int = SUMMARY_MAX_TOKENS,
) -> str:
    """
    Summarize messages locally.

    Args:
        messages: The older part of the conversation
        estimator: Token estimator used for the budget check
        max_tokens: Summary budget; longer output is cut by words

    Returns:
        Summary text, always ending with the summarized message count
        unless the budget cut applies.
    """
    estimator = estimator or HeuristicTokenEstimator()
    topics: List[str] = []
    key_points: List[str] = []
    user_goal = ""

    for msg in messages:
        content = msg.content.strip()
        if not content:
            continue

        if msg.role == Role.USER:
            if not user_goal and len(content) > GOAL_MIN_CHARS:
                if len(content) > GOAL_MAX_CHARS:
                    user_goal = content[:GOAL_MAX_CHARS] + "..."
                else:
                    user_goal = content

            topic = extract_topic(content)
            if topic and topic not in topics:
                topics.append(topic)

        elif msg.role == Role.ASSISTANT:
            key_point = extract_key_point(content)
            if key_point:
                key_points.append(key_point)

    parts: List[str] = []

    if user_goal:
        parts.append(f'User\'s initial request: "{user_goal}"')

    if topics:
        parts.append(f"Topics discussed: {', '.join(topics[:MAX_TOPICS])}")

    if key_points:
        bullets = "\n".join(f"- {p}" for p in key_points[:MAX_KEY_POINTS])
        parts.append(f"Key points covered:\n{bullets}")

    parts.append(f"Total messages summarized: {len(messages)}")

    summary = "\n\n".join(parts)

    if estimator.estimate_tokens(summary) > max_tokens:
        words = _WHITESPACE_PATTERN.split(summary)
        tokens_per_word = getattr(estimator, "tokens_per_word", TOKENS_PER_WORD)
        max_words = math.floor(max_tokens / tokens_per_word)
        return " ".join(words[:max_words]) + "..."

    return summary


class LocalSummarizer:
    """
    Memoizing front end for generate_local_summary.
    The cache is owned by the instance; nothing is shared at module level.
    """

    def __init__(
        self,
        cache: Optional[SummaryCache] = None,
        estimator: Optional[HeuristicTokenEstimator] = None,
        max_tokens: int = SUMMARY_MAX_TOKENS,
    ):
        self.cache = cache if cache is not None else SummaryCache()
        self.estimator = estimator or HeuristicTokenEstimator()
        self.max_tokens = max_tokens
        self.logger = logging.getLogger(__name__)

    def summarize(self, messages: Sequence[Message]) -> str:
        """Cached summary of ``messages``."""
        cache_key = self.cache.key_for(messages)
        summary = self.cache.get(cache_key)
        if summary:
            self.logger.debug("Summary cache hit for %d messages", len(messages))
            return summary

        summary = self.generate(messages)
        self.cache.put(cache_key, summary)
        self.logger.debug(
            f"Generated summary for {len(messages)} messages "
            f"({len(summary)} chars, cache size {len(self.cache)})"
        )
        return summary

    def generate(self, messages: Sequence[Message]) -> str:
        """Compute a fresh summary, bypassing the cache."""
        return generate_local_summary(
            messages, estimator=self.estimator, max_tokens=self.max_tokens
        )
