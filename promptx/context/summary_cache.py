#!/usr/bin/env python3
"""
Summary Cache
=============
Bounded memo of generated summaries, keyed by a fingerprint of the
summarized message slice.

Key strategies:
- "boundary": message count plus the first 50 characters of the first and
  last messages. Cheap, but two different slices with the same count and
  boundary text collide.
- "content_hash": message count plus a blake2b digest of every message.
"""

import hashlib
import logging
from collections import OrderedDict
from threading import Lock
from typing import Dict, Optional, Sequence

from promptx.context.message import Message
from promptx.exceptions.context import ContextValidationError

BOUNDARY_PREFIX_CHARS = 50


class SummaryCache:
    """
    Thread-safe summary cache with FIFO or LRU eviction.

    FIFO evicts the oldest-inserted entry regardless of use; LRU also
    refreshes an entry's position on every hit.
    """

    def __init__(
        self,
        capacity: int = 20,
        policy: str = "fifo",
        key_strategy: str = "boundary",
    ):
        if capacity <= 0:
            raise ContextValidationError(
                f"Invalid cache capacity: {capacity}. Must be positive.",
                validation_type="capacity",
                invalid_value=capacity,
            )
        if policy not in ("fifo", "lru"):
            raise ContextValidationError(
                f"Unknown eviction policy: {policy}",
                validation_type="policy",
                invalid_value=policy,
            )
        if key_strategy not in ("boundary", "content_hash"):
            raise ContextValidationError(
                f"Unknown cache key strategy: {key_strategy}",
                validation_type="key_strategy",
                invalid_value=key_strategy,
            )

        self.capacity = capacity
        self.policy = policy
        self.key_strategy = key_strategy
        self.logger = logging.getLogger(__name__)

        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def key_for(self, messages: Sequence[Message]) -> str:
        if self.key_strategy == "content_hash":
            digest = hashlib.blake2b(digest_size=16)
            for msg in messages:
                digest.update(msg.role.value.encode("utf-8"))
                digest.update(b"\x00")
                digest.update(msg.content.encode("utf-8"))
                digest.update(b"\x1e")
            return f"{len(messages)}:{digest.hexdigest()}"

        first = messages[0].content[:BOUNDARY_PREFIX_CHARS] if messages else ""
        last = messages[-1].content[:BOUNDARY_PREFIX_CHARS] if messages else ""
        return f"{len(messages)}:{first}:{last}"

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            if key not in self._entries:
                self._misses += 1
                return None
            self._hits += 1
            if self.policy == "lru":
                self._entries.move_to_end(key)
            return self._entries[key]

    def put(self, key: str, summary: str) -> None:
        with self._lock:
            self._entries[key] = summary
            if self.policy == "lru":
                self._entries.move_to_end(key)

            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                self.logger.debug(f"Evicted summary cache entry: {evicted[:60]!r}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def stats(self) -> Dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "policy": self.policy,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
