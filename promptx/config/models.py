"""Model catalog: model id -> context window size in tokens."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from promptx.exceptions.config import ModelConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_LIMIT = 131072  # 128K

MODEL_CONTEXT_LIMITS: Dict[str, int] = {
    "grok-3": 131072,
    "grok-3-mini": 131072,
    "grok-3-mini-fast": 131072,
    "grok-beta": 131072,
    "gpt-4": 128000,
    "gpt-4o": 128000,
    "gpt-4-turbo": 128000,
    "gpt-3.5-turbo": 16385,
    "claude-3-opus": 200000,
    "claude-3-sonnet": 200000,
    "claude-3-haiku": 200000,
    "gemini-pro": 1000000,
    "mistral-large": 128000,
    "llama-3": 128000,
    "deepseek-v3": 128000,
}


class ModelCatalog:
    """
    Static lookup of context window sizes.
    Unknown model ids fall back to ``default_limit``.
    """

    def __init__(
        self,
        limits: Optional[Mapping[str, int]] = None,
        default_limit: int = DEFAULT_CONTEXT_LIMIT,
    ):
        if (
            isinstance(default_limit, bool)
            or not isinstance(default_limit, int)
            or default_limit <= 0
        ):
            raise ModelConfigError(
                f"Invalid default context limit: {default_limit!r}. Must be positive."
            )
        self.default_limit = default_limit
        self._limits: Dict[str, int] = {}
        for model_id, limit in (
            MODEL_CONTEXT_LIMITS if limits is None else limits
        ).items():
            self.register(model_id, limit)

    def context_limit(self, model_id: Optional[str]) -> int:
        return self._limits.get(model_id or "", self.default_limit)

    def register(self, model_id: str, limit: int) -> None:
        """Add or override a model entry."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ModelConfigError(
                f"Invalid context window for '{model_id}': {limit!r}"
            )
        self._limits[model_id] = limit

    def models(self) -> List[str]:
        return list(self._limits)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._limits

    def __len__(self) -> int:
        return len(self._limits)

    @classmethod
    def from_json(cls, path: Path) -> "ModelCatalog":
        """
        Build a catalog from the compiled-in table merged with a model map file.

        Accepted shape::

            {
              "default_context_limit": 131072,
              "models": {
                "my-model": {"context_window": 32768},
                "other-model": 8192
              }
            }
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as e:
            raise ModelConfigError(
                f"Model map file not found: {path}", config_file=path, original_error=e
            ) from e
        except (OSError, json.JSONDecodeError) as e:
            raise ModelConfigError(
                f"Error loading model map {path}: {e}",
                config_file=path,
                original_error=e,
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("models", {}), dict):
            raise ModelConfigError(
                f"Model map must be an object with a 'models' mapping: {path}",
                config_file=path,
            )

        catalog = cls(
            default_limit=data.get("default_context_limit", DEFAULT_CONTEXT_LIMIT)
        )
        for model_id, entry in data.get("models", {}).items():
            catalog.register(model_id, _context_window_of(entry))

        logger.info("Loaded %d model entries from %s", len(data.get("models", {})), path)
        return catalog


def _context_window_of(entry: Any) -> Any:
    if isinstance(entry, dict):
        return entry.get("context_window")
    return entry


_default_catalog: Optional[ModelCatalog] = None


def default_catalog() -> ModelCatalog:
    """The shared compiled-in catalog."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = ModelCatalog()
    return _default_catalog
