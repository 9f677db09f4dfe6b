# promptx/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from pathlib import Path
import logging
from typing import Optional

from promptx.config.models import ModelCatalog, default_catalog
from promptx.exceptions.config import ConfigError

logger = logging.getLogger(__name__)

CACHE_POLICIES = ("fifo", "lru")
CACHE_KEY_STRATEGIES = ("boundary", "content_hash")


class ContextSettings(BaseSettings):
    # === Window Policy ===
    # Use at most this share of the window; the rest is left for the response
    max_context_ratio: float = 0.80
    # Most recent messages that are never summarized
    recent_messages_to_keep: int = 10
    # Shorter conversations are never summarized
    min_messages_for_summary: int = 12
    summary_max_tokens: int = 600

    # === Summary Cache ===
    summary_cache_size: int = 20
    summary_cache_policy: str = "fifo"
    summary_cache_key: str = "boundary"

    # === Models ===
    default_model: str = "grok-3"
    models_json_path: Optional[Path] = Field(default=None)

    log_level: str = "INFO"

    # === Pydantic V2 Configuration ===
    model_config = SettingsConfigDict(
        env_prefix="PROMPTX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # === Model Validator ===

    @model_validator(mode="after")
    def validate_policy(self) -> "ContextSettings":
        """Validate policy values and normalize names."""

        # 1. Budget ratio
        if not 0 < self.max_context_ratio <= 1:
            raise ConfigError(
                f"max_context_ratio must be in (0, 1]: {self.max_context_ratio}",
                field_name="max_context_ratio",
                invalid_value=self.max_context_ratio,
            )

        # 2. Retention window and thresholds
        if self.recent_messages_to_keep < 0:
            raise ConfigError(
                f"recent_messages_to_keep cannot be negative: {self.recent_messages_to_keep}",
                field_name="recent_messages_to_keep",
                invalid_value=self.recent_messages_to_keep,
            )
        if self.min_messages_for_summary < 1:
            raise ConfigError(
                f"min_messages_for_summary must be at least 1: {self.min_messages_for_summary}",
                field_name="min_messages_for_summary",
                invalid_value=self.min_messages_for_summary,
            )
        if self.summary_max_tokens <= 0:
            raise ConfigError(
                f"summary_max_tokens must be positive: {self.summary_max_tokens}",
                field_name="summary_max_tokens",
                invalid_value=self.summary_max_tokens,
            )

        # 3. Cache
        if self.summary_cache_size <= 0:
            raise ConfigError(
                f"summary_cache_size must be positive: {self.summary_cache_size}",
                field_name="summary_cache_size",
                invalid_value=self.summary_cache_size,
            )
        policy = self.summary_cache_policy.strip().lower()
        if policy not in CACHE_POLICIES:
            raise ConfigError(
                f"Invalid summary_cache_policy. Expected one of {CACHE_POLICIES}. "
                f"Got: {self.summary_cache_policy}",
                field_name="summary_cache_policy",
                invalid_value=self.summary_cache_policy,
            )
        self.summary_cache_policy = policy

        key_strategy = self.summary_cache_key.strip().lower()
        if key_strategy not in CACHE_KEY_STRATEGIES:
            raise ConfigError(
                f"Invalid summary_cache_key. Expected one of {CACHE_KEY_STRATEGIES}. "
                f"Got: {self.summary_cache_key}",
                field_name="summary_cache_key",
                invalid_value=self.summary_cache_key,
            )
        self.summary_cache_key = key_strategy

        # 4. Log level
        if self.log_level.upper() not in logging._nameToLevel:
            raise ConfigError(
                f"Invalid log level: {self.log_level}",
                field_name="log_level",
                invalid_value=self.log_level,
            )
        self.log_level = self.log_level.upper()

        return self

    def build_catalog(self) -> ModelCatalog:
        """Compiled-in catalog, merged with the model map file when configured."""
        if self.models_json_path is None:
            return default_catalog()
        return ModelCatalog.from_json(self.models_json_path)
