"""Model alias configuration loading.

Model aliases (e.g. ``CLAUDE_FAST``, ``GPT_SMART``) decouple callers from
provider model identifiers. The alias file is JSON::

    {
      "models": {
        "CLAUDE_FAST": {
          "provider": "anthropic",
          "model": "claude-3-5-haiku-latest",
          "temperature": 0.3,
          "maxTokens": 2048,
          "description": "Fast Claude model"
        }
      },
      "default": "CLAUDE_FAST",
      "fallback": "CLAUDE_FAST"
    }

The loader validates the whole file on first use and caches the result.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from toolflow_ai.core.errors import ConfigError
from toolflow_ai.core.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ("anthropic", "openai")


class LLMModelConfig(BaseModel):
    """Configuration of one model alias."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    provider: Literal["anthropic", "openai"]
    model: str = Field(min_length=1)
    temperature: float = Field(ge=0, le=2)
    max_tokens: int = Field(gt=0, alias="maxTokens")
    description: str


class LLMModelsConfig(BaseModel):
    """Structure of the model alias file."""

    models: Dict[str, LLMModelConfig]
    default: str = Field(min_length=1)
    fallback: str = Field(min_length=1)


class ModelConfigLoader:
    """Load and validate model alias configuration from a JSON file."""

    def __init__(self, config_path: Optional[str] = None) -> None:
        if config_path is None:
            from toolflow_ai.server.core.config import settings

            config_path = settings.llm_models_config_path
        self._config_path = Path(config_path)
        self._config: Optional[LLMModelsConfig] = None

    @property
    def config_path(self) -> Path:
        return self._config_path

    def _load(self) -> LLMModelsConfig:
        if self._config is not None:
            return self._config

        try:
            raw = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load LLM config from {self._config_path}: {e}") from e

        self._config = self.validate(raw)
        logger.debug(f"Loaded {len(self._config.models)} model aliases from {self._config_path}")
        return self._config

    @staticmethod
    def validate(raw: object) -> LLMModelsConfig:
        """Validate a parsed alias file.

        Raises:
            ConfigError: When the structure, an alias reference or a model entry is invalid.
        """
        if not isinstance(raw, dict):
            raise ConfigError("Invalid config: expected a JSON object")
        models = raw.get("models")
        if not isinstance(models, dict):
            raise ConfigError('Invalid config: missing or invalid "models" object')
        for key in ("default", "fallback"):
            if not isinstance(raw.get(key), str) or not raw.get(key):
                raise ConfigError(f'Invalid config: missing or invalid "{key}" alias')
            if raw[key] not in models:
                raise ConfigError(f'{key.capitalize()} alias "{raw[key]}" not found in models')

        for alias, entry in models.items():
            if not isinstance(entry, dict):
                raise ConfigError(f'Model "{alias}" must be an object')
            provider = entry.get("provider")
            if provider is not None and provider not in SUPPORTED_PROVIDERS:
                raise ConfigError(
                    f'Model "{alias}" has invalid provider: {provider}. Must be "anthropic" or "openai"'
                )
            try:
                LLMModelConfig.model_validate(entry)
            except ValidationError as e:
                problems = ", ".join(".".join(str(p) for p in err["loc"]) or "entry" for err in e.errors())
                raise ConfigError(f'Model "{alias}" has invalid or missing fields: {problems}') from e

        return LLMModelsConfig.model_validate(raw)

    def get_model_config(self, alias: str) -> LLMModelConfig:
        """Get model configuration by alias.

        Raises:
            ConfigError: When the alias is not declared.
        """
        config = self._load()
        if alias not in config.models:
            raise ConfigError(
                f'Model alias "{alias}" not found. Available aliases: {", ".join(config.models)}'
            )
        return config.models[alias]

    def get_default_alias(self) -> str:
        return self._load().default

    def get_fallback_alias(self) -> str:
        return self._load().fallback

    def get_available_aliases(self) -> List[str]:
        return list(self._load().models)
