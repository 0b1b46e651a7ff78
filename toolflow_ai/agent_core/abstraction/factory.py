"""Factory for creating capability-invocation clients from model aliases.

``LLMClientFactory`` resolves an alias through ``ModelConfigLoader``, builds
the provider-specific Pydantic AI model and wraps it in a
``PydanticAIClient``. A fresh client is created per request; clients are not
shared across concurrent pipeline runs.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic_ai import ModelSettings
from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.openai import OpenAIResponsesModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.openai import OpenAIProvider

from toolflow_ai.core.errors import ConfigError
from toolflow_ai.core.logging_config import get_logger

from .adapters.pydantic_ai import PydanticAIClient
from .base import LLMClient
from .config_loader import LLMModelConfig, ModelConfigLoader

logger = get_logger(__name__)


class LLMClientFactory:
    """Create ``LLMClient`` instances by model alias."""

    def __init__(self, config_loader: Optional[ModelConfigLoader] = None) -> None:
        self._config_loader = config_loader or ModelConfigLoader()

    def create(self, alias: str) -> LLMClient:
        """Create a client for a model alias.

        Raises:
            ConfigError: When the alias is unknown, the provider is unsupported or its API key is missing.
        """
        config = self._config_loader.get_model_config(alias)
        logger.debug(f"Creating LLM client for alias '{alias}': {config.provider}/{config.model}")
        return self.create_from_config(config)

    def create_default(self) -> LLMClient:
        return self.create(self._config_loader.get_default_alias())

    def create_fallback(self) -> LLMClient:
        return self.create(self._config_loader.get_fallback_alias())

    def available_models(self) -> List[str]:
        return self._config_loader.get_available_aliases()

    def create_from_config(self, config: LLMModelConfig) -> LLMClient:
        if config.provider == "anthropic":
            model = self._create_anthropic_model(config)
        elif config.provider == "openai":
            model = self._create_openai_model(config)
        else:
            raise ConfigError(
                f"Unknown LLM provider: {config.provider}. Supported providers: anthropic, openai"
            )
        return PydanticAIClient(
            model,
            provider=config.provider,
            model_name=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    @staticmethod
    def _model_settings(config: LLMModelConfig) -> ModelSettings:
        return ModelSettings(temperature=config.temperature, max_tokens=config.max_tokens)

    def _create_anthropic_model(self, config: LLMModelConfig) -> Model:
        """Create Anthropic model using Pydantic AI."""
        from toolflow_ai.server.core.config import settings

        api_key = settings.anthropic.api_key
        if not api_key:
            raise ConfigError("ANTHROPIC_API_KEY environment variable is not set")
        return AnthropicModel(
            config.model,
            provider=AnthropicProvider(api_key=api_key),
            settings=self._model_settings(config),
        )

    def _create_openai_model(self, config: LLMModelConfig) -> Model:
        """Create OpenAI model using Pydantic AI."""
        from toolflow_ai.server.core.config import settings

        openai_cfg = settings.openai
        if not openai_cfg.api_key:
            raise ConfigError("OPENAI_API_KEY environment variable is not set")
        return OpenAIResponsesModel(
            config.model,
            provider=OpenAIProvider(api_key=openai_cfg.api_key, base_url=openai_cfg.base_url),
            settings=self._model_settings(config),
        )
