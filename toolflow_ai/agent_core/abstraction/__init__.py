"""Capability-invocation client abstraction.

This package isolates the text-generation provider behind ``LLMClient`` so the
planner and capabilities stay provider-agnostic.

- ``base``: message/response models and the ``LLMClient`` contract.
- ``adapters.pydantic_ai``: ``PydanticAIClient``, the Pydantic AI backed client.
- ``config_loader``: model alias file loading and validation.
- ``factory``: ``LLMClientFactory`` creating clients by alias.
"""

from .adapters import PydanticAIClient
from .base import LLMClient, LLMMessage, LLMRequestOptions, LLMResponse, LLMUsage, user_message
from .config_loader import LLMModelConfig, LLMModelsConfig, ModelConfigLoader
from .factory import LLMClientFactory

__all__ = [
    "LLMClient",
    "LLMClientFactory",
    "LLMMessage",
    "LLMModelConfig",
    "LLMModelsConfig",
    "LLMRequestOptions",
    "LLMResponse",
    "LLMUsage",
    "ModelConfigLoader",
    "PydanticAIClient",
    "user_message",
]
