"""Framework adapters implementing ``LLMClient``."""

from .pydantic_ai import PydanticAIClient

__all__ = ["PydanticAIClient"]
