"""Base abstraction for text-generation clients.

This module defines the contract every capability-invocation client must
adhere to. The planner and the built-in capabilities only ever talk to
``LLMClient``; provider-specific details stay in the adapters.
"""

from abc import ABC, abstractmethod
from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

LLMRole = Literal["user", "assistant", "system"]
FinishReason = Literal["stop", "length", "error"]


class LLMMessage(BaseModel):
    """A single role-tagged conversation message."""

    model_config = ConfigDict(frozen=True)

    role: LLMRole
    content: str


class LLMRequestOptions(BaseModel):
    """Optional generation parameters for a single completion request.

    Attributes:
        temperature: Sampling temperature; the client default applies when unset
        max_tokens: Upper bound on generated tokens
        system_prompt: Extra system instructions prepended to the conversation
    """

    temperature: Optional[float] = Field(None, ge=0, le=2)
    max_tokens: Optional[int] = Field(None, ge=1)
    system_prompt: Optional[str] = None


class LLMUsage(BaseModel):
    """Token accounting reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Response from a completion request.

    Attributes:
        content: Generated text
        finish_reason: Why generation stopped
        usage: Token usage when the provider reports it
        model: Model identifier that produced the response
    """

    content: str
    finish_reason: FinishReason = "stop"
    usage: Optional[LLMUsage] = None
    model: Optional[str] = None


class LLMClient(ABC):
    """Abstract base class for capability-invocation clients.

    Implementations wrap one text-generation provider. Failures of the
    underlying call must surface as ``LLMError`` naming the provider so that
    callers can tell provider failures apart from their own bugs.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider name (e.g. 'anthropic', 'openai')."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the model identifier."""

    @abstractmethod
    async def generate_completion(
        self,
        messages: Sequence[LLMMessage],
        options: Optional[LLMRequestOptions] = None,
    ) -> LLMResponse:
        """Generate a completion from conversation messages.

        Args:
            messages: Ordered role-tagged messages; the last one is the user turn to answer
            options: Optional generation parameters

        Returns:
            LLMResponse with content and metadata

        Raises:
            LLMError: When the provider call fails
        """


def user_message(content: str) -> List[LLMMessage]:
    """Build the single-message conversation most callers send."""
    return [LLMMessage(role="user", content=content)]
