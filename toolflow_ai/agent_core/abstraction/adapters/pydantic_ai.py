"""Pydantic AI Framework Adapter.

This module provides an ``LLMClient`` implementation backed by the Pydantic AI
framework, so any model Pydantic AI supports (Anthropic, OpenAI, test and
function models) can serve planning and capability calls.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic_ai import Agent, ModelSettings
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.models import Model

from toolflow_ai.core.errors import LLMError
from toolflow_ai.core.logging_config import get_logger

from ..base import FinishReason, LLMClient, LLMMessage, LLMRequestOptions, LLMResponse, LLMUsage

logger = get_logger(__name__)


class PydanticAIClient(LLMClient):
    """Adapter that answers completion requests through a Pydantic AI agent.

    Conversation mapping:

    - ``system`` messages and ``LLMRequestOptions.system_prompt`` become agent
      instructions.
    - earlier ``user``/``assistant`` messages become message history.
    - the last message must be a ``user`` turn and becomes the prompt.

    Attributes:
        _model: The Pydantic AI model instance (or model string)
        _provider: Provider name reported in errors and responses
    """

    def __init__(
        self,
        model: Union[Model, str],
        *,
        provider: str,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self._model = model
        self._provider = provider
        self._model_name = model_name or getattr(model, "model_name", None) or str(model)
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model_name

    def build_model_settings(self, options: Optional[LLMRequestOptions]) -> Optional[ModelSettings]:
        """Merge client defaults with per-request options."""
        model_settings: Dict[str, Any] = {}
        temperature = options.temperature if options and options.temperature is not None else self._temperature
        max_tokens = options.max_tokens if options and options.max_tokens is not None else self._max_tokens
        if temperature is not None:
            model_settings["temperature"] = temperature
        if max_tokens is not None:
            model_settings["max_tokens"] = max_tokens
        return ModelSettings(**model_settings) if model_settings else None

    @staticmethod
    def _to_history(messages: Sequence[LLMMessage]) -> List[ModelMessage]:
        history: List[ModelMessage] = []
        for msg in messages:
            if msg.role == "user":
                history.append(ModelRequest(parts=[UserPromptPart(content=msg.content)]))
            elif msg.role == "assistant":
                history.append(ModelResponse(parts=[TextPart(content=msg.content)]))
        return history

    async def generate_completion(
        self,
        messages: Sequence[LLMMessage],
        options: Optional[LLMRequestOptions] = None,
    ) -> LLMResponse:
        if not messages:
            raise LLMError(self._provider, "At least one message is required")
        prompt = messages[-1]
        if prompt.role != "user":
            raise LLMError(self._provider, f"Last message must have role 'user', got '{prompt.role}'")

        instructions = [m.content for m in messages[:-1] if m.role == "system"]
        if options is not None and options.system_prompt:
            instructions.insert(0, options.system_prompt)

        agent: Agent = Agent(self._model, instructions="\n\n".join(instructions) or None)
        history = self._to_history(messages[:-1])

        logger.debug(
            f"Requesting completion: provider={self._provider} model={self._model_name} "
            f"messages={len(messages)} prompt_length={len(prompt.content)}"
        )
        try:
            result = await agent.run(
                prompt.content,
                message_history=history or None,
                model_settings=self.build_model_settings(options),
            )
        except LLMError:
            raise
        except Exception as e:
            logger.error(f"Completion failed: provider={self._provider} model={self._model_name}: {e}")
            raise LLMError(self._provider, str(e)) from e

        last = result.all_messages()[-1]
        finish_reason: FinishReason = "stop"
        if getattr(last, "finish_reason", None) == "length":
            finish_reason = "length"

        run_usage = getattr(result, "usage", None)
        prompt_tokens = getattr(run_usage, "input_tokens", None) or 0
        completion_tokens = getattr(run_usage, "output_tokens", None) or 0
        usage = LLMUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=getattr(run_usage, "total_tokens", None) or prompt_tokens + completion_tokens,
        )

        return LLMResponse(
            content=str(result.output),
            finish_reason=finish_reason,
            usage=usage,
            model=getattr(last, "model_name", None) or self._model_name,
        )
