from __future__ import annotations

"""Capability protocol and execution data models.

A capability (tool) is the concrete execution unit for one plan step.

The pipeline executor resolves ``PipelineStep.tool_name`` through a
``CapabilityRegistry`` and executes the implementation with a fresh
``CapabilityContext`` per step.

Capabilities should:

- interpret and validate their own expected input shape (``file``,
  ``previous_result``),
- report ordinary failures through ``CapabilityResult(success=False, error=...)``
  instead of raising,
- be safe to cancel: a step that exceeds its deadline is cancelled and its
  late result is discarded.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from ..abstraction.base import LLMClient
from ..schemas.domain import CapabilityConfig, FileRef


@dataclass(frozen=True)
class CapabilityContext:
    """Per-step invocation context passed to capability implementations.

    Attributes
    ----------
    instruction:
        The user's natural-language instruction for the whole pipeline.
    llm_client:
        The per-request capability-invocation client.
    file:
        The uploaded file, if any.
    previous_result:
        The ``output`` of the previous step; ``None`` for the first step.
    metadata:
        Request-scoped metadata; always carries ``request_id``.
    """

    instruction: str
    llm_client: LLMClient
    file: Optional[FileRef] = None
    previous_result: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def request_id(self) -> Optional[str]:
        return self.metadata.get("request_id")


InvocationContext = CapabilityContext


@dataclass(frozen=True)
class CapabilityResult:
    """Structured capability execution result."""

    success: bool
    output: Any = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class Capability(Protocol):
    """Protocol for capability implementations."""

    config: CapabilityConfig

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult: ...
