from __future__ import annotations

"""High-level processing service.

``ProcessingService`` provides an application-friendly API for handling one
instruction end to end without manually wiring the planner and the executor.

Workflow
--------

1. ``IntentDetector`` plans the instruction and validates the plan against
   the registry. Planning and validation failures are raised to the caller.
2. ``PipelineExecutor`` runs the plan. Step failures do not raise; they are
   described by the returned ``PipelineResult``.

``ProcessingService`` is intentionally thin: it delegates planning semantics
to the intent detector and execution semantics to the executor.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from .abstraction.base import LLMClient
from .capabilities.registry import CapabilityRegistry
from .planning.intent import IntentDetector
from .runtime.engine import PipelineExecutor
from .schemas.domain import CapabilityConfig, ExecutionPlan, FileRef, PipelineResult

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    """Generate a request id of the form ``req_<epoch ms>_<random>``."""
    return f"req_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


@dataclass(frozen=True)
class ProcessOutcome:
    """Plan and execution result of one processed instruction."""

    request_id: str
    plan: ExecutionPlan
    result: PipelineResult


class ProcessingService:
    """Orchestrate planning + execution for a single instruction."""

    def __init__(
        self,
        *,
        registry: CapabilityRegistry,
        intent_detector: Optional[IntentDetector] = None,
        executor: Optional[PipelineExecutor] = None,
    ) -> None:
        self._registry = registry
        self._intent_detector = intent_detector or IntentDetector(registry)
        self._executor = executor or PipelineExecutor(registry)

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    def available_tools(self) -> List[CapabilityConfig]:
        """Static configuration of every registered tool."""
        return self._registry.configs()

    async def process(
        self,
        instruction: str,
        llm_client: LLMClient,
        file: Optional[FileRef] = None,
        request_id: Optional[str] = None,
    ) -> ProcessOutcome:
        """
        Plan and execute ``instruction``.

        Args:
            instruction: The user's natural-language instruction.
            llm_client: Per-request client used for planning and by the capabilities.
            file: Optional uploaded file handed to every step.
            request_id: Correlation id; generated when omitted.

        Returns:
            ProcessOutcome: The validated plan and the pipeline result.

        Raises:
            LLMError: When planning fails.
            ConfigError: When the plan references an unknown tool.
        """
        request_id = request_id or new_request_id()
        logger.info(f"[{request_id}] Processing instruction ({len(instruction)} chars, file: {file is not None})")

        plan = await self._intent_detector.detect_and_plan(
            instruction,
            llm_client,
            file.metadata() if file is not None else None,
        )
        result = await self._executor.execute(
            plan,
            instruction=instruction,
            llm_client=llm_client,
            request_id=request_id,
            file=file,
        )
        return ProcessOutcome(request_id=request_id, plan=plan, result=result)
