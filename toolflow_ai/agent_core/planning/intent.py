from __future__ import annotations

from typing import Optional

from toolflow_ai.core.errors import ConfigError
from toolflow_ai.core.logging_config import get_logger

from ..abstraction.base import LLMClient
from ..capabilities.registry import CapabilityRegistry
from ..schemas.domain import ExecutionPlan, FileMetadata
from .planner import PlanGenerator

logger = get_logger(__name__)


class IntentDetector:
    """
    Turn an instruction into a plan that only names registered tools.

    The detector gathers the planning context (instruction, file metadata and
    the registry's tool names), delegates plan generation to ``PlanGenerator``
    and validates the result against the registry.
    """

    def __init__(self, registry: CapabilityRegistry, planner: Optional[PlanGenerator] = None) -> None:
        self._registry = registry
        self._planner = planner or PlanGenerator()

    @property
    def planner(self) -> PlanGenerator:
        return self._planner

    async def detect_and_plan(
        self,
        instruction: str,
        llm_client: LLMClient,
        file_metadata: Optional[FileMetadata] = None,
    ) -> ExecutionPlan:
        """
        Plan ``instruction`` and validate the plan.

        Raises:
            LLMError: When planning fails.
            ConfigError: When the plan names an unregistered tool.
        """
        available_tools = self._registry.names()
        plan = await self._planner.generate_plan(instruction, available_tools, llm_client, file_metadata)
        self.validate_plan(plan)
        return plan

    def validate_plan(self, plan: ExecutionPlan) -> None:
        """Fail on the first step naming a tool the registry does not know."""
        for step in plan.steps:
            if not self._registry.has(step.tool_name):
                logger.warning(f"Plan references unknown tool '{step.tool_name}'")
                raise ConfigError(f"Tool not found in registry: {step.tool_name}")
