"""Plan generation.

``PlanGenerator`` asks the capability-invocation client for an ordered list of
tool invocations and turns the reply into an ``ExecutionPlan``.

Behavior
--------

- exactly one ``user`` message is sent per planning call; there are no
  retries and no repair of malformed output.
- the reply is parsed as JSON directly or, failing that, from its first
  well-balanced ``{...}`` object (see ``json_extract``).
- every failure (client error, unparsable reply, structurally invalid plan) is
  raised as ``LLMError`` with the ``planning`` provider.

Tool names are not checked against the registry here; that is the job of
``IntentDetector.validate_plan``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from toolflow_ai.core.errors import LLMError
from toolflow_ai.core.logging_config import get_logger

from ..abstraction.base import LLMClient, user_message
from ..schemas.domain import ExecutionPlan, FileMetadata, PipelineStep
from .json_extract import extract_json_object

logger = get_logger(__name__)

PLANNING_PROVIDER = "planning"
DEFAULT_FALLBACK_TOOL = "simple-ask"


class PlanGenerator:
    """
    Generate execution plans from natural-language instructions.

    Args:
        fallback_tool: Tool the model is told to use for instructions that need
            no file and no multi-step processing. Defaults to the
            ``PLANNER_FALLBACK_TOOL`` setting.
    """

    def __init__(self, fallback_tool: Optional[str] = None) -> None:
        if fallback_tool is None:
            from toolflow_ai.server.core.config import settings

            fallback_tool = settings.planner_fallback_tool
        self._fallback_tool = fallback_tool or DEFAULT_FALLBACK_TOOL

    @property
    def fallback_tool(self) -> str:
        return self._fallback_tool

    def build_prompt(
        self,
        instruction: str,
        available_tools: Sequence[str],
        file_metadata: Optional[FileMetadata] = None,
    ) -> str:
        if file_metadata is not None:
            file_info = f"FILE PROVIDED: {file_metadata.filename} ({file_metadata.mimetype})"
        else:
            file_info = "NO FILE PROVIDED"

        tool_list = "\n".join(f"- {name}" for name in available_tools)
        fallback = self._fallback_tool

        return f"""You are a planning assistant. Break the user's instruction down into an ordered list of tool invocations.

<instruction>
{instruction}
</instruction>

<file>
{file_info}
</file>

<available_tools>
{tool_list}
</available_tools>

<rules>
- Prefer the shortest plan: 1-2 steps are enough for most instructions
- Use ONLY tools from the available_tools list, spelled exactly as listed
- Order matters: a tool that produces data must come before the tool that consumes it
- Each step receives the output of the previous step
- If the instruction needs no file and no multi-step processing, return a single "{fallback}" step
- Return ONLY JSON, with no markdown and no explanations
</rules>

Respond with exactly this structure:
{{"steps": [{{"toolName": "<tool name>", "reason": "<why this step is needed>"}}]}}"""

    async def generate_plan(
        self,
        instruction: str,
        available_tools: Sequence[str],
        llm_client: LLMClient,
        file_metadata: Optional[FileMetadata] = None,
    ) -> ExecutionPlan:
        """
        Produce a plan for ``instruction``.

        Returns:
            ExecutionPlan: A non-empty plan whose tool names are not yet validated.

        Raises:
            LLMError: With provider ``planning`` on any client or parse failure.
        """
        logger.info(
            f"Planning instruction '{instruction[:100]}' with tools: {', '.join(available_tools)}"
            + (f" (file: {file_metadata.filename})" if file_metadata else "")
        )
        prompt = self.build_prompt(instruction, available_tools, file_metadata)

        try:
            response = await llm_client.generate_completion(user_message(prompt))
        except Exception as e:
            logger.error(f"Plan generation failed: {e}")
            raise LLMError(PLANNING_PROVIDER, f"Failed to generate plan: {e}") from e

        plan = self.parse_plan(response.content)
        logger.info(f"Generated plan with {len(plan.steps)} step(s): {' -> '.join(plan.tool_names())}")
        return plan

    @classmethod
    def parse_plan(cls, text: str) -> ExecutionPlan:
        """
        Parse a model reply into an ``ExecutionPlan``.

        Raises:
            LLMError: With provider ``planning`` when the reply holds no valid plan.
        """
        try:
            raw = extract_json_object(text)
        except ValueError as e:
            logger.debug(f"Unparsable planner response: {text[:500]!r}")
            raise LLMError(PLANNING_PROVIDER, f"Failed to parse plan: {e}") from e

        if not isinstance(raw, dict) or "steps" not in raw:
            raise LLMError(PLANNING_PROVIDER, "Invalid plan structure: missing steps")
        steps = raw["steps"]
        if not isinstance(steps, list):
            raise LLMError(PLANNING_PROVIDER, "Invalid plan structure: steps must be an array")
        if not steps:
            raise LLMError(PLANNING_PROVIDER, "Invalid plan structure: plan has no steps")

        parsed: List[PipelineStep] = [cls._parse_step(i, step) for i, step in enumerate(steps)]

        estimate = raw.get("estimatedDurationMs")
        if isinstance(estimate, bool) or not isinstance(estimate, (int, float)):
            estimate = None
        return ExecutionPlan(steps=parsed, estimated_duration_ms=estimate)

    @staticmethod
    def _parse_step(index: int, step: Any) -> PipelineStep:
        if not isinstance(step, dict):
            raise LLMError(PLANNING_PROVIDER, f"Invalid step at index {index}: expected an object")
        tool_name = step.get("toolName")
        if not isinstance(tool_name, str) or not tool_name.strip():
            raise LLMError(PLANNING_PROVIDER, f"Invalid step at index {index}: missing toolName")

        reason = step.get("reason")
        parameters: Optional[Dict[str, Any]] = step.get("parameters")
        return PipelineStep(
            tool_name=tool_name,
            reason=reason if isinstance(reason, str) else None,
            parameters=parameters if isinstance(parameters, dict) else None,
        )
