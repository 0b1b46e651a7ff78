from __future__ import annotations

"""LangGraph pipeline executor.

``PipelineExecutor`` runs a validated ``ExecutionPlan`` against a
``CapabilityRegistry``.

Execution model
---------------

- The executor runs a LangGraph state machine (``start -> execute -> finish``)
  over a mutable ``_PipelineState``.
- Each iteration of ``execute`` runs exactly one plan step at index ``idx``.
- The output of step ``i`` becomes ``previous_result`` of step ``i + 1``;
  step ``0`` receives ``None``.
- The first failing step ends the run. There is no retry transition.

Timeouts
--------

Each step has its own deadline of ``estimated_duration_ms`` times the
configured multiplier, or the default deadline when the capability gives no
estimate. The capability runs as an asyncio task; when the deadline fires the
task is cancelled, the step is recorded as failed and any result the task
still produces afterwards is discarded.

The executor never raises for step failures; it always returns a
``PipelineResult`` describing how far the run got.
"""

import asyncio
import logging
import time
from typing import Any, Optional

from langgraph.graph import END, StateGraph
from pydantic import ValidationError

from toolflow_ai.core.errors import ConfigError, PipelineError, StepTimeoutError, ToolExecutionError

from ..abstraction.base import LLMClient
from ..capabilities.base import Capability, CapabilityContext, CapabilityResult
from ..capabilities.registry import CapabilityRegistry
from ..schemas.domain import (
    ExecutionPlan,
    FileRef,
    PipelineMetadata,
    PipelineResult,
    StepResult,
)
from .models import PipelineContext, _PipelineState

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Tool execution failed"
INVALID_RESULT_MESSAGE = "Tool returned an invalid result"


def _discard_late_result(tool_name: str, task: "asyncio.Future[Any]") -> None:
    """Done-callback for a timed-out step task: consume and drop whatever it produced."""
    if task.cancelled():
        logger.debug(f"Timed-out step '{tool_name}' was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.debug(f"Timed-out step '{tool_name}' raised after its deadline: {exc}")
        return
    logger.warning(f"Discarding late result of timed-out step '{tool_name}'")


class PipelineExecutor:
    """Execute plans step by step against a capability registry.

    The executor holds no per-run state; concurrent ``execute`` calls share
    only the read-only registry.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        *,
        timeout_multiplier: Optional[float] = None,
        default_timeout_ms: Optional[int] = None,
    ) -> None:
        """
        Initialize the PipelineExecutor.

        Args:
            registry: Registry resolving step tool names to capabilities.
            timeout_multiplier: Factor applied to a capability's estimated
                duration. Defaults to the ``STEP_TIMEOUT_MULTIPLIER`` setting.
            default_timeout_ms: Deadline for capabilities without an estimate.
                Defaults to the ``DEFAULT_STEP_TIMEOUT_MS`` setting.
        """
        if timeout_multiplier is None or default_timeout_ms is None:
            from toolflow_ai.server.core.config import settings

            if timeout_multiplier is None:
                timeout_multiplier = settings.step_timeout_multiplier
            if default_timeout_ms is None:
                default_timeout_ms = settings.default_step_timeout_ms
        self._registry = registry
        self._timeout_multiplier = timeout_multiplier
        self._default_timeout_ms = default_timeout_ms
        self._graph = self._build_graph()

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_PipelineState)
        g.add_node("start", self._node_start)
        g.add_node("execute", self._node_execute_next)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("start")
        g.add_edge("start", "execute")
        g.add_conditional_edges(
            "execute",
            self._route_after_execute,
            {
                "finish": "finish",
                "continue": "execute",
            },
        )
        g.add_edge("finish", END)
        return g.compile()

    def step_timeout_ms(self, cap: Capability) -> int:
        """Deadline for one invocation of ``cap`` in milliseconds."""
        estimate = cap.config.estimated_duration_ms
        if not estimate:
            return int(self._default_timeout_ms)
        return int(estimate * self._timeout_multiplier)

    async def execute(
        self,
        plan: ExecutionPlan,
        *,
        instruction: str,
        llm_client: LLMClient,
        request_id: str,
        file: Optional[FileRef] = None,
    ) -> PipelineResult:
        """Run ``plan`` and return the pipeline result.

        Step failures, exceptions and timeouts are reported in the returned
        result; they are never raised.
        """
        ctx = PipelineContext(instruction=instruction, llm_client=llm_client, request_id=request_id, file=file)
        state: _PipelineState = {
            "ctx": ctx,
            "plan": list(plan.steps),
            "idx": 0,
            "steps": [],
            "previous_output": None,
            "started_at": time.perf_counter(),
        }
        # start + finish + one execute per step
        final = await self._graph.ainvoke(state, config={"recursion_limit": len(plan.steps) + 5})
        return final["result"]

    async def _node_start(self, state: _PipelineState) -> _PipelineState:
        ctx = state["ctx"]
        logger.info(
            f"[{ctx.request_id}] Executing pipeline: {' -> '.join(s.tool_name for s in state['plan'])}"
        )
        return state

    async def _node_execute_next(self, state: _PipelineState) -> _PipelineState:
        """Execute the step at ``idx`` and record its result."""
        plan = state["plan"]
        idx = state["idx"]
        if idx >= len(plan):
            state["_finished"] = True
            return state

        ctx = state["ctx"]
        step = plan[idx]
        tool_name = step.tool_name
        step_start = time.perf_counter()

        try:
            cap = self._registry.get(tool_name)
        except ConfigError as e:
            # validated plans never get here
            logger.error(f"[{ctx.request_id}] Step {idx + 1}/{len(plan)}: {e.message}")
            return self._fail(state, StepResult(step_index=idx, tool_name=tool_name, success=False, error=e.message))

        invocation = CapabilityContext(
            instruction=ctx.instruction,
            llm_client=ctx.llm_client,
            file=ctx.file,
            previous_result=state["previous_output"] if idx > 0 else None,
            metadata={"request_id": ctx.request_id},
        )
        timeout_ms = self.step_timeout_ms(cap)
        logger.info(f"[{ctx.request_id}] Step {idx + 1}/{len(plan)}: {tool_name} (timeout {timeout_ms}ms)")

        try:
            result = await self._invoke_with_timeout(cap, invocation, timeout_ms)
        except StepTimeoutError as e:
            logger.warning(f"[{ctx.request_id}] {e.message}")
            result = CapabilityResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"[{ctx.request_id}] Step {idx + 1} '{tool_name}' raised")
            result = CapabilityResult(success=False, error=str(e) or type(e).__name__)

        duration_ms = int((time.perf_counter() - step_start) * 1000)
        try:
            step_result = self._to_step_result(idx, tool_name, result, duration_ms)
        except PipelineError as e:
            logger.error(f"[{ctx.request_id}] Step {idx + 1} '{tool_name}': {e.message}")
            return self._fail(
                state,
                StepResult(
                    step_index=idx,
                    tool_name=tool_name,
                    success=False,
                    metadata={"duration_ms": duration_ms},
                    error=e.message,
                ),
            )

        if not step_result.success:
            logger.warning(f"[{ctx.request_id}] Step {idx + 1} '{tool_name}' failed: {step_result.error}")
            return self._fail(state, step_result)

        logger.info(f"[{ctx.request_id}] Step {idx + 1} '{tool_name}' succeeded ({duration_ms}ms)")
        state["steps"].append(step_result)
        state["previous_output"] = result.output
        state["idx"] = idx + 1
        if state["idx"] >= len(plan):
            state["_finished"] = True
        return state

    @staticmethod
    def _to_step_result(idx: int, tool_name: str, result: Any, duration_ms: int) -> StepResult:
        """Convert a capability result into the step log entry.

        Raises:
            PipelineError: When the capability did not honour the result contract.
        """
        if not isinstance(result, CapabilityResult) or not isinstance(result.metadata, (dict, type(None))):
            raise PipelineError(INVALID_RESULT_MESSAGE, step_index=idx)
        metadata = dict(result.metadata or {})
        metadata.setdefault("duration_ms", duration_ms)
        try:
            return StepResult(
                step_index=idx,
                tool_name=tool_name,
                success=result.success,
                output=result.output,
                metadata=metadata,
                error=result.error,
            )
        except ValidationError as e:
            raise PipelineError(f"{INVALID_RESULT_MESSAGE}: {e.error_count()} invalid field(s)", step_index=idx) from e

    async def _invoke_with_timeout(
        self, cap: Capability, invocation: CapabilityContext, timeout_ms: int
    ) -> CapabilityResult:
        """Run ``cap.execute`` as a task raced against ``timeout_ms``.

        Raises:
            StepTimeoutError: When the deadline fires first; the task is cancelled.
            ToolExecutionError: When the task was cancelled from inside the capability.
        """
        tool_name = cap.config.name
        task = asyncio.ensure_future(cap.execute(invocation))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            task.cancel()
            task.add_done_callback(lambda t: _discard_late_result(tool_name, t))
            raise StepTimeoutError(tool_name, timeout_ms)

        if task.cancelled():
            raise ToolExecutionError(tool_name, "execution was cancelled")
        return task.result()

    @staticmethod
    def _fail(state: _PipelineState, step_result: StepResult) -> _PipelineState:
        state["steps"].append(step_result)
        state["_failed"] = True
        state["_finished"] = True
        state["error"] = step_result.error or DEFAULT_FAILURE_MESSAGE
        return state

    def _route_after_execute(self, state: _PipelineState) -> str:
        """Route to finish/continue after executing a step."""
        if state.get("_finished"):
            return "finish"
        return "continue"

    async def _node_finish(self, state: _PipelineState) -> _PipelineState:
        """Build the terminal ``PipelineResult``."""
        ctx = state["ctx"]
        total_duration_ms = int((time.perf_counter() - state["started_at"]) * 1000)
        failed = bool(state.get("_failed"))
        metadata = PipelineMetadata(
            total_duration_ms=total_duration_ms,
            steps_completed=state["idx"],
            total_steps=len(state["plan"]),
        )
        if failed:
            state["result"] = PipelineResult(
                success=False,
                steps=list(state["steps"]),
                final_output=None,
                metadata=metadata,
                error=state.get("error") or DEFAULT_FAILURE_MESSAGE,
            )
            logger.warning(
                f"[{ctx.request_id}] Pipeline failed at step {state['idx'] + 1}/{len(state['plan'])} "
                f"after {total_duration_ms}ms: {state['result'].error}"
            )
        else:
            state["result"] = PipelineResult(
                success=True,
                steps=list(state["steps"]),
                final_output=state["previous_output"],
                metadata=metadata,
            )
            logger.info(f"[{ctx.request_id}] Pipeline completed in {total_duration_ms}ms")
        return state
