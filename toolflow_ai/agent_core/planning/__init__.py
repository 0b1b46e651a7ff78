"""Planning components.

The planning subsystem produces an ``ExecutionPlan`` from a user instruction:
an ordered, non-empty list of ``PipelineStep`` items, each naming one tool.

- ``PlanGenerator`` asks the capability-invocation client for the plan and
  parses its reply.
- ``IntentDetector`` supplies the registry's tool names to the planner and
  rejects plans that reference unknown tools.

The planner itself does not execute tools; plans are consumed by
``toolflow_ai.agent_core.runtime.PipelineExecutor``.
"""

from .intent import IntentDetector
from .json_extract import extract_json_object, find_balanced_object
from .planner import PlanGenerator

__all__ = [
    "IntentDetector",
    "PlanGenerator",
    "extract_json_object",
    "find_balanced_object",
]
