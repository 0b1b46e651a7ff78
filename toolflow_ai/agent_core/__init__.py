"""Plan generation and plan execution core.

This package contains the "engine room" of the system.

Design overview
---------------

Handling an instruction is split into *planning* and *execution*:

- Planning (``agent_core.planning``) asks the capability-invocation client
  for an ordered list of tool invocations and validates every tool name
  against the registry. Planning fails fast; no partial plan is ever executed.
- Execution (``agent_core.runtime.PipelineExecutor``) runs the plan with
  LangGraph, one step at a time, each under its own deadline, threading every
  step's output into the next step.

Typical usage
-------------

Most applications should use ``agent_core.service.ProcessingService``, built
by ``agent_core.factory.build_service``:

1. Discover the capabilities into a registry at startup.
2. Create a capability-invocation client per request
   (``abstraction.LLMClientFactory``).
3. Call ``ProcessingService.process`` with the instruction and optional file.
"""

from .capabilities import CapabilityRegistry
from .planning import IntentDetector, PlanGenerator
from .runtime import PipelineExecutor
from .schemas.domain import (
    CapabilityConfig,
    ExecutionPlan,
    FileRef,
    PipelineResult,
    PipelineStep,
    StepResult,
)
from .service import ProcessingService, ProcessOutcome

__all__ = [
    "CapabilityConfig",
    "CapabilityRegistry",
    "ExecutionPlan",
    "FileRef",
    "IntentDetector",
    "PipelineExecutor",
    "PipelineResult",
    "PipelineStep",
    "PlanGenerator",
    "ProcessOutcome",
    "ProcessingService",
    "StepResult",
]
