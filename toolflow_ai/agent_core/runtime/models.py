from __future__ import annotations

"""Per-run pipeline context and LangGraph state types.

- ``PipelineContext`` carries the request-scoped inputs shared by every step
  of one run (instruction, client, optional file, request id).
- ``_PipelineState`` is the mutable state passed between LangGraph nodes.

Nothing here is shared across runs; a fresh state is built for every
``PipelineExecutor.execute`` call.
"""

from dataclasses import dataclass
from typing import Any, List, NotRequired, Optional, Required, TypedDict

from ..abstraction.base import LLMClient
from ..schemas.domain import FileRef, PipelineResult, PipelineStep, StepResult


@dataclass(frozen=True)
class PipelineContext:
    """Request-scoped inputs of one pipeline run."""

    instruction: str
    llm_client: LLMClient
    request_id: str
    file: Optional[FileRef] = None


class _PipelineState(TypedDict):
    """Mutable LangGraph state for a single pipeline run.

    Required keys:

    - ``ctx``: the run's ``PipelineContext``.
    - ``plan``: the ordered steps to execute.
    - ``idx``: index of the next step.
    - ``steps``: result log, one entry per executed step.
    - ``previous_output``: output of the last successful step.
    - ``started_at``: ``time.perf_counter()`` value at run start.

    Optional keys:

    - ``_finished``: set once the run reached a terminal state.
    - ``_failed``: set when a step failed; the run stops at that step.
    - ``error``: the failing step's error, set on terminal failure.
    - ``result``: the ``PipelineResult`` built by the finish node.
    """

    ctx: Required[PipelineContext]
    plan: Required[List[PipelineStep]]
    idx: Required[int]
    steps: Required[List[StepResult]]
    previous_output: Required[Any]
    started_at: Required[float]
    _finished: NotRequired[bool]
    _failed: NotRequired[bool]
    error: NotRequired[Optional[str]]
    result: NotRequired[PipelineResult]
