"""LangGraph-based execution runtime for pipelines.

The runtime takes a validated ``ExecutionPlan`` and executes its steps in
order against the capability registry:

- every step runs under its own deadline and is cancelled when it overruns;
- each step's output is handed to the next step as ``previous_result``;
- the first failing step ends the run, and earlier results are kept.

The main entry point is ``PipelineExecutor``.
"""

from .engine import PipelineExecutor
from .models import PipelineContext

__all__ = [
    "PipelineContext",
    "PipelineExecutor",
]
