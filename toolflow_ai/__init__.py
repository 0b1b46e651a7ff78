"""ToolFlow-AI.

This package turns a natural-language instruction (plus an optional file) into
a short, ordered plan of tools and executes that plan step by step.

High-level architecture
-----------------------

- **Planning**: a language model is asked for an ordered list of tool
  invocations; the reply is parsed into an ``ExecutionPlan`` and every tool
  name is validated against the capability registry.
- **Execution**: a LangGraph-based executor runs the plan strictly in order,
  hands each step's output to the next step, enforces a per-step deadline and
  stops at the first failing step.

Core subpackages
----------------

- ``toolflow_ai.agent_core``: schemas, the capability-invocation client
  abstraction, capabilities and their registry, planning and the runtime.
- ``toolflow_ai.server``: the FastAPI surface (``/v1/process``, ``/v1/tools``).
- ``toolflow_ai.core``: logging configuration and the error taxonomy.

Typical workflow
----------------

Most integrations should use ``toolflow_ai.agent_core.service.ProcessingService``:

1. Build the registry and the service with ``agent_core.factory.build_service``.
2. Create a client for the request with ``LLMClientFactory``.
3. Call ``process(instruction, client, file)`` and inspect the returned
   ``PipelineResult``.
"""

__version__ = "0.1.0"
