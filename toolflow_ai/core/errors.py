"""Error types for ToolFlow-AI.

Defines a small hierarchy of exceptions raised across the agent core and the
server. Every error carries a machine-readable ``code`` and the HTTP status
code the server answers with when the error escapes a request.

Error kinds
-----------

- ``LLMError``: a text-generation provider call failed. Planning failures
  are reported as ``LLMError`` with the ``planning`` provider.
- ``ConfigError``: a plan references an unknown tool, a capability fails
  structural validation, or the registry is empty after discovery.
- ``ToolExecutionError`` / ``StepTimeoutError``: a pipeline step failed or
  exceeded its deadline. The executor converts these into failed step
  results instead of letting them escape.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base error for all application exceptions."""

    def __init__(self, message: str, code: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class InvalidRequestError(AppError):
    """Raised when an inbound request fails validation."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(message, code, 400)


class ToolExecutionError(AppError):
    """Raised when a tool fails during pipeline execution."""

    def __init__(self, tool_name: str, message: str, code: str = "TOOL_EXECUTION_ERROR") -> None:
        super().__init__(f"Tool '{tool_name}' failed: {message}", code, 500)
        self.tool_name = tool_name


class StepTimeoutError(ToolExecutionError):
    """Raised when a tool does not finish within its per-step deadline."""

    def __init__(self, tool_name: str, timeout_ms: int) -> None:
        AppError.__init__(
            self,
            f"Operation 'tool:{tool_name}' timed out after {timeout_ms}ms",
            "STEP_TIMEOUT",
            504,
        )
        self.tool_name = tool_name
        self.timeout_ms = timeout_ms


class PipelineError(AppError):
    """Raised when the pipeline cannot be processed as a whole."""

    def __init__(self, message: str, code: str = "PIPELINE_ERROR", step_index: Optional[int] = None) -> None:
        super().__init__(message, code, 500)
        self.step_index = step_index


class LLMError(AppError):
    """Raised when a text-generation provider call fails."""

    def __init__(self, provider: str, message: str, code: str = "LLM_ERROR") -> None:
        super().__init__(f"LLM provider '{provider}' error: {message}", code, 500)
        self.provider = provider


class ConfigError(AppError):
    """Raised for configuration and registry failures."""

    def __init__(self, message: str, code: str = "CONFIG_ERROR") -> None:
        super().__init__(message, code, 500)
