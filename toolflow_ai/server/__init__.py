"""
ToolFlow-AI Server Package.

This package contains the thin web surface over the agent core: it accepts an
instruction (plus an optional uploaded file), runs plan generation and the
pipeline executor, and returns the structured pipeline result.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration settings.
    exception_handlers: Mapping of application errors to JSON responses.
    services: Dependency providers for the processing service.
"""
