"""Capability contract, registry and discovery.

A *capability* (tool) is the execution unit for one plan step.

- The planner emits ``PipelineStep`` items naming a tool.
- The executor resolves that name through ``CapabilityRegistry``.
- Each step runs with a fresh ``CapabilityContext`` carrying the instruction,
  the optional file and the previous step's output.

The registry is filled once at startup by ``discover_capabilities`` from the
built-ins, configured modules and installed entry points.

This package exports:

- ``Capability``: protocol for async capability execution.
- ``CapabilityRegistry``: name → capability implementation mapping.
- ``CapabilityContext``/``CapabilityResult``: execution input/output models.
- ``discover_capabilities``: startup registration from all sources.
"""

from .base import Capability, CapabilityContext, CapabilityResult, InvocationContext
from .discovery import discover_capabilities
from .registry import CapabilityRegistry

__all__ = [
    "Capability",
    "CapabilityContext",
    "CapabilityResult",
    "CapabilityRegistry",
    "InvocationContext",
    "discover_capabilities",
]
