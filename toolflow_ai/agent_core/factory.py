from __future__ import annotations

"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default capability registry
and a ``ProcessingService`` on top of it.

The intent is to keep application wiring and tests concise, while still
allowing deployments to add their own capabilities through settings
(``CAPABILITY_MODULES``) or installed entry points.
"""

from typing import Optional

from .capabilities.builtin import BUILTIN_CAPABILITIES
from .capabilities.discovery import discover_capabilities
from .capabilities.registry import CapabilityRegistry
from .planning.intent import IntentDetector
from .planning.planner import PlanGenerator
from .runtime.engine import PipelineExecutor
from .service import ProcessingService


def build_default_registry(*, include_builtins: bool = True) -> CapabilityRegistry:
    """Build the default ``CapabilityRegistry``.

    The registry includes the built-in capabilities (``simple-ask``,
    ``text-extraction``, ``data-extraction``) plus whatever the configured
    modules and entry-point group provide.

    Raises:
        ConfigError: On duplicate tool names or when no tool was registered.
    """
    from toolflow_ai.server.core.config import settings

    return discover_capabilities(
        capabilities=BUILTIN_CAPABILITIES if include_builtins else (),
        module_paths=settings.capability_modules,
        entry_point_group=settings.capability_entry_point_group,
    )


def build_service(registry: Optional[CapabilityRegistry] = None) -> ProcessingService:
    """Construct a ``ProcessingService`` with settings-driven planner and executor."""
    reg = registry if registry is not None else build_default_registry()
    return ProcessingService(
        registry=reg,
        intent_detector=IntentDetector(reg, PlanGenerator()),
        executor=PipelineExecutor(reg),
    )
