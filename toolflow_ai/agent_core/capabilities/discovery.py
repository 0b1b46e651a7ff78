"""Capability discovery.

This module populates a ``CapabilityRegistry`` at startup from enumerated
sources instead of scanning a directory:

* an explicit iterable of capability objects (the built-ins, usually),
* dotted module paths listed in ``CAPABILITY_MODULES``; each module exposes a
  ``CAPABILITIES`` iterable or a single ``capability`` attribute,
* installed packages that register a capability (or a zero-argument factory
  returning one) in the ``toolflow_ai.capabilities`` entry-point group.

Malformed candidates and modules that fail to import are skipped with a
warning. Duplicate names are still a configuration failure, and so is an
empty registry once every source has been consumed: a process without tools
cannot serve any request.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from importlib import metadata
from typing import Any, Iterable, List, Optional, Sequence

from toolflow_ai.core.errors import ConfigError

from .registry import CapabilityRegistry

_LOGGER = logging.getLogger(__name__)


def _iter_entry_points(group: str) -> Iterable[metadata.EntryPoint]:
    """Return entry points for ``group``.

    Used as an indirection point in tests so that discovery can be controlled
    without relying on the real environment.
    """
    return metadata.entry_points(group=group)


def _register_candidate(registry: CapabilityRegistry, candidate: Any, *, source: str) -> bool:
    if not CapabilityRegistry.is_valid(candidate):
        _LOGGER.warning("CapabilityDiscovery: skipping %s: invalid tool structure", source)
        return False
    registry.register(candidate)
    _LOGGER.info("CapabilityDiscovery: registered tool %s (from %s)", candidate.config.name, source)
    return True


def _load_module_candidates(module_path: str) -> List[Any]:
    module = importlib.import_module(module_path)
    if hasattr(module, "CAPABILITIES"):
        return list(module.CAPABILITIES)
    if hasattr(module, "capability"):
        return [module.capability]
    _LOGGER.warning("CapabilityDiscovery: module %s exposes neither CAPABILITIES nor capability", module_path)
    return []


def _instantiate(loaded: Any) -> Any:
    """Entry points may name a capability instance, a class or a factory."""
    if inspect.isclass(loaded) or (callable(loaded) and not CapabilityRegistry.is_valid(loaded)):
        return loaded()
    return loaded


def discover_capabilities(
    registry: Optional[CapabilityRegistry] = None,
    *,
    capabilities: Iterable[Any] = (),
    module_paths: Sequence[str] = (),
    entry_point_group: Optional[str] = None,
) -> CapabilityRegistry:
    """
    Register capabilities from every configured source.

    Args:
        registry: Registry to populate; a new one is created when omitted.
        capabilities: Explicit capability objects.
        module_paths: Dotted module paths exposing ``CAPABILITIES`` or ``capability``.
        entry_point_group: Entry-point group to load; ``None`` or empty disables it.

    Returns:
        The populated registry.

    Raises:
        ConfigError: On a duplicate tool name, or when no capability was registered.
    """
    reg = registry if registry is not None else CapabilityRegistry()

    for cap in capabilities:
        _register_candidate(reg, cap, source=type(cap).__name__)

    for module_path in module_paths:
        try:
            candidates = _load_module_candidates(module_path)
        except Exception as exc:
            _LOGGER.warning(
                "CapabilityDiscovery: failed to import %s: %s: %s", module_path, type(exc).__name__, exc
            )
            continue
        for cap in candidates:
            _register_candidate(reg, cap, source=module_path)

    if entry_point_group:
        for ep in _iter_entry_points(entry_point_group):
            try:
                candidate = _instantiate(ep.load())
            except Exception as exc:
                _LOGGER.warning(
                    "CapabilityDiscovery: failed to load entry point %s: %s: %s", ep.name, type(exc).__name__, exc
                )
                continue
            _register_candidate(reg, candidate, source=f"entry point {ep.name}")

    if len(reg) == 0:
        raise ConfigError("No tools registered. At least one tool is required.")

    _LOGGER.info("CapabilityDiscovery: %d tools available: %s", len(reg), ", ".join(reg.names()))
    return reg
