from __future__ import annotations

"""Capability registry.

The registry maps a unique tool name to an executable capability
implementation.

The registry is populated once at startup (see ``discovery``) and is only read
afterwards, so concurrent pipeline runs can share it without locking.
"""

import inspect
from typing import Any, Dict, List

from toolflow_ai.core.errors import ConfigError

from ..schemas.domain import CapabilityConfig
from .base import Capability


class CapabilityRegistry:
    """
    In-memory mapping of tool names to capability implementations.

    This registry is the central lookup mechanism for resolving the tool names
    emitted by the planner (e.g. 'simple-ask') to executable code.

    Notes:
        - ``register`` rejects structurally invalid capabilities and duplicate names.
        - ``get`` raises ``ConfigError`` if the tool is missing.
    """

    def __init__(self) -> None:
        """Initialize an empty capability registry."""
        self._caps: Dict[str, Capability] = {}

    @staticmethod
    def is_valid(candidate: Any) -> bool:
        """
        Check the structure of a capability candidate.

        A valid capability exposes a ``config`` whose ``name`` is a non-empty
        string and a callable ``execute`` coroutine function.
        """
        config = getattr(candidate, "config", None)
        if config is None:
            return False
        name = getattr(config, "name", None)
        if not isinstance(name, str) or not name.strip():
            return False
        execute = getattr(candidate, "execute", None)
        if not callable(execute):
            return False
        return inspect.iscoroutinefunction(execute)

    def register(self, cap: Capability) -> None:
        """
        Register a capability implementation.

        Args:
            cap: The capability instance to register.

        Raises:
            ConfigError: If the capability is malformed or its name is already registered.
        """
        if not self.is_valid(cap):
            name = getattr(getattr(cap, "config", None), "name", None) or "unknown"
            raise ConfigError(f"Invalid tool structure: {name}")

        name = cap.config.name
        if name in self._caps:
            raise ConfigError(f"Tool already registered: {name}")
        self._caps[name] = cap

    def get(self, name: str) -> Capability:
        """
        Retrieve a registered capability by name.

        Raises:
            ConfigError: If no capability is registered with the given name.
        """
        cap = self._caps.get(name)
        if cap is None:
            raise ConfigError(f"Tool not found: {name}")
        return cap

    def has(self, name: str) -> bool:
        return name in self._caps

    def names(self) -> List[str]:
        """Registered tool names in registration order."""
        return list(self._caps)

    def all(self) -> List[Capability]:
        return list(self._caps.values())

    def configs(self) -> List[CapabilityConfig]:
        return [cap.config for cap in self._caps.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._caps

    def __len__(self) -> int:
        return len(self._caps)
