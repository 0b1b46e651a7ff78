from __future__ import annotations

import sys
import types
from dataclasses import dataclass, field
from typing import Any, List

import pytest

from toolflow_ai.agent_core.capabilities import discovery
from toolflow_ai.agent_core.capabilities.base import CapabilityContext, CapabilityResult
from toolflow_ai.agent_core.capabilities.discovery import discover_capabilities
from toolflow_ai.agent_core.capabilities.registry import CapabilityRegistry
from toolflow_ai.agent_core.schemas.domain import CapabilityConfig
from toolflow_ai.core.errors import ConfigError


@dataclass(frozen=True)
class _Cap:
    name: str
    config: CapabilityConfig = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "config", CapabilityConfig(name=self.name))

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        return CapabilityResult(success=True)


class _ClassCap:
    config = CapabilityConfig(name="from-class")

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        return CapabilityResult(success=True)


class _EntryPoint:
    def __init__(self, name: str, loaded: Any = None, error: Exception | None = None) -> None:
        self.name = name
        self._loaded = loaded
        self._error = error

    def load(self) -> Any:
        if self._error is not None:
            raise self._error
        return self._loaded


@pytest.fixture
def fake_module(monkeypatch: pytest.MonkeyPatch):
    def _install(name: str, **attrs: Any) -> str:
        mod = types.ModuleType(name)
        for key, value in attrs.items():
            setattr(mod, key, value)
        monkeypatch.setitem(sys.modules, name, mod)
        return name

    return _install


def test_registers_explicit_capabilities() -> None:
    reg = discover_capabilities(capabilities=[_Cap("a"), _Cap("b")])
    assert reg.names() == ["a", "b"]


def test_populates_given_registry() -> None:
    reg = CapabilityRegistry()
    out = discover_capabilities(reg, capabilities=[_Cap("a")])
    assert out is reg


def test_empty_discovery_is_fatal() -> None:
    with pytest.raises(ConfigError, match="No tools registered. At least one tool is required."):
        discover_capabilities()


def test_only_malformed_candidates_is_fatal() -> None:
    with pytest.raises(ConfigError, match="No tools registered"):
        discover_capabilities(capabilities=[object()])


def test_malformed_candidates_are_skipped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger=discovery.__name__):
        reg = discover_capabilities(capabilities=[object(), _Cap("ok")])

    assert reg.names() == ["ok"]
    assert "invalid tool structure" in caplog.text


def test_duplicate_names_raise() -> None:
    with pytest.raises(ConfigError, match="Tool already registered: a"):
        discover_capabilities(capabilities=[_Cap("a"), _Cap("a")])


def test_module_paths_with_capabilities_list(fake_module) -> None:
    path = fake_module("toolflow_test_caps_list", CAPABILITIES=[_Cap("m1"), _Cap("m2")])
    reg = discover_capabilities(module_paths=[path])
    assert reg.names() == ["m1", "m2"]


def test_module_paths_with_single_capability(fake_module) -> None:
    path = fake_module("toolflow_test_caps_single", capability=_Cap("single"))
    reg = discover_capabilities(module_paths=[path])
    assert reg.names() == ["single"]


def test_unimportable_module_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger=discovery.__name__):
        reg = discover_capabilities(capabilities=[_Cap("a")], module_paths=["toolflow_no_such_module_xyz"])

    assert reg.names() == ["a"]
    assert "failed to import toolflow_no_such_module_xyz" in caplog.text


def test_entry_points_accept_instances_classes_and_factories(monkeypatch: pytest.MonkeyPatch) -> None:
    eps: List[_EntryPoint] = [
        _EntryPoint("instance", _Cap("from-instance")),
        _EntryPoint("class", _ClassCap),
        _EntryPoint("factory", lambda: _Cap("from-factory")),
        _EntryPoint("broken", error=ImportError("missing dependency")),
    ]
    seen_groups: List[str] = []

    def fake_iter(group: str):
        seen_groups.append(group)
        return eps

    monkeypatch.setattr(discovery, "_iter_entry_points", fake_iter)

    reg = discover_capabilities(entry_point_group="toolflow_ai.capabilities")

    assert seen_groups == ["toolflow_ai.capabilities"]
    assert reg.names() == ["from-instance", "from-class", "from-factory"]
    assert isinstance(reg.get("from-class"), _ClassCap)


def test_entry_points_disabled_without_group(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(group: str):
        raise AssertionError("entry points must not be scanned")

    monkeypatch.setattr(discovery, "_iter_entry_points", fail)
    reg = discover_capabilities(capabilities=[_Cap("a")], entry_point_group=None)
    assert reg.names() == ["a"]
