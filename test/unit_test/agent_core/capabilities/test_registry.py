from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace

import pytest

from toolflow_ai.agent_core.capabilities.base import CapabilityContext, CapabilityResult
from toolflow_ai.agent_core.capabilities.registry import CapabilityRegistry
from toolflow_ai.agent_core.schemas.domain import CapabilityConfig
from toolflow_ai.core.errors import ConfigError


@dataclass(frozen=True)
class _DummyCapability:
    name: str
    config: CapabilityConfig = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "config", CapabilityConfig(name=self.name))

    async def execute(self, ctx: CapabilityContext) -> CapabilityResult:
        return CapabilityResult(success=True, output=self.name)


def test_registry_empty_has_false() -> None:
    reg = CapabilityRegistry()
    assert reg.has("simple-ask") is False
    assert len(reg) == 0


def test_registry_get_missing_raises_config_error() -> None:
    reg = CapabilityRegistry()
    with pytest.raises(ConfigError, match="Tool not found: simple-ask"):
        reg.get("simple-ask")


def test_registry_register_then_get_returns_same_instance() -> None:
    reg = CapabilityRegistry()
    cap = _DummyCapability("simple-ask")
    reg.register(cap)

    assert reg.has("simple-ask") is True
    assert "simple-ask" in reg
    assert reg.get("simple-ask") is cap


def test_registry_rejects_duplicate_names() -> None:
    reg = CapabilityRegistry()
    reg.register(_DummyCapability("simple-ask"))

    with pytest.raises(ConfigError, match="Tool already registered: simple-ask"):
        reg.register(_DummyCapability("simple-ask"))


def test_registry_keeps_registration_order() -> None:
    reg = CapabilityRegistry()
    for name in ("b", "a", "c"):
        reg.register(_DummyCapability(name))

    assert reg.names() == ["b", "a", "c"]
    assert [c.name for c in reg.configs()] == ["b", "a", "c"]
    assert len(reg.all()) == 3


@pytest.mark.parametrize(
    "candidate",
    [
        object(),
        SimpleNamespace(config=SimpleNamespace(name=""), execute=_DummyCapability("x").execute),
        SimpleNamespace(config=SimpleNamespace(name=42), execute=_DummyCapability("x").execute),
        SimpleNamespace(config=SimpleNamespace(name="sync"), execute=lambda ctx: None),
        SimpleNamespace(config=SimpleNamespace(name="no-exec")),
    ],
)
def test_registry_rejects_invalid_structure(candidate: object) -> None:
    reg = CapabilityRegistry()
    assert CapabilityRegistry.is_valid(candidate) is False
    with pytest.raises(ConfigError, match="Invalid tool structure"):
        reg.register(candidate)  # type: ignore[arg-type]
