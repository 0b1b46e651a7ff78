from __future__ import annotations

from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolflow_ai.agent_core.abstraction.base import LLMClient
from toolflow_ai.agent_core.capabilities.builtin import BUILTIN_CAPABILITIES
from toolflow_ai.agent_core.capabilities.registry import CapabilityRegistry
from toolflow_ai.agent_core.factory import build_service
from toolflow_ai.core.errors import ConfigError
from toolflow_ai.server.main import app
from toolflow_ai.server.services.deps import get_llm_factory, get_service


class FakeLLMFactory:
    """Stands in for ``LLMClientFactory``: every alias resolves to the same scripted client."""

    def __init__(self, client: LLMClient, aliases: Optional[List[str]] = None) -> None:
        self.client = client
        self.aliases = aliases or ["CLAUDE_FAST", "GPT_FAST"]
        self.created: List[str] = []

    def available_models(self) -> List[str]:
        return list(self.aliases)

    def create(self, alias: str) -> LLMClient:
        if alias not in self.aliases:
            raise ConfigError(f'Model alias "{alias}" not found')
        self.created.append(alias)
        return self.client

    def create_default(self) -> LLMClient:
        return self.create(self.aliases[0])


@pytest.fixture
def registry() -> CapabilityRegistry:
    reg = CapabilityRegistry()
    for cap in BUILTIN_CAPABILITIES:
        reg.register(cap)
    return reg


@pytest.fixture
def install_llm(fake_llm):
    """Route every request's client creation to a scripted client; returns the fake factory."""

    def _install(*replies: str, error: Optional[Exception] = None) -> FakeLLMFactory:
        factory = FakeLLMFactory(fake_llm(*replies, error=error))
        app.dependency_overrides[get_llm_factory] = lambda: factory
        return factory

    return _install


@pytest_asyncio.fixture
async def client(registry: CapabilityRegistry) -> AsyncGenerator[AsyncClient, None]:
    service = build_service(registry)
    app.dependency_overrides[get_service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app, raise_app_exceptions=False), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
