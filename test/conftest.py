from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import httpx
import pytest
from dotenv import load_dotenv

from toolflow_ai.agent_core.abstraction.base import (
    LLMClient,
    LLMMessage,
    LLMRequestOptions,
    LLMResponse,
    LLMUsage,
)
from toolflow_ai.core.errors import LLMError

TEST_ROOT = Path(__file__).resolve().parent
# Load test/.env first, then fallback to test/.env.example for defaults
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)


class FakeLLMClient(LLMClient):
    """Scripted client: answers with queued replies and records every request."""

    def __init__(self, replies: Sequence[str] = (), *, error: Optional[Exception] = None) -> None:
        self._replies: List[str] = list(replies)
        self._error = error
        self.calls: List[List[LLMMessage]] = []

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def generate_completion(
        self,
        messages: Sequence[LLMMessage],
        options: Optional[LLMRequestOptions] = None,
    ) -> LLMResponse:
        self.calls.append(list(messages))
        if self._error is not None:
            raise self._error
        if not self._replies:
            raise LLMError("fake", "no scripted reply left")
        return LLMResponse(
            content=self._replies.pop(0),
            usage=LLMUsage(prompt_tokens=3, completion_tokens=2, total_tokens=5),
            model=self.model,
        )


@pytest.fixture
def fake_llm():
    """Factory fixture building a ``FakeLLMClient`` with scripted replies."""

    def _make(*replies: str, error: Optional[Exception] = None) -> FakeLLMClient:
        return FakeLLMClient(replies, error=error)

    return _make


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://0.0.0.0",
        "http://test",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
