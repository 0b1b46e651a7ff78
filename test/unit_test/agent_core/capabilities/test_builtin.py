from __future__ import annotations

import json

import pytest

from toolflow_ai.agent_core.capabilities.base import CapabilityContext
from toolflow_ai.agent_core.capabilities.builtin import (
    BUILTIN_CAPABILITIES,
    DataExtractionCapability,
    SimpleAskCapability,
    TextExtractionCapability,
    detect_data_type,
    source_text,
)
from toolflow_ai.agent_core.capabilities.registry import CapabilityRegistry
from toolflow_ai.agent_core.schemas.domain import FileRef
from toolflow_ai.core.errors import LLMError


def _ctx(client, *, instruction: str = "What is 2+2?", file=None, previous_result=None) -> CapabilityContext:
    return CapabilityContext(
        instruction=instruction,
        llm_client=client,
        file=file,
        previous_result=previous_result,
        metadata={"request_id": "req_test"},
    )


def test_builtins_are_structurally_valid_and_unique() -> None:
    names = [cap.config.name for cap in BUILTIN_CAPABILITIES]
    assert names == ["simple-ask", "text-extraction", "data-extraction"]
    assert all(CapabilityRegistry.is_valid(cap) for cap in BUILTIN_CAPABILITIES)
    assert all(cap.config.estimated_duration_ms > 0 for cap in BUILTIN_CAPABILITIES)


@pytest.mark.asyncio
async def test_simple_ask_returns_completion_text(fake_llm) -> None:
    client = fake_llm("4")

    res = await SimpleAskCapability().execute(_ctx(client))

    assert res.success is True
    assert res.output == "4"
    assert res.metadata["tokens_used"] == 5
    assert res.metadata["model"] == "fake-model"
    assert [m.content for m in client.calls[0]] == ["What is 2+2?"]
    assert client.calls[0][0].role == "user"


@pytest.mark.asyncio
async def test_simple_ask_reports_client_failure(fake_llm) -> None:
    client = fake_llm(error=LLMError("anthropic", "rate limited"))

    res = await SimpleAskCapability().execute(_ctx(client))

    assert res.success is False
    assert res.output is None
    assert "rate limited" in res.error


@pytest.mark.asyncio
async def test_text_extraction_decodes_text_file(fake_llm) -> None:
    file = FileRef(content="Glucose: 92 mg/dL".encode("utf-8"), mimetype="text/plain", filename="lab.txt")

    res = await TextExtractionCapability().execute(_ctx(fake_llm(), file=file))

    assert res.success is True
    assert res.output == {"text": "Glucose: 92 mg/dL", "filename": "lab.txt", "characters": 17}


@pytest.mark.asyncio
async def test_text_extraction_requires_file(fake_llm) -> None:
    res = await TextExtractionCapability().execute(_ctx(fake_llm()))
    assert res.success is False
    assert res.error == "No file provided for text extraction"


@pytest.mark.asyncio
async def test_text_extraction_rejects_binary(fake_llm) -> None:
    file = FileRef(content=b"\x89PNG", mimetype="image/png", filename="x.png")
    res = await TextExtractionCapability().execute(_ctx(fake_llm(), file=file))
    assert res.success is False
    assert "image/png" in res.error


@pytest.mark.parametrize(
    "mimetype, expected",
    [
        ("text/csv", True),
        ("text/plain; charset=utf-8", True),
        ("application/json", True),
        ("application/pdf", False),
    ],
)
def test_is_text_mimetype(mimetype: str, expected: bool) -> None:
    assert TextExtractionCapability.is_text_mimetype(mimetype) is expected


@pytest.mark.parametrize(
    "previous, expected",
    [
        (None, "instruction text"),
        ({"text": "from text"}, "from text"),
        ({"output": "from output"}, "from output"),
        ("plain string", "plain string"),
        ({"x": 1}, json.dumps({"x": 1})),
    ],
)
def test_source_text_prefers_previous_result(fake_llm, previous, expected) -> None:
    ctx = _ctx(fake_llm(), instruction="instruction text", previous_result=previous)
    assert source_text(ctx) == expected


@pytest.mark.asyncio
async def test_data_extraction_parses_fenced_json(fake_llm) -> None:
    reply = 'Here you go:\n```json\n{"type": "contact", "name": "Ann", "email": "ann@example.com"}\n```'
    client = fake_llm(reply)

    res = await DataExtractionCapability().execute(
        _ctx(client, instruction="extract the contact", previous_result={"text": "Ann, ann@example.com"})
    )

    assert res.success is True
    assert res.output == {"type": "contact", "name": "Ann", "email": "ann@example.com"}
    assert res.metadata["data_type"] == "contact"
    prompt = client.calls[0][0].content
    assert "Ann, ann@example.com" in prompt
    assert "extract the contact" in prompt


@pytest.mark.asyncio
async def test_data_extraction_reports_unparsable_reply(fake_llm) -> None:
    res = await DataExtractionCapability().execute(_ctx(fake_llm("no json here"), previous_result="some text"))
    assert res.success is False
    assert res.error.startswith("Failed to parse JSON response")


@pytest.mark.asyncio
async def test_data_extraction_requires_text(fake_llm) -> None:
    client = fake_llm()
    res = await DataExtractionCapability().execute(_ctx(client, instruction="   "))
    assert res.success is False
    assert res.error == "No text provided for extraction"
    assert client.calls == []


@pytest.mark.parametrize(
    "data, expected",
    [
        ({"type": "invoice", "total": 3}, "invoice"),
        ({"parameters": [{"name": "Glucose"}]}, "medical_lab_results"),
        ({"items": [], "total": 10}, "invoice"),
        ({"name": "Ann", "phone": "123"}, "contact"),
        ({"foo": "bar"}, "generic"),
        ([1, 2], "unknown"),
    ],
)
def test_detect_data_type(data, expected: str) -> None:
    assert detect_data_type(data) == expected
