from __future__ import annotations

import re

import pytest

from toolflow_ai.agent_core.capabilities import discovery
from toolflow_ai.agent_core.capabilities.builtin import BUILTIN_CAPABILITIES
from toolflow_ai.agent_core.capabilities.registry import CapabilityRegistry
from toolflow_ai.agent_core.factory import build_default_registry, build_service
from toolflow_ai.agent_core.schemas.domain import FileRef
from toolflow_ai.agent_core.service import ProcessingService, new_request_id
from toolflow_ai.core.errors import ConfigError, LLMError
from toolflow_ai.server.core.config import settings


@pytest.fixture(autouse=True)
def _no_installed_entry_points(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(discovery, "_iter_entry_points", lambda group: [])


def _registry() -> CapabilityRegistry:
    reg = CapabilityRegistry()
    for cap in BUILTIN_CAPABILITIES:
        reg.register(cap)
    return reg


def test_build_default_registry_contains_builtins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "capability_modules", [])
    reg = build_default_registry()
    assert reg.names() == ["simple-ask", "text-extraction", "data-extraction"]


def test_build_default_registry_without_any_tool_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "capability_modules", [])
    with pytest.raises(ConfigError, match="No tools registered"):
        build_default_registry(include_builtins=False)


def test_build_service_uses_given_registry() -> None:
    reg = _registry()
    service = build_service(reg)
    assert isinstance(service, ProcessingService)
    assert service.registry is reg
    assert [c.name for c in service.available_tools()] == reg.names()


def test_new_request_id_format() -> None:
    assert re.fullmatch(r"req_\d{13}_[0-9a-f]{9}", new_request_id())


@pytest.mark.asyncio
async def test_process_plans_and_executes(fake_llm) -> None:
    client = fake_llm('{"steps": [{"toolName": "simple-ask", "reason": "plain question"}]}', "4")
    service = build_service(_registry())

    outcome = await service.process("What is 2+2?", client, request_id="req_fixed")

    assert outcome.request_id == "req_fixed"
    assert outcome.plan.tool_names() == ["simple-ask"]
    assert outcome.result.success is True
    assert outcome.result.final_output == "4"
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_process_file_pipeline(fake_llm) -> None:
    client = fake_llm(
        '```json\n{"steps": [{"toolName": "text-extraction"}, {"toolName": "data-extraction"}]}\n```',
        '{"type": "medical_lab_results", "parameters": [{"name": "Glucose", "value": 92, "unit": "mg/dL"}]}',
    )
    file = FileRef(content=b"Glucose 92 mg/dL", mimetype="text/plain", filename="lab.txt")
    service = build_service(_registry())

    outcome = await service.process("Extract my lab values", client, file=file)

    assert outcome.request_id.startswith("req_")
    assert outcome.result.success is True
    assert outcome.result.metadata.steps_completed == 2
    assert outcome.result.final_output["type"] == "medical_lab_results"
    assert outcome.result.steps[1].metadata["data_type"] == "medical_lab_results"
    assert "Glucose 92 mg/dL" in client.calls[1][0].content


@pytest.mark.asyncio
async def test_process_propagates_planning_failure(fake_llm) -> None:
    service = build_service(_registry())
    with pytest.raises(LLMError):
        await service.process("hi", fake_llm('Sure! ```json\n{"steps":[]}\n```'))


@pytest.mark.asyncio
async def test_process_rejects_unknown_tool_before_execution(fake_llm) -> None:
    client = fake_llm('{"steps": [{"toolName": "pdf-extraction"}]}')
    service = build_service(_registry())

    with pytest.raises(ConfigError, match="Tool not found in registry: pdf-extraction"):
        await service.process("Read my pdf", client)

    assert len(client.calls) == 1
