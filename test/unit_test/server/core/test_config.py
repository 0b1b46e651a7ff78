from __future__ import annotations

import pytest

from toolflow_ai.server.core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("STEP_TIMEOUT_MULTIPLIER", "DEFAULT_STEP_TIMEOUT_MS", "PLANNER_FALLBACK_TOOL", "MAX_FILE_SIZE"):
        monkeypatch.delenv(key, raising=False)

    s = Settings(_env_file=None)

    assert s.step_timeout_multiplier == 6
    assert s.default_step_timeout_ms == 120_000
    assert s.planner_fallback_tool == "simple-ask"
    assert s.max_file_size == 10 * 1024 * 1024
    assert s.capability_entry_point_group == "toolflow_ai.capabilities"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STEP_TIMEOUT_MULTIPLIER", "3")
    monkeypatch.setenv("DEFAULT_STEP_TIMEOUT_MS", "5000")
    monkeypatch.setenv("CAPABILITY_MODULES", '["my_tools.caps"]')
    monkeypatch.setenv("TOOLFLOW_AI_LOG_LEVEL", "DEBUG")

    s = Settings(_env_file=None)

    assert s.step_timeout_multiplier == 3
    assert s.default_step_timeout_ms == 5000
    assert s.capability_modules == ["my_tools.caps"]
    assert s.log_level == "DEBUG"


def test_grouped_provider_configs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_BASE_URL", "http://mock-openai/v1")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

    s = Settings(_env_file=None)

    assert s.openai.api_key == "sk-test"
    assert s.openai.base_url == "http://mock-openai/v1"
    assert s.anthropic.api_key == "sk-ant-test"
    assert s.cors.origins == ["*"]
