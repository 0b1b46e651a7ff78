from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema


class PipelineStep(BaseSchema):
    """One planned tool invocation. Immutable once produced by the planner."""

    model_config = ConfigDict(frozen=True)

    tool_name: str = Field(min_length=1)
    reason: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class ExecutionPlan(BaseSchema):
    """Ordered, non-empty sequence of steps produced for one instruction."""

    model_config = ConfigDict(frozen=True)

    steps: List[PipelineStep] = Field(min_length=1)
    estimated_duration_ms: Optional[float] = None

    def tool_names(self) -> List[str]:
        return [s.tool_name for s in self.steps]


class CapabilityConfig(BaseSchema):
    """Static per-tool metadata owned by the capability registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    version: str = "1.0.0"
    description: str = ""
    input_types: List[str] = Field(default_factory=list)
    output_type: str = "text"
    estimated_duration_ms: int = Field(default=0, ge=0)
    priority: int = 0


class FileMetadata(BaseSchema):
    """File description handed to the planner; the content never reaches the prompt."""

    model_config = ConfigDict(frozen=True)

    mimetype: str
    filename: str
    size: int = Field(ge=0)


@dataclass(frozen=True)
class FileRef:
    """An uploaded file as seen by capabilities."""

    content: bytes
    mimetype: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)

    def metadata(self) -> FileMetadata:
        return FileMetadata(mimetype=self.mimetype, filename=self.filename, size=self.size)


class StepResult(BaseSchema):
    """Outcome of one executed step; appended to the run's result log and never mutated."""

    model_config = ConfigDict(frozen=True)

    step_index: int = Field(ge=0)
    tool_name: str
    success: bool
    output: Any = None
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class PipelineMetadata(BaseSchema):
    total_duration_ms: int = Field(ge=0)
    steps_completed: int = Field(ge=0)
    total_steps: int = Field(ge=0)


class PipelineResult(BaseSchema):
    """Terminal artifact of one pipeline run. Returned to the caller, never persisted."""

    success: bool
    steps: List[StepResult] = Field(default_factory=list)
    final_output: Any = None
    metadata: PipelineMetadata
    error: Optional[str] = None
