"""Typed data model shared by the planner, the registry and the executor."""

from .base import BaseSchema
from .domain import (
    CapabilityConfig,
    ExecutionPlan,
    FileMetadata,
    FileRef,
    PipelineMetadata,
    PipelineResult,
    PipelineStep,
    StepResult,
)

__all__ = [
    "BaseSchema",
    "CapabilityConfig",
    "ExecutionPlan",
    "FileMetadata",
    "FileRef",
    "PipelineMetadata",
    "PipelineResult",
    "PipelineStep",
    "StepResult",
]
