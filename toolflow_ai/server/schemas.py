"""
API Schemas.

This module contains Pydantic models used for API responses. Request input
arrives as multipart form fields and is declared on the route itself.
"""

from typing import List, Optional

from pydantic import Field

from toolflow_ai.agent_core.schemas.base import BaseSchema
from toolflow_ai.agent_core.schemas.domain import (
    CapabilityConfig,
    ExecutionPlan,
    PipelineResult,
)


class ToolsResponse(BaseSchema):
    """Registered tools and their static configuration."""

    tools: List[CapabilityConfig]


class ProcessResponse(BaseSchema):
    """
    Outcome of one processed instruction.

    ``success`` mirrors ``result.success``; the HTTP status is 200 when the
    pipeline succeeded and 400 when a step failed.
    """

    success: bool
    request_id: str = Field(description="Correlation id of the request.", examples=["req_1718000000000_a1b2c3d4e"])
    plan: ExecutionPlan
    result: PipelineResult
    error: Optional[str] = None


class ErrorDetail(BaseSchema):
    code: str
    message: str
    request_id: Optional[str] = None


class ErrorResponse(BaseSchema):
    """Body returned for requests that failed before or outside pipeline execution."""

    success: bool = False
    error: ErrorDetail
