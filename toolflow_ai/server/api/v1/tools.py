"""
Tools API Endpoints.

Lists the tools registered at startup together with their static
configuration (description, accepted inputs, estimated duration).
"""

from fastapi import APIRouter

from toolflow_ai.server.schemas import ToolsResponse
from toolflow_ai.server.services.deps import ServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=ToolsResponse,
    summary="List Tools",
    description="List every tool the planner may use.",
)
async def list_tools(service: ServiceDep) -> ToolsResponse:
    return ToolsResponse(tools=service.available_tools())
