"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter

from toolflow_ai import __version__

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": __version__, "api_version": "v1"}
