"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
registers the exception handlers and includes all API routers. It serves as
the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolflow_ai import __version__
from toolflow_ai.core.logging_config import get_logger, setup_logging

from .api.v1 import health, process, tools
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .services.deps import get_service

# Initialize logging
setup_logging(enable_file=settings.enable_file_logging)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Capability discovery runs at startup. A registry without tools is a fatal
    configuration error, so the exception is not caught here.
    """
    logger.info("Starting up ToolFlow-AI Server...")
    service = get_service()
    logger.info(f"Registered tools: {', '.join(service.registry.names())}")

    yield

    logger.info("Shutting down ToolFlow-AI Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ToolFlow-AI Server API

    Turns a natural-language instruction (plus an optional file) into a short
    plan of tools, executes the plan step by step and returns the result.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(tools.router, prefix=f"{constant.API_V1_STR}/tools", tags=["tools"])
app.include_router(process.router, prefix=f"{constant.API_V1_STR}/process", tags=["process"])
