"""
Exception handlers for the ToolFlow-AI server.

This package contains custom exception handlers for application errors,
request validation errors and unhandled exceptions, and a setup function to
register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
