"""
Core utilities for ToolFlow-AI.

This package provides functionality shared by the agent core and the server:
logging configuration and the application error taxonomy.
"""

from toolflow_ai.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
