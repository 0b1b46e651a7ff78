"""Run the ToolFlow-AI server with uvicorn: ``python -m toolflow_ai.server``."""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run(
        "toolflow_ai.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
