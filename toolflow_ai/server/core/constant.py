"""Server-wide constants."""

PROJECT_NAME = "ToolFlow-AI"
API_V1_STR = "/v1"
