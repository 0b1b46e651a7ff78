"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# LLM Provider Configuration Models
# =====================================================================


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    base_url: Optional[str] = Field(
        default=None, alias="OPENAI_BASE_URL", description="Custom OpenAI API base URL (optional)"
    )

    model_config = {"populate_by_name": True}


class AnthropicConfig(BaseModel):
    """Anthropic API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="ANTHROPIC_API_KEY", description="Anthropic API key for authentication"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # ToolFlow-AI Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="ToolFlow-AI server host address to bind to",
        alias="TOOLFLOW_AI_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="ToolFlow-AI server port number",
        alias="TOOLFLOW_AI_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="TOOLFLOW_AI_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="TOOLFLOW_AI_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="TOOLFLOW_AI_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Write DEBUG logs to <log_file_dir>/toolflow_ai.log",
        alias="TOOLFLOW_AI_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Request Processing Configuration
    # =====================================================================
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
        alias="MAX_FILE_SIZE",
    )

    # =====================================================================
    # Planning & Pipeline Configuration
    # =====================================================================
    llm_models_config_path: str = Field(
        default="config/llm-models.json",
        description="Path of the JSON file declaring model aliases",
        alias="LLM_MODELS_CONFIG_PATH",
    )
    planner_fallback_tool: str = Field(
        default="simple-ask",
        description="Tool the planner is told to use for plain questions without files",
        alias="PLANNER_FALLBACK_TOOL",
    )
    step_timeout_multiplier: int = Field(
        default=6,
        ge=1,
        description="Per-step deadline as a multiple of the tool's estimated duration",
        alias="STEP_TIMEOUT_MULTIPLIER",
    )
    default_step_timeout_ms: int = Field(
        default=120_000,
        ge=1,
        description="Per-step deadline used when a tool declares no estimated duration",
        alias="DEFAULT_STEP_TIMEOUT_MS",
    )

    # =====================================================================
    # Capability Discovery Configuration
    # =====================================================================
    capability_modules: List[str] = Field(
        default_factory=list,
        description="Dotted module paths exposing CAPABILITIES (or capability) to register at startup",
        alias="CAPABILITY_MODULES",
    )
    capability_entry_point_group: Optional[str] = Field(
        default="toolflow_ai.capabilities",
        description="Entry-point group scanned for third-party capabilities (empty disables)",
        alias="CAPABILITY_ENTRY_POINT_GROUP",
    )

    # =====================================================================
    # LLM Provider Credentials
    # =====================================================================
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")

    # =====================================================================
    # CORS
    # =====================================================================
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: List[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: List[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def anthropic(self) -> AnthropicConfig:
        """Get Anthropic configuration from environment variables."""
        return AnthropicConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
