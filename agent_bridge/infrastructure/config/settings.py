"""Application settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    List values are read as JSON, e.g.
    ``AGENT_BRIDGE_ADDITIONAL_PATHS='["/opt/agent/bin"]'``.
    """

    # Agent binary
    binary_name: str = "claude"
    binary_path: str | None = None
    additional_paths: list[str] = []

    # Launch defaults
    default_model: str | None = None
    extra_args: list[str] = []

    # Process handling
    terminate_grace_seconds: float = 2.0
    stream_read_limit: int = 16 * 1024 * 1024

    # Tools answered without asking the user ("*" = every non-interactive tool)
    auto_approve_tools: list[str] = []

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_prefix = "AGENT_BRIDGE_"
        env_file = ".env"
