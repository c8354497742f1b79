"""
Configuration module for Form Engine.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class FormEngineConfig:
    """Configuration settings for Form Engine."""

    # Storage settings
    storage_path: str = "form-builder-forms.json"

    # Derivation refresh loop: 0 means "one pass per field in the schema"
    max_refresh_passes: int = 0

    # Logging
    log_level: str = "INFO"

    # MCP Server settings
    mcp_transport: str = "stdio"  # stdio or sse
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080

    # Output settings
    indent_json_output: int = 2

    @classmethod
    def from_env(cls) -> "FormEngineConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            storage_path=os.getenv("FORM_ENGINE_STORAGE_PATH", _defaults.storage_path),
            max_refresh_passes=int(
                os.getenv("FORM_ENGINE_MAX_REFRESH_PASSES", str(_defaults.max_refresh_passes))
            ),
            log_level=os.getenv("FORM_ENGINE_LOG_LEVEL", _defaults.log_level).upper(),
            mcp_transport=os.getenv("MCP_TRANSPORT", _defaults.mcp_transport),
            mcp_host=os.getenv("MCP_HOST", _defaults.mcp_host),
            mcp_port=int(os.getenv("MCP_PORT", str(_defaults.mcp_port))),
        )


config = FormEngineConfig.from_env()


def get_config() -> FormEngineConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormEngineConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
