"""
Server configuration for todoist-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (todoist-mcp.toml)
3. Default values (lowest priority)

Environment variables:
- TODOIST_API_TOKEN: Bearer token for the Todoist API (required, env only)
- TODOIST_MCP_API_BASE_URL: Base URL of the Todoist API
- TODOIST_MCP_TIMEOUT: HTTP request timeout in seconds
- TODOIST_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- TODOIST_MCP_LOG_FORMAT: Log output format (structured, human)
- TODOIST_MCP_CONFIG_FILE: Path to TOML config file

The API token is read from the environment only; an [api] token key in the
TOML file is ignored with a warning.
"""

import os
import logging
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from todoist_mcp.core.logging_config import configure_logging


logger = logging.getLogger(__name__)

API_TOKEN_ENV = "TODOIST_API_TOKEN"
DEFAULT_API_BASE_URL = "https://api.todoist.com/api/v1"
DEFAULT_TIMEOUT = 30.0
_VALID_LOG_FORMATS = {"structured", "human"}


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("todoist-mcp")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


class ConfigurationError(Exception):
    """Raised when required startup configuration is missing or invalid."""


def _normalize_log_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in _VALID_LOG_FORMATS:
        logger.warning(
            "Invalid log format '%s'. Falling back to 'structured'. Valid options: %s",
            value,
            ", ".join(sorted(_VALID_LOG_FORMATS)),
        )
        return "structured"
    return normalized


@dataclass
class ServerConfig:
    """Server configuration with support for env vars and TOML overrides."""

    # Remote service
    api_token: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "structured"

    # Server configuration
    server_name: str = "todoist-mcp-server"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("TODOIST_MCP_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in ["todoist-mcp.toml", ".todoist-mcp.toml"]:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "api" in data:
                api = data["api"]
                if "base_url" in api:
                    self.api_base_url = str(api["base_url"])
                if "timeout" in api:
                    self.request_timeout = float(api["timeout"])
                if "token" in api:
                    logger.warning(
                        "Ignoring [api] token in %s; set %s instead",
                        path,
                        API_TOKEN_ENV,
                    )

            if "logging" in data:
                log = data["logging"]
                if "level" in log:
                    self.log_level = str(log["level"]).upper()
                if "format" in log:
                    self.log_format = _normalize_log_format(str(log["format"]))

            if "server" in data:
                srv = data["server"]
                if "name" in srv:
                    self.server_name = str(srv["name"])

            logger.debug(f"Loaded configuration from {path}")
        except (tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            logger.error(f"Failed to load config from {path}: {e}")

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if token := os.environ.get(API_TOKEN_ENV):
            self.api_token = token

        if base_url := os.environ.get("TODOIST_MCP_API_BASE_URL"):
            self.api_base_url = base_url

        if timeout := os.environ.get("TODOIST_MCP_TIMEOUT"):
            try:
                self.request_timeout = float(timeout)
            except ValueError:
                logger.warning("Ignoring non-numeric TODOIST_MCP_TIMEOUT=%r", timeout)

        if level := os.environ.get("TODOIST_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if log_format := os.environ.get("TODOIST_MCP_LOG_FORMAT"):
            self.log_format = _normalize_log_format(log_format)

    def require_api_token(self) -> str:
        """Return the API token or raise ConfigurationError if it is missing."""
        token = (self.api_token or "").strip()
        if not token:
            raise ConfigurationError(
                f"{API_TOKEN_ENV} environment variable is required"
            )
        return token

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(level=self.log_level, format=self.log_format)


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
