"""
Configuration management for the presence agent.
Reads an optional YAML configuration file, a .env file and environment
variables, and provides typed accessors for the values the agent needs.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from src.presence_agent.core.errors import StartupConfigurationError

# Environment variables take precedence over the YAML file for these keys
ENV_OVERRIDES = {
    "server.register_url": "REGISTER_URL",
    "server.deregister_url": "DEREGISTER_URL",
}

DEFAULT_INTERFACE_PATTERNS = ["eth", "enp"]


class ConfigManager:
    """Manages configuration for the presence agent."""

    def __init__(self, config_file: str = "presence-agent.yaml", load_env: bool = True):
        self.logger = logging.getLogger(__name__)

        self.config_file = self._determine_config_path(config_file)
        self.config_data: Dict[str, Any] = {}
        self.env_file_loaded = self.load_env_file() if load_env else False
        self.load_config()

    def _determine_config_path(self, default_filename: str) -> str:
        """
        Determine configuration file path.

        Priority order:
        1. If absolute path provided (e.g., for tests), use it directly
        2. Platform-specific system config location
        3. ./presence-agent.yaml (local config)
        4. The provided filename
        """
        if os.path.isabs(default_filename):
            return default_filename

        if os.name == "nt":
            system_config = r"C:\ProgramData\PresenceAgent\presence-agent.yaml"
        else:
            system_config = "/etc/presence-agent.yaml"

        local_config = "./presence-agent.yaml"

        if os.path.exists(system_config):
            return system_config
        if os.path.exists(local_config):
            return local_config
        return default_filename

    def load_env_file(self) -> bool:
        """Load a .env file into the process environment if one exists."""
        env_file = find_dotenv(usecwd=True)
        if env_file and load_dotenv(env_file):
            self.logger.debug("Loaded environment from %s", env_file)
            return True
        return False

    def load_config(self) -> None:
        """Load configuration from the YAML file, if present."""
        if not os.path.exists(self.config_file):
            # Everything required can also come from the environment
            self.logger.debug(
                "Configuration file %s not found, using environment only",
                self.config_file,
            )
            self.config_data = {}
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as file:
                self.config_data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration file: {e}") from e

        if not isinstance(self.config_data, dict):
            raise ValueError(
                f"Configuration file {self.config_file} must contain a mapping"
            )

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration key (e.g., 'server.register_url')
            default: Default value if key is not found

        Returns:
            Environment override, configuration value or default
        """
        env_name = ENV_OVERRIDES.get(key_path)
        if env_name:
            env_value = os.environ.get(env_name)
            if env_value:
                return env_value

        keys = key_path.split(".")
        value = self.config_data

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def _get_required_url(self, key_path: str) -> str:
        value = self.get(key_path)
        if not value or not str(value).strip():
            raise StartupConfigurationError(
                f"Cannot load var {ENV_OVERRIDES[key_path]} "
                f"(or '{key_path}' in {self.config_file})"
            )
        return str(value).strip()

    def get_register_url(self) -> str:
        """Get the registration endpoint URL."""
        return self._get_required_url("server.register_url")

    def get_deregister_url(self) -> str:
        """Get the deregistration endpoint URL."""
        return self._get_required_url("server.deregister_url")

    def get_hostname_override(self) -> Optional[str]:
        """Get hostname override if specified."""
        return self.get("client.hostname_override")

    def _get_positive_seconds(self, key_path: str, default: float) -> float:
        value = self.get(key_path, default)
        try:
            seconds = float(value)
        except (TypeError, ValueError) as e:
            raise StartupConfigurationError(
                f"'{key_path}' must be a number of seconds, got {value!r}"
            ) from e
        if not seconds > 0:
            raise StartupConfigurationError(
                f"'{key_path}' must be greater than zero, got {value!r}"
            )
        return seconds

    def get_poll_interval(self) -> float:
        """Get the registration cycle period in seconds."""
        return self._get_positive_seconds("client.poll_interval", 2)

    def get_interface_patterns(self) -> List[str]:
        """Get the interface name substrings treated as physical interfaces."""
        patterns = self.get("client.interface_patterns", DEFAULT_INTERFACE_PATTERNS)
        if isinstance(patterns, str):
            patterns = [patterns]
        return [str(pattern) for pattern in patterns]

    def should_deregister_on_shutdown(self) -> bool:
        """Check if the deregister endpoint should be called on shutdown."""
        return bool(self.get("client.deregister_on_shutdown", False))

    def get_request_timeout(self) -> float:
        """Get the HTTP request timeout in seconds."""
        return self._get_positive_seconds("http.request_timeout", 2)

    def get_tcp_keepalive(self) -> float:
        """Get the HTTP keep-alive duration in seconds."""
        return self._get_positive_seconds("http.tcp_keepalive", 60)

    def get_log_level(self) -> str:
        """Get pipe-separated logging levels configuration."""
        return self.get("logging.level", "INFO|WARNING|ERROR|CRITICAL")

    def get_log_file(self) -> Optional[str]:
        """Get log file path if specified."""
        return self.get("logging.file")

    def get_log_format(self) -> str:
        """Get log format string."""
        return self.get("logging.format", "%(levelname)s: %(message)s")
