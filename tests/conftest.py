"""
Pytest configuration and shared fixtures for presence agent tests.
"""

import os
import tempfile
from unittest.mock import Mock

import pytest

SAMPLE_CONFIG = """
server:
  register_url: "http://registry.test/register"
  deregister_url: "http://registry.test/deregister"
client:
  poll_interval: 0.01
  interface_patterns: ["eth", "enp"]
logging:
  level: "INFO|WARNING|ERROR|CRITICAL"
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep endpoint variables from the surrounding shell out of the tests."""
    monkeypatch.delenv("REGISTER_URL", raising=False)
    monkeypatch.delenv("DEREGISTER_URL", raising=False)
    monkeypatch.delenv("PRESENCE_AGENT_CONFIG", raising=False)


@pytest.fixture
def config_file():
    """Write a sample configuration to a temporary file."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(SAMPLE_CONFIG)
        temp_config_path = f.name

    try:
        yield temp_config_path
    finally:
        if os.path.exists(temp_config_path):
            os.unlink(temp_config_path)


@pytest.fixture
def mock_config():
    """Create a mock config manager with default settings."""
    config = Mock()
    config.get_hostname_override.return_value = None
    config.get_interface_patterns.return_value = ["eth", "enp"]
    config.get_log_level.return_value = "INFO|WARNING|ERROR|CRITICAL"
    config.get_request_timeout.return_value = 2.0
    config.get_tcp_keepalive.return_value = 60.0
    return config
