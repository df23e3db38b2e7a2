"""
Fixtures for integration tests

Settings point every output into a temporary directory
"""

import pytest

from ezsingbox.config.settings import Settings


@pytest.fixture(scope="function")
def output_dir(clean_env):
    """Working directory for generated files"""
    return clean_env


@pytest.fixture(scope="function")
def test_settings(output_dir, test_ip):
    """Settings with a fixed public IP and all outputs under output_dir"""
    return Settings(
        public_ip=test_ip,
        config_path=str(output_dir / "server" / "config.json"),
        client_config_path=str(output_dir / "client" / "config.json"),
        qr_dir=str(output_dir / "qr"),
        print_config=False,
    )


@pytest.fixture(scope="function")
def test_env_vars(output_dir, test_ip, monkeypatch):
    """EZ_* variables for driving the CLI entry point"""
    monkeypatch.setenv("EZ_PUBLIC_IP", test_ip)
    monkeypatch.setenv("EZ_CONFIG_PATH", str(output_dir / "config.json"))
    monkeypatch.setenv("EZ_PRINT_DETAILS", "false")
    return output_dir
