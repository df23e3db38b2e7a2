"""
Pytest configuration and fixtures for ezsingbox tests
"""

import ipaddress
import random

import pytest

from ezsingbox.autoconfig.material import MaterialGenerator

TEST_IP = "203.0.113.1"
TEST_DOMAIN = "203-0-113-1.sslip.io"


# ═══════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════

@pytest.fixture
def test_ip():
    """Documentation range IPv4 address (TEST-NET-3)"""
    return TEST_IP


@pytest.fixture
def generator():
    """
    Material generator backed by a seeded PRNG

    Returns:
        MaterialGenerator: reproducible, every draw still differs from the previous one
    """
    rng = random.Random(1234)
    return MaterialGenerator(random_source=rng.randbytes)


@pytest.fixture
def ip_detector():
    """Stub public IP detector that counts its calls"""

    def detect():
        detect.calls += 1
        return ipaddress.ip_address(TEST_IP)

    detect.calls = 0
    return detect


@pytest.fixture
def failing_ip_detector():
    """IP detector that behaves like every echo service being down"""
    from ezsingbox.exceptions import AllServicesFailedError

    def detect():
        raise AllServicesFailedError()

    return detect


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No EZ_* variables and no stray .env file"""
    import os

    for key in list(os.environ):
        if key.startswith("EZ_") or key == "SING_BOX_BIN":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
