"""Unit tests for the TUIC auto-builder"""

import logging
import uuid

import pytest

from ezsingbox.autoconfig.tuic import AutoTuicBuilder
from ezsingbox.exceptions import InvalidConfigError, MissingConfigError
from ezsingbox.singbox.duration import Duration
from ezsingbox.singbox.inbound import CongestionControl


@pytest.mark.unit
class TestTuicBuild:
    """TUIC options"""

    def test_bbr_and_uuids(self, generator, test_ip):
        result = (
            AutoTuicBuilder(generator)
            .public_ip(test_ip)
            .add_user("alice")
            .add_user("bob", uuid="6f1c2d3e-1111-4222-8333-444455556666", password="pw")
            .bbr()
            .build()
        )

        assert result.congestion_control is CongestionControl.BBR
        assert all(u.uuid for u in result.users)
        assert uuid.UUID(result.users[0].uuid).version == 4
        assert result.users[1].uuid == "6f1c2d3e-1111-4222-8333-444455556666"
        assert result.users[1].password == "pw"

    def test_default_user_has_uuid(self, generator, test_ip):
        result = AutoTuicBuilder(generator).public_ip(test_ip).build()
        assert len(result.users) == 1
        assert result.users[0].name == "default"
        assert result.users[0].uuid
        assert result.users[0].password

    def test_defaults(self, generator, test_ip):
        result = AutoTuicBuilder(generator).public_ip(test_ip).build()
        data = result.inbound.to_dict()

        assert result.congestion_control is CongestionControl.CUBIC
        assert data["type"] == "tuic"
        assert data["tag"] == "tuic-in"
        assert data["congestion_control"] == "cubic"
        assert "zero_rtt_handshake" not in data
        assert "auth_timeout" not in data
        assert set(data["users"][0]) == {"name", "uuid", "password"}

    def test_new_reno(self, generator, test_ip):
        result = AutoTuicBuilder(generator).public_ip(test_ip).new_reno().build()
        assert result.inbound.to_dict()["congestion_control"] == "new_reno"

    def test_durations(self, generator, test_ip):
        result = (
            AutoTuicBuilder(generator)
            .public_ip(test_ip)
            .auth_timeout("3s")
            .heartbeat(Duration.from_secs(10))
            .build()
        )
        data = result.inbound.to_dict()
        assert data["auth_timeout"] == "3s"
        assert data["heartbeat"] == "10s"

    def test_invalid_duration_surfaces_at_build(self, generator, test_ip):
        builder = AutoTuicBuilder(generator).public_ip(test_ip).auth_timeout("3 seconds")
        with pytest.raises(InvalidConfigError, match="auth_timeout"):
            builder.build()

    def test_zero_rtt_is_explicit_and_warned(self, generator, test_ip, caplog):
        with caplog.at_level(logging.WARNING, logger="ezsingbox.autoconfig.tuic"):
            result = AutoTuicBuilder(generator).public_ip(test_ip).zero_rtt_handshake().build()

        assert result.inbound.to_dict()["zero_rtt_handshake"] is True
        assert result.connection_info.zero_rtt_handshake is True
        assert "zero-RTT" in caplog.text


@pytest.mark.unit
class TestCongestionControlParse:
    """User input for congestion control"""

    @pytest.mark.parametrize("text, expected", [
        ("bbr", CongestionControl.BBR),
        ("CUBIC", CongestionControl.CUBIC),
        ("new_reno", CongestionControl.NEW_RENO),
        ("newreno", CongestionControl.NEW_RENO),
        ("vegas", None),
    ])
    def test_parse(self, text, expected):
        assert CongestionControl.parse(text) is expected


@pytest.mark.unit
class TestTuicTls:
    """TLS is mandatory"""

    def test_disabled_tls_rejected(self, generator, test_ip):
        with pytest.raises(InvalidConfigError, match="must enable TLS"):
            AutoTuicBuilder(generator).public_ip(test_ip).disable_tls().build()

    def test_acme_without_ip(self, generator):
        with pytest.raises(MissingConfigError, match="ACME"):
            AutoTuicBuilder(generator).build()

    def test_acme_with_explicit_domain_needs_no_ip(self, generator):
        result = AutoTuicBuilder(generator).acme(domain="tuic.example.com").build()
        assert result.domain == "tuic.example.com"
        assert result.public_ip is None
        assert result.connection_info.server == "tuic.example.com"
