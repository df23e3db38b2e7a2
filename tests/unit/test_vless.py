"""Unit tests for the plain VLESS auto-builder"""

import pytest

from ezsingbox.autoconfig.base import BuilderState
from ezsingbox.autoconfig.vless import AutoVlessBuilder
from ezsingbox.exceptions import InvalidConfigError, MissingConfigError
from ezsingbox.singbox.transport import GrpcTransport, MultiplexInbound, TcpBrutal, WebSocketTransport
from ezsingbox.singbox.users import VlessFlow

FIXED_UUID = "0f0e0d0c-0b0a-4908-8706-050403020100"


@pytest.mark.unit
class TestVlessBuild:
    """Defaults and TLS modes"""

    def test_defaults(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).build()

        assert result.port == 443
        assert result.inbound.listen == "::"
        assert result.inbound.tag == "vless-in"
        assert [u.name for u in result.users] == ["default"]
        assert result.users[0].uuid
        assert result.inbound.users[0].uuid == result.users[0].uuid

    def test_acme_uses_sslip_domain(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).build()

        assert result.domain == "203-0-113-1.sslip.io"
        assert result.inbound.tls.server_name == "203-0-113-1.sslip.io"
        assert result.inbound.tls.acme.domain == ("203-0-113-1.sslip.io",)
        assert result.connection_info.server == test_ip
        assert result.connection_info.server_name == "203-0-113-1.sslip.io"
        assert result.connection_info.tls_enabled is True

    def test_acme_without_domain_or_ip(self, generator):
        with pytest.raises(MissingConfigError, match="VLESS"):
            AutoVlessBuilder(generator).build()

    def test_disabled_tls(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).disable_tls().build()

        assert result.inbound.tls is None
        assert "tls" not in result.inbound.to_dict()
        assert result.domain is None
        assert result.connection_info.tls_enabled is False
        assert result.connection_info.server_name is None
        assert result.connection_info.server == test_ip

    def test_disabled_tls_without_ip_uses_listen(self, generator):
        result = AutoVlessBuilder(generator).disable_tls().listen("10.0.0.1").build()
        assert result.connection_info.server == "10.0.0.1"

    def test_custom_cert(self, generator):
        result = (
            AutoVlessBuilder(generator)
            .custom_cert("/etc/ssl/cert.pem", "/etc/ssl/key.pem", server_name="vless.example.com")
            .build()
        )
        assert result.inbound.tls.certificate_path == "/etc/ssl/cert.pem"
        assert result.domain == "vless.example.com"
        assert result.connection_info.server == "vless.example.com"


@pytest.mark.unit
class TestVlessFlow:
    """Flow only where it was asked for"""

    def test_no_flow_by_default(self, generator, test_ip):
        users = AutoVlessBuilder(generator).public_ip(test_ip).add_user("alice").build().inbound.to_dict()["users"]

        assert set(users[0]) == {"name", "uuid"}

    def test_flow_per_user(self, generator, test_ip):
        result = (
            AutoVlessBuilder(generator)
            .public_ip(test_ip)
            .add_user("alice", flow=VlessFlow.XTLS_RPRX_VISION)
            .add_user("bob", uuid=FIXED_UUID)
            .build()
        )
        users = result.inbound.to_dict()["users"]

        assert users[0]["flow"] == "xtls-rprx-vision"
        assert "flow" not in users[1]
        assert users[1]["uuid"] == FIXED_UUID

    def test_flow_from_string(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).add_user("alice", flow="xtls-rprx-vision").build()
        assert result.inbound.users[0].flow is VlessFlow.XTLS_RPRX_VISION

    def test_default_xtls_vision_fills_missing_flows(self, generator, test_ip):
        result = (
            AutoVlessBuilder(generator)
            .public_ip(test_ip)
            .default_xtls_vision()
            .add_user("alice")
            .add_user_with_xtls_vision("bob")
            .build()
        )
        assert [u.flow for u in result.inbound.users] == [
            VlessFlow.XTLS_RPRX_VISION,
            VlessFlow.XTLS_RPRX_VISION,
        ]

    def test_default_xtls_vision_applies_to_default_user(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).default_xtls_vision().build()
        assert result.inbound.users[0].name == "default"
        assert result.inbound.users[0].flow is VlessFlow.XTLS_RPRX_VISION

    def test_unknown_flow_rejected_at_build(self, generator, test_ip):
        builder = AutoVlessBuilder(generator).public_ip(test_ip).add_user("alice", flow="xtls-rprx-direct")
        assert builder.state is BuilderState.ACCUMULATING
        with pytest.raises(InvalidConfigError, match="VLESS"):
            builder.build()


@pytest.mark.unit
class TestVlessTransport:
    """V2Ray transport and multiplex blocks"""

    def test_plain_tcp(self, generator, test_ip):
        result = AutoVlessBuilder(generator).public_ip(test_ip).build()
        data = result.inbound.to_dict()

        assert "transport" not in data
        assert "multiplex" not in data
        assert result.connection_info.transport_type is None

    def test_websocket(self, generator, test_ip):
        result = (
            AutoVlessBuilder(generator)
            .public_ip(test_ip)
            .transport(WebSocketTransport(path="/ws", max_early_data=2048))
            .build()
        )

        assert result.connection_info.transport_type == "ws"
        assert result.inbound.to_dict()["transport"] == {
            "type": "ws",
            "path": "/ws",
            "max_early_data": 2048,
        }

    def test_transport_from_dict(self, generator, test_ip):
        result = (
            AutoVlessBuilder(generator)
            .public_ip(test_ip)
            .transport({"type": "grpc", "service_name": "TunService", "idle_timeout": "15s"})
            .build()
        )

        assert isinstance(result.inbound.transport, GrpcTransport)
        assert result.connection_info.transport_type == "grpc"
        assert result.inbound.to_dict()["transport"]["idle_timeout"] == "15s"

    def test_unknown_transport_rejected_at_build(self, generator, test_ip):
        builder = AutoVlessBuilder(generator).public_ip(test_ip).transport({"type": "kcp"})
        with pytest.raises(InvalidConfigError):
            builder.build()

    def test_default_multiplex(self, generator, test_ip):
        data = AutoVlessBuilder(generator).public_ip(test_ip).multiplex().build().inbound.to_dict()
        assert data["multiplex"] == {"enabled": True}

    def test_multiplex_with_brutal(self, generator, test_ip):
        config = MultiplexInbound(
            enabled=True,
            padding=True,
            brutal=TcpBrutal(enabled=True, up_mbps=100, down_mbps=200),
        )
        data = AutoVlessBuilder(generator).public_ip(test_ip).multiplex(config).build().inbound.to_dict()

        assert data["multiplex"] == {
            "enabled": True,
            "padding": True,
            "brutal": {"enabled": True, "up_mbps": 100, "down_mbps": 200},
        }
