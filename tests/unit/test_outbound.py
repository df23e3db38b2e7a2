"""Unit tests for client outbounds"""

import pytest

from ezsingbox.autoconfig.multi import MultiProtocolBuilder
from ezsingbox.autoconfig.types import GeneratedUser, Protocol
from ezsingbox.exceptions import ConfigError
from ezsingbox.singbox.inbound import CongestionControl
from ezsingbox.singbox.outbound import build_proxy_outbound, pick_client_protocol, pick_user


@pytest.fixture
def result(generator, test_ip):
    return (
        MultiProtocolBuilder(generator)
        .public_ip(test_ip)
        .enable_all()
        .add_user("alice")
        .add_user("bob")
        .hy2_obfs("obfs-pw")
        .hy2_bandwidth(10, 20)
        .tuic_congestion(CongestionControl.BBR)
        .build()
    )


@pytest.mark.unit
class TestBuildProxyOutbound:
    """Outbound per protocol"""

    def test_anytls(self, result):
        user = result.anytls.users[0]
        outbound = build_proxy_outbound(result, Protocol.ANYTLS, user)
        assert outbound == {
            "type": "anytls",
            "tag": "proxy",
            "server": "203-0-113-1.sslip.io",
            "server_port": 443,
            "password": user.password,
            "tls": {"enabled": True, "server_name": "203-0-113-1.sslip.io"},
        }

    def test_hysteria2(self, result):
        outbound = build_proxy_outbound(result, Protocol.HYSTERIA2, result.hysteria2.users[0])
        assert outbound["server_port"] == 2053
        assert outbound["tls"]["alpn"] == ["h3"]
        assert outbound["obfs"] == {"type": "salamander", "password": "obfs-pw"}
        assert outbound["up_mbps"] == 10
        assert outbound["down_mbps"] == 20

    def test_hysteria2_plain(self, generator, test_ip):
        plain = MultiProtocolBuilder(generator).public_ip(test_ip).enable_hysteria2().build()
        outbound = build_proxy_outbound(plain, Protocol.HYSTERIA2, plain.hysteria2.users[0])
        assert "obfs" not in outbound
        assert "up_mbps" not in outbound

    def test_tuic(self, result):
        user = result.tuic.users[1]
        outbound = build_proxy_outbound(result, Protocol.TUIC, user)
        assert outbound["uuid"] == user.uuid
        assert outbound["password"] == user.password
        assert outbound["congestion_control"] == "bbr"
        assert outbound["server_port"] == 2083

    def test_vless_reality(self, result):
        vless = result.vless_reality
        outbound = build_proxy_outbound(result, Protocol.VLESS_REALITY, vless.users[0])
        assert outbound["server"] == "203.0.113.1"
        assert outbound["flow"] == "xtls-rprx-vision"
        assert outbound["tls"]["server_name"] == "www.microsoft.com"
        assert outbound["tls"]["utls"] == {"enabled": True, "fingerprint": "chrome"}
        assert outbound["tls"]["reality"] == {
            "enabled": True,
            "public_key": vless.public_key,
            "short_id": vless.short_id,
        }

    def test_protocol_not_enabled(self, generator, test_ip):
        only_anytls = MultiProtocolBuilder(generator).public_ip(test_ip).enable_anytls().build()
        with pytest.raises(ConfigError, match="not enabled"):
            build_proxy_outbound(only_anytls, Protocol.TUIC, only_anytls.anytls.users[0])

    def test_user_without_uuid(self, result):
        user = GeneratedUser(name="nouuid", password="pw")
        with pytest.raises(ConfigError, match="UUID"):
            build_proxy_outbound(result, Protocol.VLESS_REALITY, user)


@pytest.mark.unit
class TestPickers:
    """Client protocol and user selection"""

    def test_first_enabled_protocol(self, generator, test_ip):
        partial = MultiProtocolBuilder(generator).public_ip(test_ip).enable_tuic().enable_vless_reality().build()
        assert pick_client_protocol(partial) is Protocol.TUIC

    def test_preferred_protocol(self, result):
        assert pick_client_protocol(result, Protocol.VLESS_REALITY) is Protocol.VLESS_REALITY

    def test_nothing_enabled(self, generator, test_ip):
        empty = MultiProtocolBuilder(generator).public_ip(test_ip).build()
        assert pick_client_protocol(empty) is None

    def test_pick_user(self, result):
        users = result.anytls.users
        assert pick_user(users, "bob").name == "bob"
        assert pick_user(users, "carol").name == "alice"
        assert pick_user(users).name == "alice"
        assert pick_user(()) is None
