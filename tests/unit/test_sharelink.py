"""Unit tests for share links"""

import pytest

from ezsingbox.autoconfig.multi import MultiProtocolBuilder
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.sharelink import (
    anytls_link,
    hysteria2_link,
    import_remote_profile_uri,
    percent_encode,
    share_links,
    tuic_link,
    vless_reality_link,
)

UUID = "6f0c1c9a-8a6e-4b2a-9d57-1c0f3f9b2e10"


@pytest.mark.unit
class TestPercentEncode:
    """RFC 3986 unreserved set"""

    def test_unreserved_untouched(self):
        assert percent_encode("AZaz09-_.~") == "AZaz09-_.~"

    def test_reserved_encoded(self):
        assert percent_encode("a b/c+d=e#f") == "a%20b%2Fc%2Bd%3De%23f"

    def test_utf8(self):
        assert percent_encode("é") == "%C3%A9"


@pytest.mark.unit
class TestLinkFormats:
    """Exact link layouts"""

    def test_anytls(self):
        link = anytls_link("example.com", 443, "pa ss", "example.com", "alice")
        assert link == "anytls://pa%20ss@example.com:443?sni=example.com&insecure=0#alice"

    def test_hysteria2(self):
        link = hysteria2_link("example.com", 2053, "pw", "example.com", "bob")
        assert link == "hysteria2://pw@example.com:2053?sni=example.com&insecure=0#bob"

    def test_hysteria2_obfs(self):
        link = hysteria2_link("example.com", 2053, "pw", "example.com", "bob", "ob/fs")
        assert link == (
            "hysteria2://pw@example.com:2053?sni=example.com&insecure=0"
            "&obfs=salamander&obfs-password=ob%2Ffs#bob"
        )

    def test_tuic(self):
        link = tuic_link("example.com", 2083, UUID, "pw", "example.com", "carol", "cubic")
        assert link == (
            f"tuic://{UUID}:pw@example.com:2083?sni=example.com"
            "&congestion_control=cubic&udp_relay_mode=native&alpn=h3#carol"
        )

    def test_tuic_default_congestion_control(self):
        link = tuic_link("example.com", 2083, UUID, "pw", "example.com", "carol")
        assert "congestion_control=bbr" in link

    def test_vless_reality(self):
        link = vless_reality_link("203.0.113.1", 2096, UUID, "PUBKEY", "abcd", "www.microsoft.com", "dave")
        assert link == (
            f"vless://{UUID}@203.0.113.1:2096?encryption=none&type=tcp&security=reality"
            "&pbk=PUBKEY&sid=abcd&sni=www.microsoft.com&fp=chrome&flow=xtls-rprx-vision#dave"
        )

    def test_ipv6_host_bracketed(self):
        link = anytls_link("2001:db8::1", 443, "pw", "example.com", "alice")
        assert link.startswith("anytls://pw@[2001:db8::1]:443?")

    def test_import_remote_profile(self):
        uri = import_remote_profile_uri("https://example.com/sub?id=1", "my profile")
        assert uri == (
            "sing-box://import-remote-profile"
            "?url=https%3A%2F%2Fexample.com%2Fsub%3Fid%3D1#my%20profile"
        )


@pytest.mark.unit
class TestShareLinks:
    """Links for a whole build result"""

    def test_one_link_per_user_and_protocol(self, generator, test_ip):
        result = (
            MultiProtocolBuilder(generator)
            .public_ip(test_ip)
            .enable_all()
            .add_user("alice")
            .add_user("bob")
            .build()
        )
        links = share_links(result)

        assert len(links) == 8
        assert [link.protocol for link in links[::2]] == list(Protocol)
        assert [link.user for link in links[:2]] == ["alice", "bob"]

    def test_hosts(self, generator, test_ip):
        result = MultiProtocolBuilder(generator).public_ip(test_ip).enable_all().build()
        links = {link.protocol: link.link for link in share_links(result)}

        assert "@203-0-113-1.sslip.io:443?" in links[Protocol.ANYTLS]
        assert "@203-0-113-1.sslip.io:2053?" in links[Protocol.HYSTERIA2]
        assert "@203-0-113-1.sslip.io:2083?" in links[Protocol.TUIC]
        assert "@203.0.113.1:2096?" in links[Protocol.VLESS_REALITY]
        assert f"pbk={result.vless_reality.public_key}" in links[Protocol.VLESS_REALITY]

    def test_obfs_included(self, generator, test_ip):
        result = MultiProtocolBuilder(generator).public_ip(test_ip).enable_hysteria2().hy2_obfs("secret").build()
        (link,) = share_links(result)
        assert "&obfs=salamander&obfs-password=secret" in link.link

    def test_nothing_enabled(self, generator, test_ip):
        result = MultiProtocolBuilder(generator).public_ip(test_ip).build()
        assert share_links(result) == []
