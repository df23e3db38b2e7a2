"""Unit tests for whole sing-box config documents"""

import json

import pytest

from ezsingbox.autoconfig.multi import MultiProtocolBuilder
from ezsingbox.singbox.full import SingBoxConfig


@pytest.mark.unit
class TestServerConfig:
    """server_default()"""

    def test_structure(self, generator, test_ip):
        result = MultiProtocolBuilder(generator).public_ip(test_ip).enable_all().build()
        config = SingBoxConfig.server_default(result.inbounds(), "warn").to_dict()

        assert config["log"] == {"level": "warn", "timestamp": True}
        assert [s["tag"] for s in config["dns"]["servers"]] == ["cloudflare", "google"]
        assert config["dns"]["servers"][0]["server"] == "1.1.1.1"
        assert config["dns"]["servers"][1]["path"] == "/dns-query"
        assert config["dns"]["final"] == "cloudflare"
        assert [i["type"] for i in config["inbounds"]] == ["anytls", "hysteria2", "tuic", "vless"]
        assert config["outbounds"] == [
            {"type": "direct", "tag": "direct"},
            {"type": "block", "tag": "block"},
        ]
        assert config["route"] == {
            "rules": [],
            "default_domain_resolver": "cloudflare",
            "final": "direct",
        }

    def test_plain_dict_inbounds(self):
        config = SingBoxConfig.server_default([{"type": "direct", "tag": "in"}])
        assert config.inbounds == [{"type": "direct", "tag": "in"}]
        assert config.log["level"] == "info"

    def test_to_json_is_pretty(self):
        text = SingBoxConfig.server_default([]).to_json()
        assert text.startswith("{\n  \"log\"")
        assert json.loads(text)["inbounds"] == []


@pytest.mark.unit
class TestClientConfig:
    """client_default()"""

    def test_structure(self):
        proxy = {"type": "anytls", "tag": "proxy", "server": "example.com"}
        config = SingBoxConfig.client_default(proxy, "info", "0.0.0.0", 1080).to_dict()

        assert config["inbounds"] == [{
            "type": "mixed",
            "tag": "mixed-in",
            "listen": "0.0.0.0",
            "listen_port": 1080,
        }]
        assert [o["tag"] for o in config["outbounds"]] == ["proxy", "direct", "block"]
        assert config["route"]["final"] == "proxy"
