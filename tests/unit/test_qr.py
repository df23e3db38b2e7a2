"""Unit tests for QR code rendering"""

import pytest

from ezsingbox.autoconfig.types import Protocol
from ezsingbox.qr import generate_qr_code, qr_file_name, qr_png_bytes, write_qr_codes
from ezsingbox.sharelink import ShareLink

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.mark.unit
class TestQrCode:
    """PNG rendering"""

    def test_png(self):
        buffer = generate_qr_code("anytls://pw@example.com:443?sni=example.com&insecure=0#a")
        assert buffer.tell() == 0
        assert buffer.read(8) == PNG_SIGNATURE

    def test_bytes(self):
        assert qr_png_bytes("hello").startswith(PNG_SIGNATURE)

    def test_file_name(self):
        link = ShareLink(protocol=Protocol.VLESS_REALITY, user="a/b c", link="vless://x")
        assert qr_file_name(link) == "vless-reality-a_b_c.png"

    def test_write(self, tmp_path):
        links = [
            ShareLink(protocol=Protocol.ANYTLS, user="alice", link="anytls://a"),
            ShareLink(protocol=Protocol.TUIC, user="alice", link="tuic://b"),
        ]
        out_dir = tmp_path / "qr"
        paths = write_qr_codes(links, out_dir)

        assert [p.name for p in paths] == ["anytls-alice.png", "tuic-alice.png"]
        for path in paths:
            assert path.read_bytes().startswith(PNG_SIGNATURE)
