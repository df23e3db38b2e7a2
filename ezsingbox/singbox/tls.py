"""
Inbound (server side) TLS block.

Only the fields the auto-builders populate are modelled here.
Docs: https://sing-box.sagernet.org/configuration/shared/tls/
"""

from typing import Optional, Tuple

from ezsingbox.singbox.base import SingBoxModel
from ezsingbox.singbox.duration import Duration


class AcmeConfig(SingBoxModel):
    """ACME automatic certificate block"""

    domain: Optional[Tuple[str, ...]] = None
    data_directory: Optional[str] = None
    default_server_name: Optional[str] = None
    email: Optional[str] = None
    provider: Optional[str] = None
    disable_http_challenge: Optional[bool] = None
    disable_tls_alpn_challenge: Optional[bool] = None
    alternative_http_port: Optional[int] = None
    alternative_tls_port: Optional[int] = None


class RealityHandshake(SingBoxModel):
    """Server whose real TLS handshake REALITY borrows"""

    server: str
    server_port: Optional[int] = None


class RealityInboundConfig(SingBoxModel):
    enabled: Optional[bool] = None
    handshake: Optional[RealityHandshake] = None
    private_key: Optional[str] = None
    short_id: Optional[Tuple[str, ...]] = None
    max_time_difference: Optional[Duration] = None


class InboundTlsConfig(SingBoxModel):
    enabled: Optional[bool] = None
    server_name: Optional[str] = None
    alpn: Optional[Tuple[str, ...]] = None
    min_version: Optional[str] = None
    max_version: Optional[str] = None
    certificate_path: Optional[str] = None
    key_path: Optional[str] = None
    acme: Optional[AcmeConfig] = None
    reality: Optional[RealityInboundConfig] = None
