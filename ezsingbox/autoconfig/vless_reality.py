"""
VLESS + REALITY auto-builder.

REALITY borrows the TLS handshake of a real site, so there is no certificate
and no TlsMode here: every build generates a fresh X25519 keypair and short
ID. All users get the xtls-rprx-vision flow.
"""

import logging
from typing import Optional

from ezsingbox.autoconfig.base import BaseAutoBuilder
from ezsingbox.autoconfig.results import (
    AutoDefaultResult,
    VlessRealityConnectionInfo,
    VlessRealityResult,
)
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.singbox.inbound import VlessInbound
from ezsingbox.singbox.tls import InboundTlsConfig, RealityHandshake, RealityInboundConfig
from ezsingbox.singbox.users import VlessFlow, VlessUser

logger = logging.getLogger(__name__)

DEFAULT_HANDSHAKE_SERVER = "www.microsoft.com"
DEFAULT_HANDSHAKE_PORT = 443


class AutoVlessRealityBuilder(BaseAutoBuilder):
    """VLESS inbound secured by REALITY"""

    protocol = Protocol.VLESS_REALITY

    def __init__(self, generator=None, ip_detector=None):
        super().__init__(generator, ip_detector)
        self._handshake_server = DEFAULT_HANDSHAKE_SERVER
        self._handshake_port = DEFAULT_HANDSHAKE_PORT
        self._server_name: Optional[str] = None

    def add_user(self, name: str, uuid: Optional[str] = None):
        return self._add_user(name, uuid=uuid)

    def handshake(self, server: str, port: int = DEFAULT_HANDSHAKE_PORT):
        """Site whose TLS handshake is borrowed"""
        self._handshake_server = server
        self._handshake_port = port
        return self

    def server_name(self, name: str):
        """SNI clients must send; defaults to the handshake server"""
        self._server_name = name
        return self

    def _generate(self) -> VlessRealityResult:
        ip = self._resolve_public_ip()
        port = self._resolve_port()
        listen = self._resolve_listen()
        users = self._resolve_users()
        server_name = self._server_name or self._handshake_server

        keypair = self._generator.reality_keypair()
        short_id = self._generator.short_id()

        tls = InboundTlsConfig(
            enabled=True,
            server_name=server_name,
            reality=RealityInboundConfig(
                enabled=True,
                handshake=RealityHandshake(
                    server=self._handshake_server,
                    server_port=self._handshake_port,
                ),
                private_key=keypair.private_key,
                short_id=[short_id],
            ),
        )
        inbound = VlessInbound(
            tag=self._resolve_tag(),
            listen=listen,
            listen_port=port,
            users=[
                VlessUser(name=u.name, uuid=u.uuid, flow=VlessFlow.XTLS_RPRX_VISION)
                for u in users
            ],
            tls=tls,
        )

        # REALITY needs no DNS name, the IP itself is the address clients use
        domain = str(ip) if ip is not None else None
        connection_info = VlessRealityConnectionInfo(
            server=self._connection_server(ip, domain, listen),
            port=port,
            server_name=server_name,
            tls_enabled=True,
            public_key=keypair.public_key,
            short_id=short_id,
            flow=VlessFlow.XTLS_RPRX_VISION.value,
        )

        logger.info(
            f"VLESS-Reality inbound generated: {connection_info.server}:{port}, "
            f"{len(users)} user(s), handshake={self._handshake_server}:{self._handshake_port}"
        )
        return VlessRealityResult(
            info=AutoDefaultResult(
                public_ip=domain,
                domain=domain,
                port=port,
                users=users,
            ),
            inbound=inbound,
            connection_info=connection_info,
            private_key=keypair.private_key,
            public_key=keypair.public_key,
            short_id=short_id,
            handshake_server=self._handshake_server,
            handshake_port=self._handshake_port,
        )
