"""
Plain VLESS auto-builder.

Unlike VLESS-Reality this one follows the TlsMode like AnyTLS does (ACME by
default, custom certificate, or no TLS at all), and can carry a V2Ray
transport and multiplexing:

    result = (
        AutoVlessBuilder()
        .public_ip("203.0.113.1")
        .add_user("alice", flow=VlessFlow.XTLS_RPRX_VISION)
        .transport(WebSocketTransport(path="/ws"))
        .build()
    )
"""

import logging
from typing import Optional

from ezsingbox.autoconfig.base import CertificateAutoBuilder
from ezsingbox.autoconfig.results import AutoDefaultResult, VlessConnectionInfo, VlessResult
from ezsingbox.singbox.inbound import VlessInbound
from ezsingbox.singbox.transport import MultiplexInbound, V2RayTransport
from ezsingbox.singbox.users import VlessFlow, VlessUser

logger = logging.getLogger(__name__)


class AutoVlessBuilder(CertificateAutoBuilder):
    """VLESS inbound over regular TLS (or none); no flow unless asked for"""

    # not part of the Protocol enum, MultiProtocolBuilder only serves VLESS-Reality
    display_name = "VLESS"
    default_tag = "vless-in"
    requires_uuid = True

    def __init__(self, generator=None, ip_detector=None):
        super().__init__(generator, ip_detector)
        self._default_xtls_vision = False
        self._multiplex: Optional[MultiplexInbound] = None
        self._transport: Optional[V2RayTransport] = None

    def add_user(self, name: str, uuid: Optional[str] = None, flow: Optional[VlessFlow] = None):
        return self._add_user(name, uuid=uuid, flow=flow)

    def add_user_with_xtls_vision(self, name: str, uuid: Optional[str] = None):
        return self.add_user(name, uuid=uuid, flow=VlessFlow.XTLS_RPRX_VISION)

    def default_xtls_vision(self):
        """xtls-rprx-vision for every user that has no flow of its own"""
        self._default_xtls_vision = True
        return self

    def multiplex(self, config: Optional[MultiplexInbound] = None):
        self._multiplex = config if config is not None else MultiplexInbound(enabled=True)
        return self

    def transport(self, transport: V2RayTransport):
        """http, ws, quic, grpc or httpupgrade transport"""
        self._transport = transport
        return self

    def _resolve_flows(self):
        default = VlessFlow.XTLS_RPRX_VISION if self._default_xtls_vision else None
        return [user.flow or default for user in self._requested_users()]

    def _generate(self) -> VlessResult:
        ip = self._resolve_public_ip()
        tls, domain = self._resolve_tls(ip)
        port = self._resolve_port()
        listen = self._resolve_listen()
        users = self._resolve_users()
        flows = self._resolve_flows()

        inbound = VlessInbound(
            tag=self._resolve_tag(),
            listen=listen,
            listen_port=port,
            users=[
                VlessUser(name=u.name, uuid=u.uuid, flow=flow)
                for u, flow in zip(users, flows)
            ],
            tls=tls,
            multiplex=self._multiplex,
            transport=self._transport,
        )
        connection_info = VlessConnectionInfo(
            server=self._connection_server(ip, domain, listen),
            port=port,
            server_name=domain,
            tls_enabled=tls is not None,
            transport_type=inbound.transport.type if inbound.transport else None,
        )

        logger.info(
            f"VLESS inbound generated: {connection_info.server}:{port}, {len(users)} user(s), "
            f"tls={'on' if tls else 'off'}, transport={connection_info.transport_type or 'tcp'}"
        )
        return VlessResult(
            info=AutoDefaultResult(
                public_ip=str(ip) if ip is not None else None,
                domain=domain,
                port=port,
                users=users,
            ),
            inbound=inbound,
            connection_info=connection_info,
        )
