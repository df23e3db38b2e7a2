"""
Hysteria2 auto-builder.

Hysteria2 runs over QUIC, so TLS is mandatory: building with TLS disabled
fails with InvalidConfigError.
"""

import logging
from typing import Optional

from ezsingbox.autoconfig.base import CertificateAutoBuilder
from ezsingbox.autoconfig.results import AutoDefaultResult, Hysteria2ConnectionInfo, Hysteria2Result
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.singbox.inbound import Hysteria2Inbound, Hysteria2Masquerade, Hysteria2Obfs
from ezsingbox.singbox.users import UserWithPassword

logger = logging.getLogger(__name__)


class AutoHysteria2Builder(CertificateAutoBuilder):
    """Hysteria2 inbound with optional bandwidth caps, salamander obfs and masquerade"""

    protocol = Protocol.HYSTERIA2
    tls_required = True

    def __init__(self, generator=None, ip_detector=None):
        super().__init__(generator, ip_detector)
        self._up_mbps: Optional[int] = None
        self._down_mbps: Optional[int] = None
        self._obfs = False
        self._obfs_password: Optional[str] = None
        self._masquerade: Optional[Hysteria2Masquerade] = None
        self._ignore_client_bandwidth: Optional[bool] = None

    def add_user(self, name: str, password: Optional[str] = None):
        return self._add_user(name, password=password)

    def bandwidth(self, up_mbps: int, down_mbps: int):
        """Server side bandwidth caps in Mbps"""
        self._up_mbps = up_mbps
        self._down_mbps = down_mbps
        return self

    def obfs(self, password: Optional[str] = None):
        """Enable salamander obfuscation; password is generated when omitted"""
        self._obfs = True
        self._obfs_password = password
        return self

    def masquerade(self, target: Hysteria2Masquerade):
        """URL string or MasqueradeFile / MasqueradeProxy / MasqueradeString"""
        self._masquerade = target
        return self

    def ignore_client_bandwidth(self, ignore: bool = True):
        self._ignore_client_bandwidth = ignore
        return self

    def _generate(self) -> Hysteria2Result:
        ip = self._resolve_public_ip()
        tls, domain = self._resolve_tls(ip)
        port = self._resolve_port()
        listen = self._resolve_listen()
        users = self._resolve_users()

        obfs_password = None
        obfs = None
        if self._obfs:
            obfs_password = self._obfs_password or self._generator.password()
            obfs = Hysteria2Obfs(password=obfs_password)

        inbound = Hysteria2Inbound(
            tag=self._resolve_tag(),
            listen=listen,
            listen_port=port,
            up_mbps=self._up_mbps,
            down_mbps=self._down_mbps,
            obfs=obfs,
            users=[UserWithPassword(name=u.name, password=u.password) for u in users],
            ignore_client_bandwidth=self._ignore_client_bandwidth,
            tls=tls,
            masquerade=self._masquerade,
        )
        connection_info = Hysteria2ConnectionInfo(
            server=self._connection_server(ip, domain, listen),
            port=port,
            server_name=tls.server_name,
            tls_enabled=True,
            up_mbps=self._up_mbps,
            down_mbps=self._down_mbps,
            obfs_enabled=obfs is not None,
        )

        logger.info(
            f"Hysteria2 inbound generated: {connection_info.server}:{port}, "
            f"{len(users)} user(s), obfs={'on' if obfs else 'off'}"
        )
        return Hysteria2Result(
            info=AutoDefaultResult(
                public_ip=str(ip) if ip is not None else None,
                domain=domain,
                port=port,
                users=users,
            ),
            inbound=inbound,
            connection_info=connection_info,
            obfs_password=obfs_password,
        )
