"""
AnyTLS auto-builder.

    result = AutoAnyTlsBuilder().public_ip("203.0.113.1").add_user("alice").build()
"""

import logging
from typing import Optional, Sequence, Tuple

from ezsingbox.autoconfig.base import CertificateAutoBuilder
from ezsingbox.autoconfig.results import AnyTlsResult, AutoDefaultResult, ConnectionInfo
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.exceptions import InvalidConfigError
from ezsingbox.singbox.inbound import DEFAULT_ANYTLS_PADDING_SCHEME, AnyTlsInbound
from ezsingbox.singbox.users import UserWithPassword

logger = logging.getLogger(__name__)


class AutoAnyTlsBuilder(CertificateAutoBuilder):
    """AnyTLS inbound with ACME TLS and the default padding scheme unless told otherwise"""

    protocol = Protocol.ANYTLS

    def __init__(self, generator=None, ip_detector=None):
        super().__init__(generator, ip_detector)
        self._padding = True
        self._padding_scheme: Sequence[str] = DEFAULT_ANYTLS_PADDING_SCHEME

    def add_user(self, name: str, password: Optional[str] = None):
        return self._add_user(name, password=password)

    def padding_scheme(self, lines: Sequence[str]):
        """Custom padding schedule, one rule per line; checked at build time"""
        self._padding = True
        self._padding_scheme = lines
        return self

    def no_padding(self):
        """Leave padding_scheme out; sing-box then applies its own default"""
        self._padding = False
        return self

    def _resolve_padding_scheme(self) -> Optional[Tuple[str, ...]]:
        if not self._padding:
            return None
        lines = self._padding_scheme
        if isinstance(lines, str) or not isinstance(lines, (list, tuple)):
            raise InvalidConfigError(self.display_name, "padding scheme must be a list of strings")
        return tuple(lines) or None

    def _generate(self) -> AnyTlsResult:
        ip = self._resolve_public_ip()
        tls, domain = self._resolve_tls(ip)
        port = self._resolve_port()
        listen = self._resolve_listen()
        users = self._resolve_users()

        inbound = AnyTlsInbound(
            tag=self._resolve_tag(),
            listen=listen,
            listen_port=port,
            users=[UserWithPassword(name=u.name, password=u.password) for u in users],
            padding_scheme=self._resolve_padding_scheme(),
            tls=tls,
        )
        connection_info = ConnectionInfo(
            server=self._connection_server(ip, domain, listen),
            port=port,
            server_name=tls.server_name if tls else None,
            tls_enabled=tls is not None,
        )

        logger.info(f"AnyTLS inbound generated: {connection_info.server}:{port}, {len(users)} user(s)")
        return AnyTlsResult(
            info=AutoDefaultResult(
                public_ip=str(ip) if ip is not None else None,
                domain=domain,
                port=port,
                users=users,
            ),
            inbound=inbound,
            connection_info=connection_info,
        )
