"""
TUIC v5 auto-builder.

Users get a UUID and a password each. TLS is mandatory. Zero-RTT handshake
stays off unless enabled explicitly (0-RTT data is replayable).
"""

import logging
from datetime import timedelta
from typing import Optional, Union

from ezsingbox.autoconfig.base import CertificateAutoBuilder
from ezsingbox.autoconfig.results import AutoDefaultResult, TuicConnectionInfo, TuicResult
from ezsingbox.autoconfig.types import Protocol
from ezsingbox.exceptions import InvalidConfigError
from ezsingbox.singbox.duration import Duration
from ezsingbox.singbox.inbound import CongestionControl, TuicInbound
from ezsingbox.singbox.users import TuicUser

logger = logging.getLogger(__name__)

DurationLike = Union[Duration, str, timedelta, int]


class AutoTuicBuilder(CertificateAutoBuilder):
    """TUIC inbound, cubic congestion control by default"""

    protocol = Protocol.TUIC
    tls_required = True

    def __init__(self, generator=None, ip_detector=None):
        super().__init__(generator, ip_detector)
        self._congestion_control = CongestionControl.CUBIC
        self._auth_timeout: Optional[DurationLike] = None
        self._heartbeat: Optional[DurationLike] = None
        self._zero_rtt_handshake: Optional[bool] = None

    def add_user(self, name: str, uuid: Optional[str] = None, password: Optional[str] = None):
        return self._add_user(name, password=password, uuid=uuid)

    def congestion_control(self, cc: CongestionControl):
        self._congestion_control = cc
        return self

    def cubic(self):
        return self.congestion_control(CongestionControl.CUBIC)

    def new_reno(self):
        return self.congestion_control(CongestionControl.NEW_RENO)

    def bbr(self):
        return self.congestion_control(CongestionControl.BBR)

    def auth_timeout(self, value: DurationLike):
        """Duration, duration string ("3s"), timedelta or milliseconds"""
        self._auth_timeout = value
        return self

    def heartbeat(self, value: DurationLike):
        self._heartbeat = value
        return self

    def zero_rtt_handshake(self, enabled: bool = True):
        self._zero_rtt_handshake = enabled
        return self

    def _resolve_duration(self, field: str, value: Optional[DurationLike]) -> Optional[Duration]:
        if value is None:
            return None
        try:
            return Duration.coerce(value)
        except ValueError as e:
            raise InvalidConfigError(self.display_name, f"invalid {field}: {e}") from e

    def _generate(self) -> TuicResult:
        ip = self._resolve_public_ip()
        tls, domain = self._resolve_tls(ip)
        auth_timeout = self._resolve_duration("auth_timeout", self._auth_timeout)
        heartbeat = self._resolve_duration("heartbeat", self._heartbeat)
        port = self._resolve_port()
        listen = self._resolve_listen()
        users = self._resolve_users()

        if self._congestion_control is None:
            raise InvalidConfigError(self.display_name, "congestion control must be set")

        if self._zero_rtt_handshake:
            logger.warning("TUIC zero-RTT handshake is enabled, 0-RTT data can be replayed")

        inbound = TuicInbound(
            tag=self._resolve_tag(),
            listen=listen,
            listen_port=port,
            users=[TuicUser(name=u.name, uuid=u.uuid, password=u.password) for u in users],
            congestion_control=self._congestion_control,
            auth_timeout=auth_timeout,
            zero_rtt_handshake=self._zero_rtt_handshake,
            heartbeat=heartbeat,
            tls=tls,
        )
        connection_info = TuicConnectionInfo(
            server=self._connection_server(ip, domain, listen),
            port=port,
            server_name=tls.server_name,
            tls_enabled=True,
            congestion_control=inbound.congestion_control,
            zero_rtt_handshake=bool(self._zero_rtt_handshake),
        )

        logger.info(
            f"TUIC inbound generated: {connection_info.server}:{port}, "
            f"{len(users)} user(s), cc={inbound.congestion_control.value}"
        )
        return TuicResult(
            info=AutoDefaultResult(
                public_ip=str(ip) if ip is not None else None,
                domain=domain,
                port=port,
                users=users,
            ),
            inbound=inbound,
            connection_info=connection_info,
        )
