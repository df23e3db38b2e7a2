"""
Multi-protocol orchestrator.

One public IP, one domain and one user list shared by up to four inbounds:

    result = (
        MultiProtocolBuilder()
        .public_ip("203.0.113.1")
        .enable_anytls(443)
        .enable_hysteria2(2053)
        .add_user("alice")
        .build()
    )
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ezsingbox.autoconfig.anytls import AutoAnyTlsBuilder
from ezsingbox.autoconfig.base import DEFAULT_USER_NAME, IpDetector, IpLike, OneShotBuilder, parse_ip
from ezsingbox.autoconfig.domain import sslip_domain
from ezsingbox.autoconfig.hysteria2 import AutoHysteria2Builder
from ezsingbox.autoconfig.material import MaterialGenerator, default_generator
from ezsingbox.autoconfig.results import (
    AnyTlsResult,
    Hysteria2Result,
    MultiProtocolResult,
    TuicResult,
    VlessRealityResult,
)
from ezsingbox.autoconfig.tuic import AutoTuicBuilder
from ezsingbox.autoconfig.types import DEFAULT_PORTS, GeneratedUser, Protocol, UserConfig
from ezsingbox.autoconfig.vless_reality import DEFAULT_HANDSHAKE_PORT, AutoVlessRealityBuilder
from ezsingbox.exceptions import (
    AutoConfigError,
    ConfigError,
    NoAvailablePortError,
    PublicIpError,
    PublicIpLookupError,
)
from ezsingbox.services.public_ip import IPAddress, get_public_ip
from ezsingbox.singbox.inbound import CongestionControl, Hysteria2Masquerade

logger = logging.getLogger(__name__)


class MultiProtocolBuilder(OneShotBuilder):
    """
    Builds any subset of AnyTLS, Hysteria2, TUIC and VLESS-Reality behind one identity.

    Args:
        generator: Source of passwords, UUIDs and keys (default: system CSPRNG)
        ip_detector: Used when no public IP is set (default: get_public_ip)
    """

    def __init__(
        self,
        generator: Optional[MaterialGenerator] = None,
        ip_detector: Optional[IpDetector] = None,
    ):
        super().__init__()
        self._generator = generator or default_generator
        self._ip_detector = ip_detector or get_public_ip
        self._public_ip: Optional[IpLike] = None
        self._domain: Optional[str] = None
        self._acme_email: Optional[str] = None
        # protocol -> explicit port, None means pick a free default port at build time
        self._enabled: Dict[Protocol, Optional[int]] = {}
        # raw add_user() arguments, validated at build time
        self._users: List[Dict[str, Any]] = []

        self._hy2_bandwidth = None
        self._hy2_obfs = False
        self._hy2_obfs_password: Optional[str] = None
        self._hy2_masquerade: Optional[Hysteria2Masquerade] = None
        self._tuic_congestion: Optional[CongestionControl] = None
        self._vless_handshake = None

    # ========================================================================
    # SHARED IDENTITY
    # ========================================================================

    def public_ip(self, ip: IpLike):
        self._public_ip = ip
        return self

    def domain(self, domain: str):
        """Shared domain; defaults to the sslip.io name of the public IP"""
        self._domain = domain
        return self

    def acme_email(self, email: str):
        self._acme_email = email
        return self

    def add_user(self, name: str, password: Optional[str] = None, uuid: Optional[str] = None):
        self._users.append(dict(name=name, password=password, uuid=uuid))
        return self

    # ========================================================================
    # PROTOCOL SELECTION
    # ========================================================================

    def enable(self, protocol: Protocol, port: Optional[int] = None):
        self._enabled[protocol] = port
        return self

    def enable_anytls(self, port: Optional[int] = None):
        return self.enable(Protocol.ANYTLS, port)

    def enable_hysteria2(self, port: Optional[int] = None):
        return self.enable(Protocol.HYSTERIA2, port)

    def enable_tuic(self, port: Optional[int] = None):
        return self.enable(Protocol.TUIC, port)

    def enable_vless_reality(self, port: Optional[int] = None):
        return self.enable(Protocol.VLESS_REALITY, port)

    def enable_all(self):
        """All four protocols on 443, 2053, 2083, 2096"""
        for protocol in Protocol:
            self.enable(protocol, DEFAULT_PORTS[protocol.default_port_index])
        return self

    # ========================================================================
    # PROTOCOL OPTIONS
    # ========================================================================

    def hy2_bandwidth(self, up_mbps: int, down_mbps: int):
        self._hy2_bandwidth = (up_mbps, down_mbps)
        return self

    def hy2_obfs(self, password: Optional[str] = None):
        self._hy2_obfs = True
        self._hy2_obfs_password = password
        return self

    def hy2_masquerade(self, target: Hysteria2Masquerade):
        self._hy2_masquerade = target
        return self

    def tuic_congestion(self, cc: CongestionControl):
        self._tuic_congestion = cc
        return self

    def vless_handshake(self, server: str, port: int = DEFAULT_HANDSHAKE_PORT):
        self._vless_handshake = (server, port)
        return self

    # ========================================================================
    # BUILD
    # ========================================================================

    def _resolve_public_ip(self) -> IPAddress:
        if self._public_ip is not None:
            try:
                return parse_ip(self._public_ip)
            except ValueError as e:
                raise ConfigError(f"invalid public IP {self._public_ip!r}", e) from e
        try:
            return self._ip_detector()
        except PublicIpError as e:
            raise PublicIpLookupError(e) from e

    def _resolve_ports(self) -> Dict[Protocol, int]:
        """Explicit ports as given, the rest get the first unclaimed default port"""
        claimed = {port for port in self._enabled.values() if port is not None}
        ports = {}
        for protocol in Protocol:
            if protocol not in self._enabled:
                continue
            port = self._enabled[protocol]
            if port is None:
                port = next((p for p in DEFAULT_PORTS if p not in claimed), None)
                if port is None:
                    raise NoAvailablePortError(protocol.display_name)
                claimed.add(port)
            ports[protocol] = port
        return ports

    def _resolve_users(self) -> List[GeneratedUser]:
        """Credentials generated once so every protocol shares them"""
        try:
            requested = [UserConfig(**raw) for raw in self._users]
        except ValidationError as e:
            raise ConfigError(f"invalid user: {e.errors()[0]['msg']}", e) from e
        requested = requested or [UserConfig(name=DEFAULT_USER_NAME)]
        return [
            GeneratedUser(
                name=user.name,
                password=user.password or self._generator.password(),
                uuid=user.uuid or self._generator.uuid(),
            )
            for user in requested
        ]

    def _sub_builder(self, protocol: Protocol, ip: IPAddress, domain: str, port: int):
        """Per-protocol builder seeded with the shared identity and options"""
        if protocol is Protocol.ANYTLS:
            builder = AutoAnyTlsBuilder(self._generator)
            builder.acme(domain=domain, email=self._acme_email)
        elif protocol is Protocol.HYSTERIA2:
            builder = AutoHysteria2Builder(self._generator)
            builder.acme(domain=domain, email=self._acme_email)
            if self._hy2_bandwidth is not None:
                builder.bandwidth(*self._hy2_bandwidth)
            if self._hy2_obfs:
                builder.obfs(self._hy2_obfs_password)
            if self._hy2_masquerade is not None:
                builder.masquerade(self._hy2_masquerade)
        elif protocol is Protocol.TUIC:
            builder = AutoTuicBuilder(self._generator)
            builder.acme(domain=domain, email=self._acme_email)
            if self._tuic_congestion is not None:
                builder.congestion_control(self._tuic_congestion)
        elif protocol is Protocol.VLESS_REALITY:
            builder = AutoVlessRealityBuilder(self._generator)
            if self._vless_handshake is not None:
                builder.handshake(*self._vless_handshake)
        else:
            raise ValueError(f"unknown protocol: {protocol!r}")

        return builder.public_ip(ip).port(port)

    def _generate(self) -> MultiProtocolResult:
        ip = self._resolve_public_ip()
        domain = self._domain or sslip_domain(ip)
        ports = self._resolve_ports()
        users = self._resolve_users()

        results = {}
        for protocol, port in ports.items():
            builder = self._sub_builder(protocol, ip, domain, port)
            for user in users:
                builder.with_user(user)
            try:
                results[protocol] = builder.build()
            except AutoConfigError as e:
                raise ConfigError(str(e), e) from e

        logger.info(
            f"Generated {len(results)} inbound(s) for {ip} ({domain}): "
            + ", ".join(f"{p.as_str()}:{ports[p]}" for p in results)
        )
        return MultiProtocolResult(
            public_ip=str(ip),
            domain=domain,
            anytls=results.get(Protocol.ANYTLS),
            hysteria2=results.get(Protocol.HYSTERIA2),
            tuic=results.get(Protocol.TUIC),
            vless_reality=results.get(Protocol.VLESS_REALITY),
        )


# ============================================================================
# QUICK HELPERS (public IP auto-detected)
# ============================================================================

def quick_all(ip_detector: Optional[IpDetector] = None) -> MultiProtocolResult:
    """All four protocols on their default ports"""
    return MultiProtocolBuilder(ip_detector=ip_detector).enable_all().build()


def quick_anytls(ip_detector: Optional[IpDetector] = None) -> AnyTlsResult:
    return MultiProtocolBuilder(ip_detector=ip_detector).enable_anytls().build().anytls


def quick_hysteria2(ip_detector: Optional[IpDetector] = None) -> Hysteria2Result:
    return MultiProtocolBuilder(ip_detector=ip_detector).enable_hysteria2().build().hysteria2


def quick_tuic(ip_detector: Optional[IpDetector] = None) -> TuicResult:
    return MultiProtocolBuilder(ip_detector=ip_detector).enable_tuic().build().tuic


def quick_vless_reality(ip_detector: Optional[IpDetector] = None) -> VlessRealityResult:
    return MultiProtocolBuilder(ip_detector=ip_detector).enable_vless_reality().build().vless_reality
