"""
Immutable build results.

Every auto-builder returns one of the *Result models below; MultiProtocolBuilder
aggregates them into a MultiProtocolResult.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ezsingbox.autoconfig.types import GeneratedUser, Protocol
from ezsingbox.singbox.inbound import (
    AnyTlsInbound,
    CongestionControl,
    Hysteria2Inbound,
    Inbound,
    TuicInbound,
    VlessInbound,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================================
# SHARED INFO
# ============================================================================

class AutoDefaultResult(_Frozen):
    """Identity shared by all protocol results"""

    public_ip: Optional[str] = None
    domain: Optional[str] = None
    port: int
    users: Tuple[GeneratedUser, ...]


class ConnectionInfo(_Frozen):
    """
    Client-facing summary of a built inbound.

    Derived data: server is the public IP if known, else the domain, else the
    listen address.
    """

    server: str
    port: int
    server_name: Optional[str] = None
    tls_enabled: bool = False


class Hysteria2ConnectionInfo(ConnectionInfo):
    up_mbps: Optional[int] = None
    down_mbps: Optional[int] = None
    obfs_enabled: bool = False


class TuicConnectionInfo(ConnectionInfo):
    congestion_control: CongestionControl = CongestionControl.CUBIC
    zero_rtt_handshake: bool = False


class VlessRealityConnectionInfo(ConnectionInfo):
    public_key: str
    short_id: str
    flow: str


class VlessConnectionInfo(ConnectionInfo):
    # None for plain TCP
    transport_type: Optional[str] = None


# ============================================================================
# PER-PROTOCOL RESULTS
# ============================================================================

class _ProtocolResult(_Frozen):
    info: AutoDefaultResult

    @property
    def users(self) -> Tuple[GeneratedUser, ...]:
        return self.info.users

    @property
    def port(self) -> int:
        return self.info.port

    @property
    def domain(self) -> Optional[str]:
        return self.info.domain

    @property
    def public_ip(self) -> Optional[str]:
        return self.info.public_ip


class AnyTlsResult(_ProtocolResult):
    inbound: AnyTlsInbound
    connection_info: ConnectionInfo


class Hysteria2Result(_ProtocolResult):
    inbound: Hysteria2Inbound
    connection_info: Hysteria2ConnectionInfo
    obfs_password: Optional[str] = None

    @property
    def up_mbps(self) -> Optional[int]:
        return self.inbound.up_mbps

    @property
    def down_mbps(self) -> Optional[int]:
        return self.inbound.down_mbps


class TuicResult(_ProtocolResult):
    inbound: TuicInbound
    connection_info: TuicConnectionInfo

    @property
    def congestion_control(self) -> CongestionControl:
        return self.connection_info.congestion_control


class VlessRealityResult(_ProtocolResult):
    inbound: VlessInbound
    connection_info: VlessRealityConnectionInfo
    private_key: str
    public_key: str
    short_id: str
    handshake_server: str
    handshake_port: int


class VlessResult(_ProtocolResult):
    """Plain VLESS, built on its own; MultiProtocolResult does not carry it"""

    inbound: VlessInbound
    connection_info: VlessConnectionInfo


# ============================================================================
# MULTI-PROTOCOL RESULT
# ============================================================================

class MultiProtocolResult(_Frozen):
    """Results of one MultiProtocolBuilder.build(); None for protocols not enabled"""

    public_ip: str
    domain: str
    anytls: Optional[AnyTlsResult] = None
    hysteria2: Optional[Hysteria2Result] = None
    tuic: Optional[TuicResult] = None
    vless_reality: Optional[VlessRealityResult] = None

    def get(self, protocol: Protocol):
        """Result for a protocol, None if it was not enabled"""
        if protocol is Protocol.ANYTLS:
            return self.anytls
        if protocol is Protocol.HYSTERIA2:
            return self.hysteria2
        if protocol is Protocol.TUIC:
            return self.tuic
        if protocol is Protocol.VLESS_REALITY:
            return self.vless_reality
        raise ValueError(f"unknown protocol: {protocol!r}")

    def enabled_protocols(self) -> List[Protocol]:
        return [p for p in Protocol if self.get(p) is not None]

    def inbounds(self) -> List[Inbound]:
        """Server inbounds in protocol order"""
        return [self.get(p).inbound for p in self.enabled_protocols()]
