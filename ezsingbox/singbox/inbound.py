"""
Server inbounds produced by the auto-builders.

Docs:
    https://sing-box.sagernet.org/configuration/inbound/anytls/
    https://sing-box.sagernet.org/configuration/inbound/hysteria2/
    https://sing-box.sagernet.org/configuration/inbound/tuic/
    https://sing-box.sagernet.org/configuration/inbound/vless/
"""

from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import Field

from ezsingbox.singbox.base import SingBoxModel
from ezsingbox.singbox.duration import Duration
from ezsingbox.singbox.tls import InboundTlsConfig
from ezsingbox.singbox.transport import MultiplexInbound, V2RayTransport
from ezsingbox.singbox.users import TuicUser, UserWithPassword, VlessUser

# Default AnyTLS padding schedule
DEFAULT_ANYTLS_PADDING_SCHEME = (
    "stop=8",
    "0=30-30",
    "1=100-400",
    "2=400-500,c,500-1000,c,500-1000,c,500-1000",
    "3=9-9,500-1000",
    "4=500-1000",
    "5=500-1000",
    "6=500-1000",
    "7=500-1000",
)


# ============================================================================
# ANYTLS
# ============================================================================

class AnyTlsInbound(SingBoxModel):
    type: Literal["anytls"] = "anytls"
    tag: str
    listen: str = "::"
    listen_port: Optional[int] = None
    users: Tuple[UserWithPassword, ...] = ()
    padding_scheme: Optional[Tuple[str, ...]] = None
    tls: Optional[InboundTlsConfig] = None


# ============================================================================
# HYSTERIA2
# ============================================================================

class Hysteria2Obfs(SingBoxModel):
    """QUIC traffic obfuscation, salamander is the only supported type"""

    type: Literal["salamander"] = "salamander"
    password: str


class MasqueradeFile(SingBoxModel):
    """Serve files from a directory"""

    type: Literal["file"] = "file"
    directory: str


class MasqueradeProxy(SingBoxModel):
    """Reverse proxy to a URL"""

    type: Literal["proxy"] = "proxy"
    url: str
    rewrite_host: Optional[bool] = None


class MasqueradeString(SingBoxModel):
    """Fixed response"""

    type: Literal["string"] = "string"
    status_code: Optional[int] = None
    headers: Optional[Dict[str, str]] = None
    content: Optional[str] = None


MasqueradeConfig = Annotated[
    Union[MasqueradeFile, MasqueradeProxy, MasqueradeString],
    Field(discriminator="type"),
]

# URL string ("file:///var/www", "http://127.0.0.1:8080") or a structured descriptor
Hysteria2Masquerade = Union[str, MasqueradeConfig]


class Hysteria2Inbound(SingBoxModel):
    type: Literal["hysteria2"] = "hysteria2"
    tag: str
    listen: str = "::"
    listen_port: Optional[int] = None
    up_mbps: Optional[int] = None
    down_mbps: Optional[int] = None
    obfs: Optional[Hysteria2Obfs] = None
    users: Tuple[UserWithPassword, ...] = ()
    ignore_client_bandwidth: Optional[bool] = None
    tls: InboundTlsConfig
    masquerade: Optional[Hysteria2Masquerade] = None
    brutal_debug: Optional[bool] = None


# ============================================================================
# TUIC
# ============================================================================

class CongestionControl(str, Enum):
    """QUIC congestion control algorithm"""

    CUBIC = "cubic"
    NEW_RENO = "new_reno"
    BBR = "bbr"

    @classmethod
    def parse(cls, value: str) -> Optional["CongestionControl"]:
        """Parse user input ("bbr", "cubic", "new_reno", "newreno"), None if unknown"""
        normalized = value.strip().lower()
        if normalized == "newreno":
            normalized = "new_reno"
        try:
            return cls(normalized)
        except ValueError:
            return None


class TuicInbound(SingBoxModel):
    type: Literal["tuic"] = "tuic"
    tag: str
    listen: str = "::"
    listen_port: Optional[int] = None
    users: Tuple[TuicUser, ...] = ()
    congestion_control: Optional[CongestionControl] = None
    # server default: 3s
    auth_timeout: Optional[Duration] = None
    # replayable, keep off unless asked for
    zero_rtt_handshake: Optional[bool] = None
    # server default: 10s
    heartbeat: Optional[Duration] = None
    tls: InboundTlsConfig


# ============================================================================
# VLESS
# ============================================================================

class VlessInbound(SingBoxModel):
    type: Literal["vless"] = "vless"
    tag: str
    listen: str = "::"
    listen_port: Optional[int] = None
    users: Tuple[VlessUser, ...] = ()
    tls: Optional[InboundTlsConfig] = None
    multiplex: Optional[MultiplexInbound] = None
    transport: Optional[V2RayTransport] = None


Inbound = Union[AnyTlsInbound, Hysteria2Inbound, TuicInbound, VlessInbound]
