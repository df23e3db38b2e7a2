"""
V2Ray transports and inbound multiplexing.

Docs:
    https://sing-box.sagernet.org/configuration/shared/v2ray-transport/
    https://sing-box.sagernet.org/configuration/shared/multiplex/
"""

from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import Field

from ezsingbox.singbox.base import SingBoxModel
from ezsingbox.singbox.duration import Duration


# ============================================================================
# V2RAY TRANSPORT
# ============================================================================

class HttpTransport(SingBoxModel):
    type: Literal["http"] = "http"
    host: Optional[Tuple[str, ...]] = None
    path: Optional[str] = None
    method: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    idle_timeout: Optional[Duration] = None
    ping_timeout: Optional[Duration] = None


class WebSocketTransport(SingBoxModel):
    type: Literal["ws"] = "ws"
    path: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    max_early_data: Optional[int] = None
    early_data_header_name: Optional[str] = None


class QuicTransport(SingBoxModel):
    """No options; TLS is still required by sing-box"""

    type: Literal["quic"] = "quic"


class GrpcTransport(SingBoxModel):
    type: Literal["grpc"] = "grpc"
    service_name: Optional[str] = None
    idle_timeout: Optional[Duration] = None
    ping_timeout: Optional[Duration] = None
    permit_without_stream: Optional[bool] = None


class HttpUpgradeTransport(SingBoxModel):
    type: Literal["httpupgrade"] = "httpupgrade"
    host: Optional[str] = None
    path: Optional[str] = None
    headers: Optional[Dict[str, str]] = None


V2RayTransport = Annotated[
    Union[HttpTransport, WebSocketTransport, QuicTransport, GrpcTransport, HttpUpgradeTransport],
    Field(discriminator="type"),
]


# ============================================================================
# MULTIPLEX
# ============================================================================

class TcpBrutal(SingBoxModel):
    """TCP Brutal congestion control; both rates are required when enabled"""

    enabled: Optional[bool] = None
    up_mbps: Optional[int] = None
    down_mbps: Optional[int] = None


class MultiplexInbound(SingBoxModel):
    enabled: Optional[bool] = None
    # when true, connections without padding are rejected
    padding: Optional[bool] = None
    brutal: Optional[TcpBrutal] = None
