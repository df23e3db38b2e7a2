"""
Client outbounds matching the generated server inbounds.

Outbounds are plain dicts in sing-box naming, tagged "proxy" so they drop
straight into SingBoxConfig.client_default().
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ezsingbox.autoconfig.results import MultiProtocolResult
from ezsingbox.autoconfig.types import GeneratedUser, Protocol
from ezsingbox.exceptions import ConfigError
from ezsingbox.singbox.users import VlessFlow

logger = logging.getLogger(__name__)

PROXY_TAG = "proxy"
UTLS_FINGERPRINT = "chrome"


def pick_client_protocol(
    result: MultiProtocolResult, preferred: Optional[Protocol] = None
) -> Optional[Protocol]:
    """
    Protocol for the client config.

    The preferred protocol wins when given, otherwise the first enabled one
    in AnyTLS, Hysteria2, TUIC, VLESS-Reality order. None if nothing is enabled.
    """
    if preferred is not None:
        return preferred
    enabled = result.enabled_protocols()
    return enabled[0] if enabled else None


def pick_user(
    users: Sequence[GeneratedUser], name: Optional[str] = None
) -> Optional[GeneratedUser]:
    """User called name if present, else the first user, else None"""
    if name:
        for user in users:
            if user.name == name:
                return user
    return users[0] if users else None


def _require_uuid(protocol: Protocol, user: GeneratedUser) -> str:
    if not user.uuid:
        raise ConfigError(f"{protocol.display_name} user {user.name!r} has no UUID")
    return user.uuid


def build_proxy_outbound(
    result: MultiProtocolResult,
    protocol: Protocol,
    user: GeneratedUser,
) -> Dict[str, Any]:
    """
    Build the client outbound for one user of one enabled protocol.

    Args:
        result: Multi-protocol build result
        protocol: Protocol to connect with
        user: User whose credentials go into the outbound

    Returns:
        sing-box outbound dict tagged "proxy"

    Raises:
        ConfigError: Protocol not enabled, or user lacks the UUID it needs
    """
    protocol_result = result.get(protocol)
    if protocol_result is None:
        raise ConfigError(f"{protocol.display_name} is not enabled")

    domain = result.domain

    if protocol is Protocol.ANYTLS:
        return {
            "type": "anytls",
            "tag": PROXY_TAG,
            "server": domain,
            "server_port": protocol_result.port,
            "password": user.password,
            "tls": {"enabled": True, "server_name": domain},
        }

    if protocol is Protocol.HYSTERIA2:
        outbound = {
            "type": "hysteria2",
            "tag": PROXY_TAG,
            "server": domain,
            "server_port": protocol_result.port,
            "password": user.password,
            "tls": {"enabled": True, "server_name": domain, "alpn": ["h3"]},
        }
        if protocol_result.obfs_password:
            outbound["obfs"] = {
                "type": "salamander",
                "password": protocol_result.obfs_password,
            }
        if protocol_result.up_mbps is not None and protocol_result.down_mbps is not None:
            outbound["up_mbps"] = protocol_result.up_mbps
            outbound["down_mbps"] = protocol_result.down_mbps
        return outbound

    if protocol is Protocol.TUIC:
        return {
            "type": "tuic",
            "tag": PROXY_TAG,
            "server": domain,
            "server_port": protocol_result.port,
            "uuid": _require_uuid(protocol, user),
            "password": user.password,
            "congestion_control": protocol_result.congestion_control.value,
            "tls": {"enabled": True, "server_name": domain},
        }

    if protocol is Protocol.VLESS_REALITY:
        return {
            "type": "vless",
            "tag": PROXY_TAG,
            "server": result.public_ip,
            "server_port": protocol_result.port,
            "uuid": _require_uuid(protocol, user),
            "flow": VlessFlow.XTLS_RPRX_VISION.value,
            "tls": {
                "enabled": True,
                "server_name": protocol_result.connection_info.server_name,
                "utls": {"enabled": True, "fingerprint": UTLS_FINGERPRINT},
                "reality": {
                    "enabled": True,
                    "public_key": protocol_result.public_key,
                    "short_id": protocol_result.short_id,
                },
            },
        }

    raise ConfigError(f"unsupported protocol: {protocol!r}")
