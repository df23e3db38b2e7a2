"""
Shared auto-config types: protocols, default ports, TLS modes, users.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from ezsingbox.singbox.users import VlessFlow

# ============================================================================
# DEFAULT PORTS
# ============================================================================

# Priority order; these are the HTTPS ports Cloudflare proxies
DEFAULT_PORTS = (443, 2053, 2083, 2096, 8443, 993, 995)


def default_port() -> int:
    return DEFAULT_PORTS[0]


def fallback_port(index: int) -> int:
    """index-th default port, 443 when index is out of range"""
    if 0 <= index < len(DEFAULT_PORTS):
        return DEFAULT_PORTS[index]
    return DEFAULT_PORTS[0]


# ============================================================================
# PROTOCOL
# ============================================================================

class Protocol(str, Enum):
    """Supported protocols"""

    ANYTLS = "anytls"
    HYSTERIA2 = "hysteria2"
    TUIC = "tuic"
    VLESS_REALITY = "vless-reality"

    @classmethod
    def parse(cls, value: str) -> Optional["Protocol"]:
        """Parse user input, None if unknown"""
        return _PROTOCOL_ALIASES.get(value.strip().lower())

    def as_str(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def default_tag(self) -> str:
        return _DEFAULT_TAGS[self]

    @property
    def default_port_index(self) -> int:
        return _DEFAULT_PORT_INDEX[self]

    @property
    def default_port(self) -> int:
        return fallback_port(self.default_port_index)

    @property
    def requires_uuid(self) -> bool:
        """TUIC and VLESS identify users by UUID"""
        return self in (Protocol.TUIC, Protocol.VLESS_REALITY)


_PROTOCOL_ALIASES = {
    "anytls": Protocol.ANYTLS,
    "hysteria2": Protocol.HYSTERIA2,
    "hy2": Protocol.HYSTERIA2,
    "tuic": Protocol.TUIC,
    "vless": Protocol.VLESS_REALITY,
    "vless-reality": Protocol.VLESS_REALITY,
    "vlessreality": Protocol.VLESS_REALITY,
    "reality": Protocol.VLESS_REALITY,
}

_DISPLAY_NAMES = {
    Protocol.ANYTLS: "AnyTLS",
    Protocol.HYSTERIA2: "Hysteria2",
    Protocol.TUIC: "TUIC",
    Protocol.VLESS_REALITY: "VLESS-Reality",
}

_DEFAULT_TAGS = {
    Protocol.ANYTLS: "anytls-in",
    Protocol.HYSTERIA2: "hy2-in",
    Protocol.TUIC: "tuic-in",
    Protocol.VLESS_REALITY: "vless-in",
}

_DEFAULT_PORT_INDEX = {
    Protocol.ANYTLS: 0,
    Protocol.HYSTERIA2: 1,
    Protocol.TUIC: 2,
    Protocol.VLESS_REALITY: 3,
}


# ============================================================================
# TLS MODE
# ============================================================================

class AcmeTls(BaseModel):
    """Certificate from ACME; domain falls back to the sslip.io name of the public IP"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["acme"] = "acme"
    domain: Optional[str] = None
    email: Optional[str] = None


class CustomTls(BaseModel):
    """Certificate and key from files"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["custom"] = "custom"
    certificate_path: str
    key_path: str
    server_name: Optional[str] = None


class DisabledTls(BaseModel):
    """No TLS; rejected by TLS-mandatory protocols"""

    model_config = ConfigDict(frozen=True)

    mode: Literal["disabled"] = "disabled"


TlsMode = Union[AcmeTls, CustomTls, DisabledTls]


# ============================================================================
# USERS
# ============================================================================

class UserConfig(BaseModel):
    """User as requested by the caller; missing credentials are generated at build time"""

    model_config = ConfigDict(frozen=True)

    name: str
    password: Optional[str] = None
    uuid: Optional[str] = None
    # plain VLESS only
    flow: Optional[VlessFlow] = None


class GeneratedUser(BaseModel):
    """
    User with resolved credentials.

    uuid is set only for protocols that need one (TUIC, VLESS-Reality).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    password: str
    uuid: Optional[str] = None
