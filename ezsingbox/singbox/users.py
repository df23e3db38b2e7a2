"""User records as sing-box expects them"""

from enum import Enum
from typing import Optional

from ezsingbox.singbox.base import SingBoxModel


class VlessFlow(str, Enum):
    """VLESS sub-protocol"""

    XTLS_RPRX_VISION = "xtls-rprx-vision"


class UserWithPassword(SingBoxModel):
    """name/password user (AnyTLS, Hysteria2)"""

    name: str
    password: str


class TuicUser(SingBoxModel):
    """name/uuid/password user (TUIC)"""

    name: Optional[str] = None
    uuid: str
    password: Optional[str] = None


class VlessUser(SingBoxModel):
    """name/uuid/flow user (VLESS)"""

    name: str
    uuid: str
    flow: Optional[VlessFlow] = None
