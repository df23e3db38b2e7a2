"""
Whole sing-box configuration documents (server and client).

DNS uses the sing-box 1.12+ server format (typed servers, no legacy ``address``).
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from ezsingbox.singbox.base import SingBoxModel

JsonDict = Dict[str, Any]


def default_dns() -> JsonDict:
    """DNS over HTTPS via Cloudflare, Google as the second server"""
    return {
        "servers": [
            {
                "type": "https",
                "tag": "cloudflare",
                "server": "1.1.1.1",
                "server_port": 443,
                "path": "/dns-query",
            },
            {
                "type": "https",
                "tag": "google",
                "server": "8.8.8.8",
                "server_port": 443,
                "path": "/dns-query",
            },
        ],
        "final": "cloudflare",
    }


def default_outbounds() -> List[JsonDict]:
    return [
        {"type": "direct", "tag": "direct"},
        {"type": "block", "tag": "block"},
    ]


def _as_dict(item: Union[BaseModel, JsonDict]) -> JsonDict:
    if isinstance(item, SingBoxModel):
        return item.to_dict()
    if isinstance(item, BaseModel):
        return item.model_dump(by_alias=True, exclude_none=True, mode="json")
    return dict(item)


class SingBoxConfig(SingBoxModel):
    log: Optional[JsonDict] = None
    dns: Optional[JsonDict] = None
    inbounds: List[JsonDict]
    outbounds: List[JsonDict]
    route: Optional[JsonDict] = None

    @classmethod
    def server_default(
        cls,
        inbounds: Sequence[Union[BaseModel, JsonDict]],
        log_level: str = "info",
    ) -> "SingBoxConfig":
        """
        Server config: the given inbounds, direct/block outbounds, everything routed direct.

        Args:
            inbounds: Inbound models (or plain dicts) in the order they should appear
            log_level: sing-box log level (trace, debug, info, warn, error, fatal, panic)
        """
        return cls(
            log={"level": log_level, "timestamp": True},
            dns=default_dns(),
            inbounds=[_as_dict(inbound) for inbound in inbounds],
            outbounds=default_outbounds(),
            route={
                "rules": [],
                "default_domain_resolver": "cloudflare",
                "final": "direct",
            },
        )

    @classmethod
    def client_default(
        cls,
        proxy_outbound: Union[BaseModel, JsonDict],
        log_level: str = "info",
        mixed_listen: str = "127.0.0.1",
        mixed_port: int = 7890,
    ) -> "SingBoxConfig":
        """
        Client config: local mixed (HTTP+SOCKS) inbound, everything routed via proxy_outbound.

        proxy_outbound must be tagged "proxy".
        """
        return cls(
            log={"level": log_level, "timestamp": True},
            dns=default_dns(),
            inbounds=[{
                "type": "mixed",
                "tag": "mixed-in",
                "listen": mixed_listen,
                "listen_port": mixed_port,
            }],
            outbounds=[_as_dict(proxy_outbound)] + default_outbounds(),
            route={
                "rules": [],
                "default_domain_resolver": "cloudflare",
                "final": "proxy",
            },
        )

    def to_json(self) -> str:
        """Pretty-printed JSON, 2-space indent"""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
