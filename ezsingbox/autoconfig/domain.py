"""
Wildcard DNS domains for a bare IP (sslip.io / nip.io).

1.2.3.4      -> 1-2-3-4.sslip.io / 1.2.3.4.nip.io
2001:db8::1  -> 2001-db8-0-0-0-0-0-1.sslip.io
"""

import ipaddress
from typing import Union

IpLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


def _as_ip(ip: IpLike) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    if isinstance(ip, str):
        return ipaddress.ip_address(ip.strip())
    return ip


def sslip_domain(ip: IpLike) -> str:
    """sslip.io hostname that resolves to ip"""
    address = _as_ip(ip)
    if isinstance(address, ipaddress.IPv4Address):
        return "-".join(str(octet) for octet in address.packed) + ".sslip.io"

    segments = [format(int(segment, 16), "x") for segment in address.exploded.split(":")]
    return "-".join(segments) + ".sslip.io"


def nip_domain(ip: IpLike) -> str:
    """nip.io hostname that resolves to ip"""
    return f"{_as_ip(ip)}.nip.io"
