"""
Public IP detection.

Asks a fixed list of plain-text IP echo services in order and returns the
first answer that parses as an IPv4/IPv6 address. A failed service is not
retried, detection just moves on to the next one.
"""

import ipaddress
import logging
from typing import Optional, Sequence, Union

import httpx

from ezsingbox.exceptions import (
    AllServicesFailedError,
    PublicIpError,
    PublicIpNetworkError,
    PublicIpParseError,
)

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

PUBLIC_IP_SERVICES = (
    "https://api.ipify.org",
    "https://ifconfig.me/ip",
    "https://icanhazip.com",
    "https://ip.sslip.io",
    "https://api.ip.sb/ip",
)

DEFAULT_TIMEOUT = 5.0


def fetch_ip_from_service(url: str, client: httpx.Client) -> IPAddress:
    """
    Query one IP echo service.

    Args:
        url: Service URL, expected to answer with the caller's IP as plain text
        client: HTTP client (carries the timeout)

    Returns:
        Parsed IP address

    Raises:
        PublicIpNetworkError: Transport failure, timeout or HTTP error status
        PublicIpParseError: Body is not an IP address
    """
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise PublicIpNetworkError(f"{url}: {e}") from e

    body = response.text.strip()
    try:
        return ipaddress.ip_address(body)
    except ValueError as e:
        raise PublicIpParseError(f"{url}: {body!r}: {e}") from e


def get_public_ip(
    timeout: float = DEFAULT_TIMEOUT,
    services: Sequence[str] = PUBLIC_IP_SERVICES,
    client: Optional[httpx.Client] = None,
) -> IPAddress:
    """
    Detect this host's public IP address.

    Args:
        timeout: Per-request timeout in seconds (ignored when client is given)
        services: Ordered candidate services
        client: Pre-configured HTTP client, mostly for tests

    Returns:
        First valid IP address reported by a service

    Raises:
        AllServicesFailedError: No service produced a valid address
    """
    own_client = client is None
    if own_client:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    try:
        for url in services:
            try:
                ip = fetch_ip_from_service(url, client)
            except PublicIpError as e:
                logger.warning(f"Public IP service failed: {e}")
                continue

            logger.info(f"Public IP detected via {url}: {ip}")
            return ip
    finally:
        if own_client:
            client.close()

    raise AllServicesFailedError()
