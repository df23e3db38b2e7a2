"""
Shared machinery of the per-protocol auto-builders.

A builder accumulates optional settings through fluent setters that never
raise, then ``build()`` resolves every default in one go:

    explicit value > protocol constant (port, listen "::", tag) > generated value

``build()`` is one-shot. A builder moves from ACCUMULATING to BUILT or FAILED
and cannot be built again.
"""

import ipaddress
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from ezsingbox.autoconfig.domain import sslip_domain
from ezsingbox.autoconfig.material import MaterialGenerator, default_generator
from ezsingbox.autoconfig.types import (
    AcmeTls,
    CustomTls,
    DisabledTls,
    GeneratedUser,
    Protocol,
    TlsMode,
    UserConfig,
    fallback_port,
)
from ezsingbox.exceptions import BuilderConsumedError, InvalidConfigError, MissingConfigError
from ezsingbox.services.public_ip import IPAddress, get_public_ip
from ezsingbox.singbox.tls import AcmeConfig, InboundTlsConfig

logger = logging.getLogger(__name__)

IpLike = Union[str, IPAddress]
IpDetector = Callable[[], IPAddress]

DEFAULT_LISTEN = "::"
DEFAULT_USER_NAME = "default"


class BuilderState(str, Enum):
    ACCUMULATING = "accumulating"
    BUILT = "built"
    FAILED = "failed"


def parse_ip(value: IpLike) -> IPAddress:
    """str or ipaddress object -> ipaddress object; ValueError if invalid"""
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    return ipaddress.ip_address(str(value).strip())


class OneShotBuilder:
    """build() wrapper enforcing the ACCUMULATING -> BUILT | FAILED transition"""

    def __init__(self):
        self._state = BuilderState.ACCUMULATING

    @property
    def state(self) -> BuilderState:
        return self._state

    def build(self):
        if self._state is not BuilderState.ACCUMULATING:
            raise BuilderConsumedError(
                f"{type(self).__name__} was already built (state: {self._state.value})"
            )
        try:
            result = self._generate()
        except Exception:
            self._state = BuilderState.FAILED
            raise
        self._state = BuilderState.BUILT
        return result

    def generate(self):
        """Alias of build()"""
        return self.build()

    def _generate(self):
        raise NotImplementedError


class BaseAutoBuilder(OneShotBuilder):
    """
    Settings common to every protocol builder.

    Args:
        generator: Source of passwords, UUIDs and keys (default: system CSPRNG)
        ip_detector: Called at build time when auto_detect_ip() was requested
    """

    protocol: Protocol

    def __init__(
        self,
        generator: Optional[MaterialGenerator] = None,
        ip_detector: Optional[IpDetector] = None,
    ):
        super().__init__()
        self._generator = generator or default_generator
        self._ip_detector = ip_detector or get_public_ip
        self._port: Optional[int] = None
        self._port_index: Optional[int] = None
        self._listen: Optional[str] = None
        self._tag: Optional[str] = None
        self._public_ip: Optional[IpLike] = None
        self._detect_ip = False
        # raw add_user() arguments, validated at build time
        self._users: List[Dict[str, Any]] = []

    @property
    def display_name(self) -> str:
        return self.protocol.display_name

    @property
    def default_tag(self) -> str:
        return self.protocol.default_tag

    @property
    def requires_uuid(self) -> bool:
        return self.protocol.requires_uuid

    def build(self):
        """
        Resolve every default and return the protocol result.

        Raises:
            BuilderConsumedError: build() was already called
            AutoConfigError: Configuration rejected (malformed values included)
        """
        try:
            return super().build()
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or e.title}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidConfigError(self.display_name, details) from e

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def port(self, port: int):
        self._port = port
        self._port_index = None
        return self

    def fallback_port(self, index: int):
        """Use the index-th entry of DEFAULT_PORTS (443 when out of range)"""
        self._port = None
        self._port_index = index
        return self

    def listen(self, address: str):
        self._listen = address
        return self

    def tag(self, tag: str):
        self._tag = tag
        return self

    def public_ip(self, ip: IpLike):
        """Known public IP; validated at build time"""
        self._public_ip = ip
        return self

    def auto_detect_ip(self):
        """Detect the public IP at build time unless one was set explicitly"""
        self._detect_ip = True
        return self

    def _add_user(self, name: str, password: Optional[str] = None, uuid: Optional[str] = None, **extra):
        self._users.append(dict(name=name, password=password, uuid=uuid, **extra))
        return self

    def with_user(self, user: Union[UserConfig, GeneratedUser]):
        """Add a user with whatever credentials it already carries; a UUID is dropped if unused"""
        return self._add_user(user.name, password=user.password, uuid=user.uuid)

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------

    def _resolve_port(self) -> int:
        if self._port is not None:
            return self._port
        if self._port_index is not None:
            if not isinstance(self._port_index, int):
                raise InvalidConfigError(self.display_name, f"invalid port index {self._port_index!r}")
            return fallback_port(self._port_index)
        return fallback_port(0)

    def _resolve_listen(self) -> str:
        return self._listen or DEFAULT_LISTEN

    def _resolve_tag(self) -> str:
        return self._tag or self.default_tag

    def _resolve_public_ip(self) -> Optional[IPAddress]:
        """
        Explicit IP, else detected IP (only if requested), else None.

        Raises:
            InvalidConfigError: Explicit IP does not parse
            PublicIpError: Detection was requested and failed
        """
        if self._public_ip is not None:
            try:
                return parse_ip(self._public_ip)
            except ValueError as e:
                raise InvalidConfigError(
                    self.display_name, f"invalid public IP {self._public_ip!r}"
                ) from e
        if self._detect_ip:
            return self._ip_detector()
        return None

    def _requested_users(self) -> List[UserConfig]:
        """Validated add_user() requests, or one "default" user when there were none"""
        if not self._users:
            return [UserConfig(name=DEFAULT_USER_NAME)]
        return [UserConfig(**raw) for raw in self._users]

    def _resolve_users(self) -> Tuple[GeneratedUser, ...]:
        """Accumulated users with missing credentials generated, or one "default" user"""
        needs_uuid = self.requires_uuid
        requested = self._requested_users()

        users = []
        for user in requested:
            uuid = None
            if needs_uuid:
                uuid = user.uuid or self._generator.uuid()
            users.append(GeneratedUser(
                name=user.name,
                password=user.password or self._generator.password(),
                uuid=uuid,
            ))
        return tuple(users)

    @staticmethod
    def _connection_server(
        ip: Optional[IPAddress], domain: Optional[str], listen: str
    ) -> str:
        if ip is not None:
            return str(ip)
        if domain:
            return domain
        return listen


class CertificateAutoBuilder(BaseAutoBuilder):
    """Builder for protocols that carry a regular TLS certificate (AnyTLS, Hysteria2, TUIC, VLESS)"""

    # Hysteria2 and TUIC run over QUIC and cannot work without TLS
    tls_required = False

    def __init__(
        self,
        generator: Optional[MaterialGenerator] = None,
        ip_detector: Optional[IpDetector] = None,
    ):
        super().__init__(generator, ip_detector)
        # a TlsMode, or (mode class, raw fields) validated at build time
        self._tls_mode: Union[TlsMode, Tuple[type, Dict[str, Any]]] = AcmeTls()

    def tls_mode(self, mode: TlsMode):
        self._tls_mode = mode
        return self

    def acme(self, domain: Optional[str] = None, email: Optional[str] = None):
        self._tls_mode = (AcmeTls, dict(domain=domain, email=email))
        return self

    def custom_cert(self, certificate_path: str, key_path: str, server_name: Optional[str] = None):
        self._tls_mode = (
            CustomTls,
            dict(certificate_path=certificate_path, key_path=key_path, server_name=server_name),
        )
        return self

    def disable_tls(self):
        self._tls_mode = DisabledTls()
        return self

    def _current_tls_mode(self) -> TlsMode:
        if isinstance(self._tls_mode, tuple):
            mode_class, fields = self._tls_mode
            return mode_class(**fields)
        return self._tls_mode

    def _resolve_tls(
        self, ip: Optional[IPAddress]
    ) -> Tuple[Optional[InboundTlsConfig], Optional[str]]:
        """
        Build the inbound TLS block for the configured TlsMode.

        Returns:
            (tls block or None, resolved domain or None)

        Raises:
            MissingConfigError: ACME without a domain and without a public IP
            InvalidConfigError: TLS disabled on a TLS-mandatory protocol
        """
        mode = self._current_tls_mode()
        name = self.display_name

        if isinstance(mode, AcmeTls):
            if mode.domain:
                domain = mode.domain
            elif ip is not None:
                domain = sslip_domain(ip)
            else:
                raise MissingConfigError(
                    name, "ACME requires a domain or a public IP to derive one"
                )
            tls = InboundTlsConfig(
                enabled=True,
                server_name=domain,
                acme=AcmeConfig(domain=[domain], email=mode.email),
            )
            return tls, domain

        if isinstance(mode, CustomTls):
            tls = InboundTlsConfig(
                enabled=True,
                server_name=mode.server_name,
                certificate_path=mode.certificate_path,
                key_path=mode.key_path,
            )
            return tls, mode.server_name

        if isinstance(mode, DisabledTls):
            if self.tls_required:
                raise InvalidConfigError(name, f"{name} must enable TLS")
            return None, None

        raise TypeError(f"unsupported TLS mode: {mode!r}")
