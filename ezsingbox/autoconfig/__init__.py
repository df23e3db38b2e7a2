"""Auto-config: builders that turn (at most) a public IP into ready sing-box inbounds"""

from .anytls import AutoAnyTlsBuilder
from .base import BuilderState
from .domain import nip_domain, sslip_domain
from .hysteria2 import AutoHysteria2Builder
from .material import (
    MaterialGenerator,
    RealityKeyPair,
    generate_hex_string,
    generate_password,
    generate_password_with_length,
    generate_random_bytes,
    generate_reality_keypair,
    generate_short_id,
    generate_uuid,
    generate_uuid_simple,
)
from .multi import (
    MultiProtocolBuilder,
    quick_all,
    quick_anytls,
    quick_hysteria2,
    quick_tuic,
    quick_vless_reality,
)
from .results import (
    AnyTlsResult,
    AutoDefaultResult,
    ConnectionInfo,
    Hysteria2Result,
    MultiProtocolResult,
    TuicResult,
    VlessRealityResult,
    VlessResult,
)
from .tuic import AutoTuicBuilder
from .types import (
    DEFAULT_PORTS,
    AcmeTls,
    CustomTls,
    DisabledTls,
    GeneratedUser,
    Protocol,
    TlsMode,
    default_port,
    fallback_port,
)
from .vless import AutoVlessBuilder
from .vless_reality import AutoVlessRealityBuilder

__all__ = [
    'AutoAnyTlsBuilder',
    'AutoHysteria2Builder',
    'AutoTuicBuilder',
    'AutoVlessBuilder',
    'AutoVlessRealityBuilder',
    'MultiProtocolBuilder',
    'BuilderState',
    'quick_all',
    'quick_anytls',
    'quick_hysteria2',
    'quick_tuic',
    'quick_vless_reality',
    'MaterialGenerator',
    'RealityKeyPair',
    'generate_password',
    'generate_password_with_length',
    'generate_random_bytes',
    'generate_hex_string',
    'generate_uuid',
    'generate_uuid_simple',
    'generate_reality_keypair',
    'generate_short_id',
    'sslip_domain',
    'nip_domain',
    'AutoDefaultResult',
    'ConnectionInfo',
    'AnyTlsResult',
    'Hysteria2Result',
    'TuicResult',
    'VlessRealityResult',
    'VlessResult',
    'MultiProtocolResult',
    'DEFAULT_PORTS',
    'default_port',
    'fallback_port',
    'Protocol',
    'TlsMode',
    'AcmeTls',
    'CustomTls',
    'DisabledTls',
    'GeneratedUser',
]
