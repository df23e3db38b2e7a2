"""
Exception hierarchy for ezsingbox.

Builders never raise from setters; everything below is raised by a terminal
``build()`` call, by public IP detection or by Duration parsing.
"""

from typing import Optional


class EzSingBoxError(Exception):
    """Base class for all ezsingbox errors"""
    pass


# ============================================================================
# PUBLIC IP DETECTION
# ============================================================================

class PublicIpError(EzSingBoxError):
    """Public IP detection failed"""
    pass


class PublicIpNetworkError(PublicIpError):
    """Transport failure while querying an IP echo service"""
    pass


class PublicIpParseError(PublicIpError):
    """IP echo service answered with something that is not an IP address"""
    pass


class AllServicesFailedError(PublicIpError):
    """Every IP echo service in the candidate list failed"""

    def __init__(self, message: str = "all public IP services are unavailable"):
        super().__init__(message)


# ============================================================================
# PER-PROTOCOL BUILDERS
# ============================================================================

class AutoConfigError(EzSingBoxError):
    """
    A per-protocol auto-builder rejected its configuration.

    Attributes:
        protocol: Human readable protocol name (AnyTLS, Hysteria2, TUIC, VLESS-Reality)
        message: Error description
    """

    kind = "config error"

    def __init__(self, protocol: str, message: str):
        self.protocol = protocol
        self.message = message
        super().__init__(f"{protocol}: {self.kind}: {message}")


class MissingConfigError(AutoConfigError):
    """A required input was not supplied"""

    kind = "missing config"


class ConfigConflictError(AutoConfigError):
    """Mutually exclusive options were both set"""

    kind = "config conflict"


class InvalidConfigError(AutoConfigError):
    """A value violates a hard protocol constraint"""

    kind = "invalid config"


class BuilderConsumedError(EzSingBoxError):
    """build() was called on a builder that already left the accumulating state"""
    pass


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class AutoDefaultError(EzSingBoxError):
    """Multi-protocol build failed"""

    def __init__(self, message: str, error: Optional[Exception] = None):
        self.error = error
        super().__init__(message)


class PublicIpLookupError(AutoDefaultError):
    """Public IP could not be resolved for the shared identity"""

    def __init__(self, error: PublicIpError):
        super().__init__(f"failed to get public IP: {error}", error)


class NoAvailablePortError(AutoDefaultError):
    """Every default port is already claimed by another enabled protocol"""

    def __init__(self, protocol: str):
        self.protocol = protocol
        super().__init__(f"no available port left for {protocol}")


class ConfigError(AutoDefaultError):
    """Config generation failed (wraps the sub-builder error when there is one)"""

    def __init__(self, message: str, error: Optional[Exception] = None):
        super().__init__(f"config generation failed: {message}", error)


# ============================================================================
# DURATION
# ============================================================================

class DurationError(ValueError):
    """Duration string could not be parsed"""
    pass


class EmptyDurationError(DurationError):
    """Duration string is empty"""

    def __init__(self):
        super().__init__("duration string is empty")


class InvalidNumberError(DurationError):
    """Number part of a duration is not representable"""

    def __init__(self, number: str):
        self.number = number
        super().__init__(f"invalid number: {number}")


class InvalidUnitError(DurationError):
    """Unknown duration unit"""

    def __init__(self, unit: str):
        self.unit = unit
        super().__init__(f"invalid unit: {unit}")


class InvalidFormatError(DurationError):
    """Malformed duration string"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid format: {text}")


class DurationOverflowError(DurationError):
    """Duration does not fit into an unsigned 64-bit millisecond count"""

    def __init__(self):
        super().__init__("duration value overflow")


# ============================================================================
# COMMANDS
# ============================================================================

class SingBoxLaunchError(EzSingBoxError):
    """sing-box binary could not be started"""
    pass
