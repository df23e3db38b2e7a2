"""
Credential and key material generation.

Passwords, UUIDs, hex strings, REALITY X25519 keypairs and short IDs.
Everything is drawn from one byte source, ``secrets.token_bytes`` unless a
different source is injected (tests use a seeded one).
"""

import base64
import secrets
import uuid as uuid_lib
from typing import Callable, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from pydantic import BaseModel, ConfigDict

RandomSource = Callable[[int], bytes]

DEFAULT_PASSWORD_BYTES = 16
REALITY_KEY_BYTES = 32
SHORT_ID_BYTES = 4


def b64url_nopad(data: bytes) -> str:
    """URL-safe base64 without '=' padding"""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_nopad_decode(text: str) -> bytes:
    """Inverse of b64url_nopad"""
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def clamp_x25519_scalar(raw: bytes) -> bytes:
    """Clamp 32 bytes into a valid X25519 private scalar"""
    scalar = bytearray(raw)
    scalar[0] &= 248
    scalar[31] &= 127
    scalar[31] |= 64
    return bytes(scalar)


class RealityKeyPair(BaseModel):
    """REALITY X25519 keypair, both keys base64url without padding"""

    model_config = ConfigDict(frozen=True)

    private_key: str
    public_key: str


class MaterialGenerator:
    """
    Secure random material for auto-generated configs.

    Args:
        random_source: Callable returning n random bytes (default: secrets.token_bytes)
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        self._random = random_source or secrets.token_bytes

    def random_bytes(self, length: int) -> bytes:
        return self._random(length)

    def password(self) -> str:
        """16 random bytes, standard base64"""
        return self.password_with_length(DEFAULT_PASSWORD_BYTES)

    def password_with_length(self, length: int) -> str:
        return base64.b64encode(self.random_bytes(length)).decode("ascii")

    def hex_string(self, length: int) -> str:
        """length random bytes as length*2 lowercase hex characters"""
        return self.random_bytes(length).hex()

    def uuid(self) -> str:
        """RFC 4122 v4 UUID, hyphenated"""
        return str(uuid_lib.UUID(bytes=self.random_bytes(16), version=4))

    def uuid_simple(self) -> str:
        """RFC 4122 v4 UUID, 32 hex characters without hyphens"""
        return uuid_lib.UUID(bytes=self.random_bytes(16), version=4).hex

    def reality_keypair(self) -> RealityKeyPair:
        """
        Generate a REALITY X25519 keypair.

        Returns:
            RealityKeyPair with the clamped private scalar and the derived public point
        """
        private_bytes = clamp_x25519_scalar(self.random_bytes(REALITY_KEY_BYTES))
        private_key = X25519PrivateKey.from_private_bytes(private_bytes)
        public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return RealityKeyPair(
            private_key=b64url_nopad(private_bytes),
            public_key=b64url_nopad(public_bytes),
        )

    def short_id(self) -> str:
        """REALITY short ID: 8 lowercase hex characters"""
        return self.hex_string(SHORT_ID_BYTES)


# Process-wide generator backed by the system CSPRNG
default_generator = MaterialGenerator()


def generate_password() -> str:
    return default_generator.password()


def generate_password_with_length(length: int) -> str:
    return default_generator.password_with_length(length)


def generate_random_bytes(length: int) -> bytes:
    return default_generator.random_bytes(length)


def generate_hex_string(length: int) -> str:
    return default_generator.hex_string(length)


def generate_uuid() -> str:
    return default_generator.uuid()


def generate_uuid_simple() -> str:
    return default_generator.uuid_simple()


def generate_reality_keypair() -> RealityKeyPair:
    return default_generator.reality_keypair()


def generate_short_id() -> str:
    return default_generator.short_id()
