"""
Configuration settings for ezsingbox.
Uses Pydantic Settings; every field is read from an EZ_* environment variable.
"""

import ipaddress
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ezsingbox.autoconfig.types import Protocol
from ezsingbox.singbox.inbound import CongestionControl


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ==================== OUTPUT ====================
    config_path: str = Field(default="./config.json", description="Server config output path")
    print_config: bool = Field(default=True, description="Print the server config to stdout")
    print_details: bool = Field(default=True, description="Print share links and credentials")
    log_level: str = Field(default="info", description="sing-box log level")

    # ==================== LOGGING ====================
    app_log_level: str = Field(default="INFO", description="ezsingbox log level")
    app_log_file: Optional[str] = Field(default=None, description="ezsingbox log file path")

    # ==================== IDENTITY ====================
    public_ip: Optional[str] = Field(default=None, description="Public IP (auto-detected if empty)")
    domain: Optional[str] = Field(default=None, description="Domain (sslip.io name if empty)")
    acme_email: Optional[str] = Field(default=None, description="ACME account email")

    # ==================== PROTOCOLS ====================
    enable_anytls: bool = Field(default=True)
    enable_hysteria2: bool = Field(default=True)
    enable_tuic: bool = Field(default=True)
    enable_vless_reality: bool = Field(default=True)

    anytls_port: int = Field(default=443, ge=1, le=65535)
    hysteria2_port: int = Field(default=2053, ge=1, le=65535)
    tuic_port: int = Field(default=2083, ge=1, le=65535)
    vless_reality_port: int = Field(default=2096, ge=1, le=65535)

    # ==================== USER ====================
    user: str = Field(default="default", description="User name")
    password: Optional[str] = Field(default=None, description="User password (generated if empty)")

    # ==================== PROTOCOL OPTIONS ====================
    hy2_obfs: bool = Field(default=False, description="Enable Hysteria2 salamander obfs")
    hy2_up_mbps: Optional[int] = Field(default=None, ge=1)
    hy2_down_mbps: Optional[int] = Field(default=None, ge=1)
    tuic_cc: Optional[CongestionControl] = Field(default=None, description="bbr, cubic or new_reno")
    vless_handshake_server: str = Field(default="www.microsoft.com")
    vless_handshake_port: int = Field(default=443, ge=1, le=65535)

    # ==================== CLIENT CONFIG ====================
    client_config_path: Optional[str] = Field(default=None, description="Client config output path")
    client_protocol: Optional[Protocol] = Field(default=None)
    client_user: Optional[str] = Field(default=None)
    client_mixed_listen: str = Field(default="127.0.0.1")
    client_mixed_port: int = Field(default=7890, ge=1, le=65535)

    # ==================== EXTRAS ====================
    remote_profile_url: Optional[str] = Field(default=None, description="Subscription URL to advertise")
    remote_profile_name: str = Field(default="ezsingbox")
    sing_box_bin: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("EZ_SING_BOX_BIN", "SING_BOX_BIN"),
        description="sing-box binary path",
    )
    qr_dir: Optional[str] = Field(default=None, description="Directory for share link QR codes")

    @field_validator(
        "public_ip", "domain", "acme_email", "password", "client_config_path",
        "client_user", "remote_profile_url", "sing_box_bin", "qr_dir", "app_log_file",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v):
        """Blank env values count as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("public_ip")
    @classmethod
    def validate_public_ip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return str(ipaddress.ip_address(v))

    @field_validator("tuic_cc", mode="before")
    @classmethod
    def parse_tuic_cc(cls, v):
        if v is None or isinstance(v, CongestionControl):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        cc = CongestionControl.parse(str(v))
        if cc is None:
            raise ValueError(f"unknown congestion control: {v!r}")
        return cc

    @field_validator("client_protocol", mode="before")
    @classmethod
    def parse_client_protocol(cls, v):
        if v is None or isinstance(v, Protocol):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        protocol = Protocol.parse(str(v))
        if protocol is None:
            raise ValueError(f"unknown protocol: {v!r}")
        return protocol

    @property
    def hy2_bandwidth(self):
        """(up, down) when both are set, else None"""
        if self.hy2_up_mbps is not None and self.hy2_down_mbps is not None:
            return self.hy2_up_mbps, self.hy2_down_mbps
        return None


def get_settings() -> Settings:
    """Fresh settings from the current environment"""
    return Settings()
