"""ezsingbox - zero-input sing-box server configs for AnyTLS, Hysteria2, TUIC and VLESS-Reality"""

__version__ = "0.1.0"
