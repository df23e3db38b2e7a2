"""Subset of the sing-box configuration schema used by ezsingbox"""

from .duration import Duration

__all__ = ['Duration']
