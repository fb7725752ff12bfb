"""
Auto-Proxy rule engine.

Compiles prioritized routing rules (wildcard, exact, regex and CIDR
patterns mapped to direct, inline or stored proxy actions) into a single
PAC script, and evaluates the same rules directly to preview routing
decisions.
"""

from .engine import generate, test_url, validate_pattern
from .models import (
    AutoProxyConfiguration, AutoProxyRule, MatchType, ProxyConfiguration,
    ProxyMode, ProxyServer, ProxyType
)

__version__ = "1.0.0"

__all__ = [
    'generate',
    'test_url',
    'validate_pattern',
    'AutoProxyConfiguration',
    'AutoProxyRule',
    'MatchType',
    'ProxyConfiguration',
    'ProxyMode',
    'ProxyServer',
    'ProxyType'
]
