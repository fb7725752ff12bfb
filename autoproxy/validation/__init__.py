"""
Validators for proxy configurations, Auto-Proxy rule sets and PAC scripts.
"""

from .pac_analyzer import PACScriptAnalyzer, analyze_pac_script
from .proxy_validator import ProxyValidator, is_valid_host, is_valid_url

__all__ = [
    'PACScriptAnalyzer',
    'analyze_pac_script',
    'ProxyValidator',
    'is_valid_host',
    'is_valid_url'
]
