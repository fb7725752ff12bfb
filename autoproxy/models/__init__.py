"""
Data models for the Auto-Proxy rule engine.

This module contains the data structures shared by the compiler, the
evaluator and the validators: proxy servers, stored proxy configurations,
Auto-Proxy rules and the result types returned to callers.
"""

from .proxy_server import ProxyServer, ProxyScheme
from .auto_proxy import AutoProxyRule, AutoProxyConfiguration, MatchType, ProxyType
from .proxy_configuration import (
    ProxyConfiguration, ProxyRules, PACScriptSource, ProxyMode, SERVER_SLOTS
)
from .results import (
    PatternValidationResult, ValidationResult, UrlTestResult,
    PACAnalysisResult, SecurityIssue, SecuritySeverity
)

__all__ = [
    'ProxyServer',
    'ProxyScheme',
    'AutoProxyRule',
    'AutoProxyConfiguration',
    'MatchType',
    'ProxyType',
    'ProxyConfiguration',
    'ProxyRules',
    'PACScriptSource',
    'ProxyMode',
    'SERVER_SLOTS',
    'PatternValidationResult',
    'ValidationResult',
    'UrlTestResult',
    'PACAnalysisResult',
    'SecurityIssue',
    'SecuritySeverity'
]
