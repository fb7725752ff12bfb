"""
Auto-Proxy rule model.

An Auto-Proxy configuration is an ordered set of routing rules plus a
fallback action. It is compiled into a single PAC script by
``autoproxy.engine.rule_compiler``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .proxy_server import ProxyServer


class MatchType:
    """Pattern grammars a rule can use."""
    WILDCARD = "wildcard"
    EXACT = "exact"
    REGEX = "regex"
    CIDR = "cidr"

    ALL = (WILDCARD, EXACT, REGEX, CIDR)


class ProxyType:
    """Actions a rule or fallback can route to."""
    DIRECT = "direct"
    INLINE = "inline"
    EXISTING = "existing"

    ALL = (DIRECT, INLINE, EXISTING)


@dataclass
class AutoProxyRule:
    """
    A single routing directive.

    Attributes:
        id: Opaque unique identifier
        pattern: Pattern text, interpreted according to match_type
        enabled: Disabled rules are ignored by the compiler and evaluator
        priority: Lower values are evaluated first; ties keep input order
        match_type: One of the MatchType values
        proxy_type: One of the ProxyType values
        inline_proxy: Server used when proxy_type is "inline"
        proxy_id: Referenced configuration when proxy_type is "existing"
    """
    id: str
    pattern: str
    enabled: bool = True
    priority: int = 0
    match_type: str = MatchType.WILDCARD
    proxy_type: str = ProxyType.DIRECT
    inline_proxy: Optional[ProxyServer] = None
    proxy_id: Optional[str] = None

    def references(self, proxy_id: str) -> bool:
        """Check if this rule routes to the given existing configuration."""
        return self.proxy_type == ProxyType.EXISTING and bool(self.proxy_id) and self.proxy_id == proxy_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary using the host application's key names."""
        data = {
            'id': self.id,
            'enabled': self.enabled,
            'priority': self.priority,
            'matchType': self.match_type,
            'pattern': self.pattern,
            'proxyType': self.proxy_type
        }
        if self.inline_proxy is not None:
            data['inlineProxy'] = self.inline_proxy.to_dict()
        if self.proxy_id is not None:
            data['proxyId'] = self.proxy_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AutoProxyRule':
        """Create rule from dictionary."""
        inline = data.get('inlineProxy')
        return cls(
            id=data.get('id', ''),
            pattern=data.get('pattern', ''),
            enabled=bool(data.get('enabled', True)),
            priority=int(data.get('priority', 0)),
            match_type=data.get('matchType', MatchType.WILDCARD),
            proxy_type=data.get('proxyType', ProxyType.DIRECT),
            inline_proxy=ProxyServer.from_dict(inline) if inline else None,
            proxy_id=data.get('proxyId')
        )


@dataclass
class AutoProxyConfiguration:
    """
    Rules plus fallback policy compiled as one PAC script.

    Attributes:
        rules: Rules in user order (not necessarily priority order)
        fallback_type: Action applied when no rule matches
        fallback_inline_proxy: Server used when fallback_type is "inline"
        fallback_proxy_id: Configuration used when fallback_type is "existing"
    """
    rules: List[AutoProxyRule] = field(default_factory=list)
    fallback_type: str = ProxyType.DIRECT
    fallback_inline_proxy: Optional[ProxyServer] = None
    fallback_proxy_id: Optional[str] = None

    def fallback_references(self, proxy_id: str) -> bool:
        """Check if the fallback routes to the given existing configuration."""
        return (self.fallback_type == ProxyType.EXISTING
                and bool(self.fallback_proxy_id)
                and self.fallback_proxy_id == proxy_id)

    def get_rule(self, rule_id: str) -> Optional[AutoProxyRule]:
        """Get a rule by its identifier."""
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = {
            'rules': [rule.to_dict() for rule in self.rules],
            'fallbackType': self.fallback_type
        }
        if self.fallback_inline_proxy is not None:
            data['fallbackInlineProxy'] = self.fallback_inline_proxy.to_dict()
        if self.fallback_proxy_id is not None:
            data['fallbackProxyId'] = self.fallback_proxy_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AutoProxyConfiguration':
        """Create configuration from dictionary."""
        inline = data.get('fallbackInlineProxy')
        return cls(
            rules=[AutoProxyRule.from_dict(item) for item in data.get('rules', [])],
            fallback_type=data.get('fallbackType', ProxyType.DIRECT),
            fallback_inline_proxy=ProxyServer.from_dict(inline) if inline else None,
            fallback_proxy_id=data.get('fallbackProxyId')
        )
