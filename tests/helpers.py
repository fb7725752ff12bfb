"""
Builders for rules and proxy configurations shared by the tests.
"""

from typing import Optional

from autoproxy.models import (
    AutoProxyRule, MatchType, PACScriptSource, ProxyConfiguration, ProxyMode,
    ProxyRules, ProxyServer, ProxyType
)

CORP_PAC = """function FindProxyForURL(url, host) {
  if (dnsDomainIs(host, ".corp.example.com")) {
    return "PROXY corp-proxy.example.com:3128";
  }
  return "DIRECT";
}"""

SIMPLE_PAC = 'function FindProxyForURL(url, host) { return "PROXY pac-proxy:8080"; }'


def make_rule(rule_id: str,
              pattern: str,
              match_type: str = MatchType.WILDCARD,
              proxy_type: str = ProxyType.DIRECT,
              priority: int = 0,
              enabled: bool = True,
              inline_proxy: Optional[ProxyServer] = None,
              proxy_id: Optional[str] = None) -> AutoProxyRule:
    """Create a rule with direct routing unless told otherwise."""
    return AutoProxyRule(
        id=rule_id,
        pattern=pattern,
        enabled=enabled,
        priority=priority,
        match_type=match_type,
        proxy_type=proxy_type,
        inline_proxy=inline_proxy,
        proxy_id=proxy_id
    )


def manual_proxy(proxy_id: str, host: str, port: str = "8080",
                 scheme: str = "http", name: Optional[str] = None) -> ProxyConfiguration:
    """Create a fixed_servers configuration with a shared server."""
    return ProxyConfiguration(
        id=proxy_id,
        name=name or f"Proxy {proxy_id}",
        color="#3b82f6",
        mode=ProxyMode.FIXED_SERVERS,
        rules=ProxyRules(single_proxy=ProxyServer(scheme=scheme, host=host, port=port))
    )


def pac_proxy(proxy_id: str, name: str, data: Optional[str] = CORP_PAC) -> ProxyConfiguration:
    """Create a pac_script configuration with inline source."""
    return ProxyConfiguration(
        id=proxy_id,
        name=name,
        color="#10b981",
        mode=ProxyMode.PAC_SCRIPT,
        pac_script=PACScriptSource(data=data)
    )
