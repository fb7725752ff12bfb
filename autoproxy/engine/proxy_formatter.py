"""
Rendering of proxy actions into PAC return values.
"""

import re
from typing import List, Optional, Sequence

from ..models import ProxyConfiguration, ProxyMode, ProxyScheme, ProxyServer, ProxyType

DIRECT = "DIRECT"

_SCHEME_KEYWORDS = {
    ProxyScheme.SOCKS4: "SOCKS",
    ProxyScheme.SOCKS5: "SOCKS5",
    ProxyScheme.HTTPS: "HTTPS",
}

_KEYWORD_SCHEMES = {
    'PROXY': ProxyScheme.HTTP,
    'HTTP': ProxyScheme.HTTP,
    'HTTPS': ProxyScheme.HTTPS,
    'QUIC': ProxyScheme.QUIC,
    'SOCKS': ProxyScheme.SOCKS5,
    'SOCKS4': ProxyScheme.SOCKS4,
    'SOCKS5': ProxyScheme.SOCKS5,
}

_PROXY_STRING = re.compile(r'(PROXY|SOCKS|SOCKS4|SOCKS5|HTTP|HTTPS|QUIC)\s+(\[[^\]]+\]|[^:\[]+):(\d+)', re.ASCII)


def format_proxy_server(server: ProxyServer) -> str:
    """Render a server as ``<KEYWORD> host:port``; unknown schemes use PROXY."""
    keyword = _SCHEME_KEYWORDS.get(server.scheme.lower(), "PROXY")
    return f"{keyword} {server.host}:{server.port}"


def parse_proxy_string(value: str) -> Optional[ProxyServer]:
    """
    Parse a single PAC return entry back into a server.

    Bracketed IPv6 hosts keep their brackets so the server formats back to
    the same text.

    Returns:
        ProxyServer, or None for DIRECT and anything unrecognised.
    """
    match = _PROXY_STRING.fullmatch(value.strip())
    if not match:
        return None
    keyword, host, port = match.groups()
    return ProxyServer(scheme=_KEYWORD_SCHEMES[keyword], host=host, port=port)


def split_proxy_chain(value: str) -> List[str]:
    """Split a semicolon-chained PAC return value such as ``PROXY a:1; DIRECT``."""
    return [entry.strip() for entry in value.split(';') if entry.strip()]


def find_proxy(proxy_id: Optional[str],
               known_configs: Sequence[ProxyConfiguration]) -> Optional[ProxyConfiguration]:
    """Find a configuration by id; None if the id is empty or unknown."""
    if not proxy_id:
        return None
    for config in known_configs:
        if config.id == proxy_id:
            return config
    return None


def proxy_string_from_config(config: ProxyConfiguration) -> str:
    """
    Resolve a stored configuration to a PAC return value.

    Manual configurations use the shared server, then the HTTP server.
    PAC script configurations resolve to DIRECT here; the compiler calls
    their embedded function instead when the script could be embedded.
    """
    if config.mode == ProxyMode.FIXED_SERVERS and config.rules is not None:
        server = config.rules.single_proxy or config.rules.proxy_for_http
        if server is not None:
            return format_proxy_server(server)
    return DIRECT


def resolve_proxy_action(proxy_type: str,
                         proxy_id: Optional[str],
                         inline_proxy: Optional[ProxyServer],
                         known_configs: Sequence[ProxyConfiguration]) -> str:
    """
    Resolve a rule or fallback action to a PAC return value.

    Args:
        proxy_type: One of the ProxyType values
        proxy_id: Referenced configuration for "existing"
        inline_proxy: Server for "inline"
        known_configs: All stored configurations

    Returns:
        PAC return value; anything unresolvable degrades to DIRECT.
    """
    if proxy_type == ProxyType.INLINE:
        if inline_proxy is not None:
            return format_proxy_server(inline_proxy)
        return DIRECT

    if proxy_type == ProxyType.EXISTING:
        config = find_proxy(proxy_id, known_configs)
        if config is not None:
            return proxy_string_from_config(config)
        return DIRECT

    return DIRECT
