"""
Proxy configuration model.

A proxy configuration is one entry of the user's proxy list. The rule
engine only reads these; it never modifies them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .auto_proxy import AutoProxyConfiguration
from .proxy_server import ProxyServer


class ProxyMode:
    """Proxy modes supported by the browser proxy API."""
    DIRECT = "direct"
    SYSTEM = "system"
    AUTO_DETECT = "auto_detect"
    PAC_SCRIPT = "pac_script"
    FIXED_SERVERS = "fixed_servers"

    ALL = (DIRECT, SYSTEM, AUTO_DETECT, PAC_SCRIPT, FIXED_SERVERS)


# (attribute, dictionary key, display label) for every manual proxy slot
SERVER_SLOTS = (
    ('single_proxy', 'singleProxy', 'Shared proxy'),
    ('proxy_for_http', 'proxyForHttp', 'HTTP proxy'),
    ('proxy_for_https', 'proxyForHttps', 'HTTPS proxy'),
    ('proxy_for_ftp', 'proxyForFtp', 'FTP proxy'),
    ('fallback_proxy', 'fallbackProxy', 'Fallback proxy'),
)


@dataclass
class ProxyRules:
    """
    Manual (fixed_servers) proxy settings.

    Attributes:
        single_proxy: Server shared by all protocols
        proxy_for_http: Server for http:// requests
        proxy_for_https: Server for https:// requests
        proxy_for_ftp: Server for ftp:// requests
        fallback_proxy: Server for everything else
        bypass_list: Hosts that skip the proxy
    """
    single_proxy: Optional[ProxyServer] = None
    proxy_for_http: Optional[ProxyServer] = None
    proxy_for_https: Optional[ProxyServer] = None
    proxy_for_ftp: Optional[ProxyServer] = None
    fallback_proxy: Optional[ProxyServer] = None
    bypass_list: List[str] = field(default_factory=list)

    def configured_slots(self) -> Iterator[Tuple[str, ProxyServer]]:
        """Yield (label, server) for every populated slot in slot order."""
        for attribute, _, label in SERVER_SLOTS:
            server = getattr(self, attribute)
            if server is not None:
                yield label, server

    def has_server(self) -> bool:
        """Check if at least one slot is populated."""
        return any(True for _ in self.configured_slots())

    def to_dict(self) -> Dict[str, Any]:
        """Convert rules to dictionary."""
        data: Dict[str, Any] = {}
        for attribute, key, _ in SERVER_SLOTS:
            server = getattr(self, attribute)
            if server is not None:
                data[key] = server.to_dict()
        if self.bypass_list:
            data['bypassList'] = list(self.bypass_list)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProxyRules':
        """Create rules from dictionary."""
        kwargs: Dict[str, Any] = {}
        for attribute, key, _ in SERVER_SLOTS:
            if data.get(key):
                kwargs[attribute] = ProxyServer.from_dict(data[key])
        kwargs['bypass_list'] = list(data.get('bypassList', []))
        return cls(**kwargs)


@dataclass
class PACScriptSource:
    """
    PAC script settings of a pac_script mode configuration.

    Attributes:
        url: Remote PAC file location
        data: Inline PAC source text
        mandatory: Whether the browser must fail closed if the PAC is invalid
    """
    url: Optional[str] = None
    data: Optional[str] = None
    mandatory: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert PAC settings to dictionary."""
        data: Dict[str, Any] = {'mandatory': self.mandatory}
        if self.url is not None:
            data['url'] = self.url
        if self.data is not None:
            data['data'] = self.data
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PACScriptSource':
        """Create PAC settings from dictionary."""
        return cls(
            url=data.get('url'),
            data=data.get('data'),
            mandatory=bool(data.get('mandatory', False))
        )


@dataclass
class ProxyConfiguration:
    """
    One stored proxy configuration.

    Attributes:
        id: Identifier referenced by Auto-Proxy rules
        name: Display name
        color: Display color (#rrggbb)
        mode: One of the ProxyMode values
        pac_script: PAC settings for pac_script mode
        rules: Manual server settings for fixed_servers mode
        is_active: Whether this configuration is currently applied
        quick_switch: Whether it takes part in quick switching
        auto_proxy: Rule set when this configuration is an Auto-Proxy
    """
    name: str
    mode: str
    id: Optional[str] = None
    color: str = ""
    pac_script: Optional[PACScriptSource] = None
    rules: Optional[ProxyRules] = None
    is_active: bool = False
    quick_switch: bool = False
    auto_proxy: Optional[AutoProxyConfiguration] = None

    def is_pac_script(self) -> bool:
        """Check if this configuration carries an inline PAC script."""
        return (self.mode == ProxyMode.PAC_SCRIPT
                and self.pac_script is not None
                and bool(self.pac_script.data))

    def is_auto_proxy(self) -> bool:
        """Check if this configuration is an Auto-Proxy rule set."""
        return self.auto_proxy is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data: Dict[str, Any] = {
            'name': self.name,
            'color': self.color,
            'mode': self.mode,
            'isActive': self.is_active,
            'quickSwitch': self.quick_switch
        }
        if self.id is not None:
            data['id'] = self.id
        if self.pac_script is not None:
            data['pacScript'] = self.pac_script.to_dict()
        if self.rules is not None:
            data['rules'] = self.rules.to_dict()
        if self.auto_proxy is not None:
            data['autoProxy'] = self.auto_proxy.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProxyConfiguration':
        """Create configuration from dictionary."""
        pac_script = data.get('pacScript')
        rules = data.get('rules')
        auto_proxy = data.get('autoProxy')
        return cls(
            id=data.get('id'),
            name=data.get('name', ''),
            color=data.get('color', ''),
            mode=data.get('mode', ProxyMode.SYSTEM),
            pac_script=PACScriptSource.from_dict(pac_script) if pac_script is not None else None,
            rules=ProxyRules.from_dict(rules) if rules is not None else None,
            is_active=bool(data.get('isActive', False)),
            quick_switch=bool(data.get('quickSwitch', False)),
            auto_proxy=AutoProxyConfiguration.from_dict(auto_proxy) if auto_proxy is not None else None
        )
