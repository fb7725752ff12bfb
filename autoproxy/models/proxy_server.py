"""
Proxy server descriptor used by manual proxy slots and inline rule actions.
"""

from dataclasses import dataclass
from typing import Any, Dict


class ProxyScheme:
    """Proxy schemes accepted by the browser proxy API."""
    HTTP = "http"
    HTTPS = "https"
    QUIC = "quic"
    SOCKS4 = "socks4"
    SOCKS5 = "socks5"

    ALL = (HTTP, HTTPS, SOCKS4, SOCKS5, QUIC)


@dataclass
class ProxyServer:
    """
    A single proxy server endpoint.

    Attributes:
        scheme: One of the ProxyScheme values
        host: Hostname or IP address of the proxy
        port: Port as entered by the user (kept as text, validated separately)
    """
    scheme: str
    host: str
    port: str

    @property
    def address(self) -> str:
        """Return the ``host:port`` form of the server."""
        return f"{self.host}:{self.port}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert server to dictionary."""
        return {
            'scheme': self.scheme,
            'host': self.host,
            'port': self.port
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProxyServer':
        """Create server from dictionary."""
        port = data.get('port')
        return cls(
            scheme=data.get('scheme', ProxyScheme.HTTP),
            host=data.get('host', ''),
            port='' if port is None else str(port)
        )
