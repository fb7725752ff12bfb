"""
IPv4 address and subnet mask helpers used by CIDR rules.

Hosts are never resolved here: a CIDR rule only applies to hosts that are
already literal dotted-quad addresses.
"""

import re
from typing import List, Optional, Tuple

IPV4_PATTERN = re.compile(r'(\d{1,3}\.){3}\d{1,3}', re.ASCII)

ALL_ONES_MASK = "255.255.255.255"


def prefix_to_mask(prefix: int) -> str:
    """
    Convert a CIDR prefix length to a dotted-quad subnet mask.

    Args:
        prefix: Prefix length, 0 to 32

    Returns:
        Mask such as "255.255.0.0"; out-of-range prefixes give the
        all-ones mask.
    """
    if prefix < 0 or prefix > 32:
        return ALL_ONES_MASK

    mask = (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF
    return '.'.join(str((mask >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def mask_to_prefix(mask: str) -> Optional[int]:
    """Count the set bits of a dotted-quad mask; None if it is not an address."""
    octets = parse_ipv4_octets(mask)
    if octets is None:
        return None
    return sum(bin(octet & 0xFF).count('1') for octet in octets)


def parse_ipv4_octets(text: str) -> Optional[List[int]]:
    """Split a dotted-quad string into four integers, or None if it isn't one."""
    if not IPV4_PATTERN.fullmatch(text):
        return None
    return [int(part) for part in text.split('.')]


def split_cidr(pattern: str) -> Optional[Tuple[str, int]]:
    """
    Split ``network/prefix`` into its parts.

    Returns:
        (network, prefix) or None when either part is missing or the
        prefix is not an integer.
    """
    parts = pattern.split('/')
    if len(parts) < 2 or not parts[0] or not parts[1] or not parts[1].isascii():
        return None
    try:
        return parts[0], int(parts[1])
    except ValueError:
        return None


def match_cidr(host: str, pattern: str) -> bool:
    """
    Check if a literal IPv4 host lies inside a CIDR network.

    Both addresses are masked octet by octet; the host matches when all four
    masked octets are equal. Non-IP hosts and malformed patterns never match.
    """
    host_octets = parse_ipv4_octets(host)
    if host_octets is None:
        return False

    parts = split_cidr(pattern)
    if parts is None:
        return False
    network, prefix = parts

    network_octets = parse_ipv4_octets(network)
    if network_octets is None:
        return False
    mask_octets = [int(part) for part in prefix_to_mask(prefix).split('.')]

    for host_octet, network_octet, mask_octet in zip(host_octets, network_octets, mask_octets):
        if (host_octet & mask_octet) != (network_octet & mask_octet):
            return False
    return True
