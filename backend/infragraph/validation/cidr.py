"""
CIDR helpers for VPC/subnet address checks.
"""

import ipaddress
from typing import Optional, Union

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def parse_cidr(text: str) -> Optional[Network]:
    """
    Parse "a.b.c.d/n" notation. Host bits may be set ("10.0.1.5/24" is
    read as 10.0.1.0/24); a bare address without a prefix is rejected.
    """
    if not isinstance(text, str) or "/" not in text:
        return None
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError:
        return None


def is_valid_cidr(text: str) -> bool:
    return parse_cidr(text) is not None


def last_address(network: Network) -> Address:
    # network address with every host bit set
    return ipaddress.ip_address(int(network.network_address) | int(network.hostmask))


def contains_address(network: Network, address: Address) -> bool:
    if network.version != address.version:
        return False
    return address in network


def cidr_within(parent: Network, child: Network) -> bool:
    """True if child's whole range lies inside parent."""
    if parent is None or child is None:
        return False
    return (
        contains_address(parent, child.network_address)
        and contains_address(parent, last_address(child))
    )


def cidr_overlaps(a: Network, b: Network) -> bool:
    if a is None or b is None or a.version != b.version:
        return False
    return contains_address(a, b.network_address) or contains_address(b, a.network_address)
