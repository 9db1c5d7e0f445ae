"""
IPv4 subnet arithmetic.

Addresses are plain Python ints in [0, 2**32). Python ints never wrap,
so every shift and complement is masked back to 32 bits explicitly.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from calcengine.errors import FormatError

logger = logging.getLogger(__name__)

MAX_ADDRESS = 0xFFFFFFFF
ADDRESS_BITS = 32


@dataclass(frozen=True)
class HostCount:
    total: int
    usable: int


@dataclass(frozen=True)
class SubnetReport:
    """Everything derivable from (address, prefix length)."""
    address: str
    cidr: int
    subnet_mask: str
    wildcard_mask: str
    network_address: str
    broadcast_address: str
    host_range_start: str
    host_range_end: str
    total_hosts: int
    usable_hosts: int


def parse_address(text: str) -> int:
    """
    Parse a dotted-quad IPv4 address into a 32-bit unsigned integer.

    Leading zeros in an octet are accepted ('010' == 10) and dropped by
    format_address.

    Raises:
        FormatError: not exactly four dot-separated integers in [0, 255].
    """
    if not isinstance(text, str):
        raise FormatError(f"Invalid IPv4 address: {text!r}", text)

    parts = text.strip().split('.')
    if len(parts) != 4:
        raise FormatError(f"Invalid IPv4 address: {text!r}", text)

    value = 0
    for part in parts:
        # str.isdigit() accepts non-ASCII digits; int() would too
        if not part or not part.isascii() or not part.isdigit():
            raise FormatError(f"Invalid IPv4 address: {text!r}", text)
        octet = int(part)
        if octet > 255:
            raise FormatError(f"Invalid IPv4 address: {text!r} (octet {part} out of range)", text)
        value = (value << 8) | octet

    return value


def format_address(value: int) -> str:
    """Format a 32-bit unsigned integer as a dotted-quad string."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_ADDRESS:
        raise FormatError(f"Not a 32-bit unsigned address: {value!r}", value)
    return '.'.join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def _check_prefix(prefix_length: int) -> None:
    if isinstance(prefix_length, bool) or not isinstance(prefix_length, int) \
            or not 0 <= prefix_length <= ADDRESS_BITS:
        raise FormatError(f"CIDR prefix must be an integer in 0..32, got {prefix_length!r}", prefix_length)


def compute_subnet_mask(prefix_length: int) -> int:
    """Top `prefix_length` bits set, the rest zero."""
    _check_prefix(prefix_length)
    return (MAX_ADDRESS << (ADDRESS_BITS - prefix_length)) & MAX_ADDRESS


def derive_network(address: int, mask: int) -> int:
    return address & mask


def derive_broadcast(network: int, mask: int) -> int:
    return (network | (~mask & MAX_ADDRESS)) & MAX_ADDRESS


def count_hosts(prefix_length: int) -> HostCount:
    """
    Total and usable host counts for a prefix.

    /31 and /32 blocks have no network/broadcast pair to reserve, so
    usable is reported as 0 rather than total - 2.
    """
    _check_prefix(prefix_length)
    total = 1 << (ADDRESS_BITS - prefix_length)
    usable = total - 2 if prefix_length <= 30 else 0
    return HostCount(total=total, usable=usable)


def host_range(network: int, broadcast: int, usable: Optional[int] = None) -> Optional[Tuple[int, int]]:
    """
    First and last usable host, or None when the block has no usable hosts.

    If `usable` is omitted it is inferred from the block size.
    """
    if usable is None:
        usable = max(broadcast - network - 1, 0)
    if usable <= 0:
        return None
    return network + 1, broadcast - 1


def parse_cidr(text: str) -> Tuple[int, int]:
    """Parse 'a.b.c.d/p' into (address, prefix_length)."""
    if not isinstance(text, str) or text.count('/') != 1:
        raise FormatError(f"Invalid CIDR notation: {text!r}", text)
    addr_text, prefix_text = text.strip().split('/')
    prefix_text = prefix_text.strip()
    if not prefix_text.isascii() or not prefix_text.isdigit():
        raise FormatError(f"Invalid CIDR notation: {text!r}", text)
    prefix_length = int(prefix_text)
    _check_prefix(prefix_length)
    return parse_address(addr_text), prefix_length


def compute_subnet(address: int, prefix_length: int) -> SubnetReport:
    """
    Derive mask, network, broadcast and host range for an address/prefix.

    Args:
        address: 32-bit unsigned address (see parse_address)
        prefix_length: CIDR prefix, 0..32

    Returns:
        SubnetReport with dotted-quad strings; host range is 'N/A' when
        there are no usable hosts.
    """
    address_text = format_address(address)
    mask = compute_subnet_mask(prefix_length)
    network = derive_network(address, mask)
    broadcast = derive_broadcast(network, mask)
    hosts = count_hosts(prefix_length)
    hosts_range = host_range(network, broadcast, hosts.usable)

    if hosts_range is None:
        first, last = 'N/A', 'N/A'
    else:
        first, last = format_address(hosts_range[0]), format_address(hosts_range[1])

    logger.debug("Subnet %s/%d -> network %s", address_text, prefix_length, format_address(network))
    return SubnetReport(
        address=address_text,
        cidr=prefix_length,
        subnet_mask=format_address(mask),
        wildcard_mask=format_address(~mask & MAX_ADDRESS),
        network_address=format_address(network),
        broadcast_address=format_address(broadcast),
        host_range_start=first,
        host_range_end=last,
        total_hosts=hosts.total,
        usable_hosts=hosts.usable,
    )
