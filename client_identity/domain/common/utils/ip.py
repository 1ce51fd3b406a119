"""IP address utilities.

Thin helpers over :mod:`ipaddress` for values taken from request headers,
which may carry ports, brackets or plain garbage.
"""

import asyncio
import re
from collections.abc import Iterable
from ipaddress import (
    IPv4Address,
    IPv4Network,
    IPv6Address,
    IPv6Network,
    ip_address,
    ip_network,
)
from typing import ClassVar

import psutil

IPAddress = IPv4Address | IPv6Address
IPNetwork = IPv4Network | IPv6Network


class IPUtils:
    _HOST_RE = re.compile(r'^[a-zA-Z0-9.-]+$')
    _LOCAL_HOSTNAMES: ClassVar = frozenset({'localhost', 'localhost.localdomain'})

    @staticmethod
    def strip_port(address: str) -> str:
        """Remove a trailing ``:port`` from *address*.

        ``[v6]:port`` keeps the brackets, ``v4:port`` and ``host:port`` lose
        the port, and a bare IPv6 address is returned untouched.
        """
        if address.startswith('['):
            end = address.find(']')
            return address[: end + 1] if end != -1 else address

        idx = address.rfind(':')
        if idx != -1 and (
            '.' in address or IPUtils._HOST_RE.match(address[:idx]) is not None
        ):
            return address[:idx]

        return address

    @staticmethod
    def unwrap(address: str) -> str:
        """Strip port and IPv6 brackets so *address* can be parsed."""
        address = IPUtils.strip_port(address.strip())
        if address.startswith('[') and address.endswith(']'):
            address = address[1:-1]
        return address

    @staticmethod
    def parse_address(address: str) -> IPAddress | None:
        # bare literals first, strip_port mangles ::ffff:a.b.c.d
        for candidate in (address.strip(), IPUtils.unwrap(address)):
            try:
                return ip_address(candidate)
            except ValueError:
                continue
        return None

    @staticmethod
    def parse_network(cidr: str) -> IPNetwork | None:
        try:
            return ip_network(cidr.strip(), strict=False)
        except ValueError:
            return None

    @staticmethod
    def in_network(address: IPAddress, network: IPNetwork) -> bool:
        """Membership check that never crosses address families."""
        return address.version == network.version and address in network

    @staticmethod
    async def is_local_address(address: str) -> bool:
        """Whether *address* points back at this machine.

        Loopback and unspecified addresses are local, as is any address bound
        to one of the host's network interfaces.
        """
        if not address:
            return False

        parsed = IPUtils.parse_address(address)
        if parsed is None:
            return IPUtils.unwrap(address).lower() in IPUtils._LOCAL_HOSTNAMES

        if isinstance(parsed, IPv6Address) and parsed.ipv4_mapped:
            parsed = parsed.ipv4_mapped

        if parsed.is_loopback or parsed.is_unspecified:
            return True

        interfaces = await asyncio.to_thread(IPUtils._interface_addresses)
        return parsed in interfaces

    @staticmethod
    def _interface_addresses() -> set[IPAddress]:
        addresses: set[IPAddress] = set()
        for snics in psutil.net_if_addrs().values():
            for snic in snics:
                # scoped link-local addresses come back as fe80::1%eth0
                parsed = IPUtils.parse_address(snic.address.split('%', 1)[0])
                if parsed is not None:
                    addresses.add(parsed)
        return addresses


class PrivateAddressPolicy:
    """Decides whether an address is internal and cannot be the real client."""

    DEFAULT_NETWORKS: ClassVar = (
        '10.0.0.0/8',
        '172.16.0.0/12',
        '192.168.0.0/16',
        '127.0.0.0/8',
        '169.254.0.0/16',
        '::1/128',
        'fe80::/10',
        'fc00::/7',
    )

    def __init__(self, networks: Iterable[str] = DEFAULT_NETWORKS) -> None:
        self.networks: list[IPNetwork] = [ip_network(n) for n in networks]

    def extend(self, *networks: str) -> 'PrivateAddressPolicy':
        return PrivateAddressPolicy(
            [str(n) for n in self.networks] + list(networks)
        )

    def is_private(self, address: IPAddress) -> bool:
        if isinstance(address, IPv6Address) and address.ipv4_mapped:
            address = address.ipv4_mapped

        return any(IPUtils.in_network(address, network) for network in self.networks)
