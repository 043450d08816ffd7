"""Network allow-list and the connection-level gate enforcing it."""

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from uvicorn.protocols.http.h11_impl import H11Protocol

from common.logging_config import get_logger
from host.exceptions import ConfigurationError

logger = get_logger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def parse_address(address: Optional[str]) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    """
    Parse a peer address, unwrapping IPv4-mapped IPv6 addresses.

    Returns:
        The address, or None if it is missing or not an IP literal
    """
    if not address:
        return None

    try:
        ip = ipaddress.ip_address(address.split('%', 1)[0].strip('[]'))
    except ValueError:
        return None

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


@dataclass(frozen=True)
class AllowList:
    """
    Immutable set of CIDR ranges permitted to connect.

    An empty allow-list does not restrict anybody. A non-empty one always
    admits loopback addresses.
    """
    networks: Tuple[IPNetwork, ...] = ()

    @classmethod
    def parse(cls, entries: Iterable[str]) -> 'AllowList':
        """
        Build an allow-list from CIDR strings; blank entries are skipped.

        Raises:
            ConfigurationError: If an entry is not a valid network
        """
        networks = []
        for entry in entries:
            text = str(entry).strip()
            if not text:
                continue
            try:
                networks.append(ipaddress.ip_network(text, strict=False))
            except ValueError as e:
                raise ConfigurationError(f"Invalid allow-list entry '{text}': {e}") from e
        return cls(networks=tuple(networks))

    @property
    def is_restricted(self) -> bool:
        return len(self.networks) > 0

    def permits(self, address: Optional[str]) -> bool:
        """
        Check whether a peer address may talk to the host.

        Args:
            address: Source address of the connection

        Returns:
            True if the allow-list is empty, the address is loopback, or it
            lies in one of the configured ranges
        """
        if not self.is_restricted:
            return True

        ip = parse_address(address)
        if ip is None:
            return False
        if ip.is_loopback:
            return True
        return any(ip in network for network in self.networks)

    def __len__(self) -> int:
        return len(self.networks)


class AllowListH11Protocol(H11Protocol):
    """
    uvicorn HTTP protocol that aborts connections from peers outside the
    allow-list before any byte of HTTP is exchanged.
    """

    allow_list: AllowList = AllowList()

    def connection_made(self, transport) -> None:
        super().connection_made(transport)

        peer = self.client[0] if self.client else None
        if self.allow_list.permits(peer):
            return

        logger.warning(f"Connection from {peer or 'unknown peer'} rejected by allow-list")
        transport.abort()


def allow_list_protocol(allow_list: AllowList) -> type:
    """
    Create a protocol class bound to the given allow-list, suitable for
    ``uvicorn.Config(http=...)``.
    """
    return type('BoundAllowListH11Protocol', (AllowListH11Protocol,), {'allow_list': allow_list})
