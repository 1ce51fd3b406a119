from dataclasses import dataclass
from functools import lru_cache

from client_identity.core.configs import GeoConfiguration
from client_identity.core.logging import get_logger
from client_identity.domain.common.utils import IPNetwork, IPUtils, StringUtils
from client_identity.infrastructure.observability.metrics import (
    IP_BLOCKLIST_CHECKS_TOTAL,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class BlocklistRule:
    """An exact address literal, or a CIDR range when ``network`` is set."""

    value: str
    network: IPNetwork | None = None

    def matches(self, client_ip: str) -> bool:
        if self.value == client_ip:
            return True

        if self.network is None:
            return False

        address = IPUtils.parse_address(client_ip)
        return address is not None and IPUtils.in_network(address, self.network)


@lru_cache(maxsize=16)
def parse_rules(ignore_ip: str) -> tuple[BlocklistRule, ...]:
    """Parse the ``IGNORE_IP`` value once per distinct string."""
    rules = []
    for value in StringUtils.split_csv(ignore_ip):
        if value.find('/') > 0:
            network = IPUtils.parse_network(value)
            if network is None:
                logger.warning(f'Ignoring malformed CIDR in IGNORE_IP: {value}')
            rules.append(BlocklistRule(value, network))
        else:
            rules.append(BlocklistRule(value))
    return tuple(rules)


class IPBlocklist:
    """Operator-configured addresses whose traffic should be ignored."""

    def __init__(self, config: GeoConfiguration) -> None:
        self.config = config

    @property
    def rules(self) -> tuple[BlocklistRule, ...]:
        return parse_rules(self.config.ignore_ip)

    def has_blocked_ip(self, client_ip: str | None) -> bool:
        if not client_ip:
            return False

        blocked = any(rule.matches(client_ip) for rule in self.rules)
        IP_BLOCKLIST_CHECKS_TOTAL.labels('blocked' if blocked else 'allowed').inc()
        return blocked
