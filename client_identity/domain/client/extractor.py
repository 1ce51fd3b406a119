from collections.abc import Mapping

from client_identity.core.configs import GeoConfiguration
from client_identity.core.logging import DebugTrace
from client_identity.domain.common.utils import (
    DataSanitizer,
    IPUtils,
    PrivateAddressPolicy,
)
from client_identity.infrastructure.observability.metrics import (
    CLIENT_IP_EXTRACTIONS_TOTAL,
)

from .headers import IP_ADDRESS_HEADERS, HeaderSource, as_headers


class ClientIPExtractor:
    """Pick the public client address out of proxy and CDN headers.

    Every header is client controlled. Sources are walked from the most to
    the least trusted and internal addresses are skipped, unless the operator
    names a single header to trust through ``CLIENT_IP_HEADER``.
    """

    def __init__(
        self,
        config: GeoConfiguration,
        policy: PrivateAddressPolicy | None = None,
        sources: tuple[HeaderSource, ...] = IP_ADDRESS_HEADERS,
    ) -> None:
        self.config = config
        self.policy = policy or PrivateAddressPolicy()
        self.sources = sources
        self._trace = DebugTrace('IP', config.debug)

    def extract_client_ip(self, headers: Mapping[str, str] | None) -> str | None:
        headers = as_headers(headers)

        override = self._from_override(headers)
        if override is not None:
            CLIENT_IP_EXTRACTIONS_TOTAL.labels('override').inc()
            return override

        self._trace(
            'Available IP headers',
            headers=DataSanitizer.sanitize_headers(
                headers, [source.name for source in self.sources]
            ),
        )

        for source in self.sources:
            value = source.read(headers)
            if value is None:
                continue

            candidate = source.extraction.extract(value)
            if not candidate:
                continue

            address = IPUtils.parse_address(candidate)
            if address is None:
                self._trace(
                    'Skipping unparseable value', header=source.name, value=candidate
                )
                continue

            if self.policy.is_private(address):
                self._trace('Skipping private IP', header=source.name, ip=candidate)
                continue

            self._trace('Using header', header=source.name, ip=candidate)
            CLIENT_IP_EXTRACTIONS_TOTAL.labels(source.name).inc()
            return candidate

        self._trace('No valid public IP address found in any header')
        CLIENT_IP_EXTRACTIONS_TOTAL.labels('none').inc()
        return None

    def _from_override(self, headers: Mapping[str, str]) -> str | None:
        if not self.config.client_ip_header:
            return None

        source = HeaderSource.named(self.config.client_ip_header)
        value = source.read(headers)
        if value is None:
            return None

        # an empty first x-forwarded-for element keeps the raw value
        ip = source.extraction.extract(value) or value
        self._trace('Using custom header', header=source.name, ip=ip)
        return ip
