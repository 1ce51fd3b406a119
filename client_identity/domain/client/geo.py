import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

import geoip2.database
import geoip2.errors
from opentelemetry import trace

from client_identity.core.configs import GeoConfiguration
from client_identity.core.logging import DebugTrace, get_logger
from client_identity.domain.common.utils import IPUtils, StringUtils
from client_identity.infrastructure.observability.metrics import GEO_LOOKUPS_TOTAL

from .headers import PROVIDER_HEADERS, ProviderHeaders, as_headers
from .models import Location

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


class CityReader(Protocol):
    def city(self, ip_address: str) -> Any: ...

    def close(self) -> None: ...


class GeoDatabase:
    """Process-wide holder for the GeoLite2 City reader.

    The reader is opened on first use and kept for the life of the process.
    Opens are serialized so concurrent first requests share one reader, and a
    failed open leaves the holder empty so the next request tries again.
    """

    def __init__(
        self,
        path: Path,
        opener: Callable[[str], CityReader] = geoip2.database.Reader,
        debug: bool = False,
    ) -> None:
        self.path = path
        self._opener = opener
        self._reader: CityReader | None = None
        self._lock = asyncio.Lock()
        self._failure_logged = False
        self._trace = DebugTrace('GEO', debug)

    @property
    def is_open(self) -> bool:
        return self._reader is not None

    async def get_reader(self) -> CityReader | None:
        if self._reader is not None:
            return self._reader

        async with self._lock:
            if self._reader is None:
                self._reader = await self._open()

        return self._reader

    async def _open(self) -> CityReader | None:
        self._trace('Opening database', path=str(self.path))

        if not self.path.is_file():
            self._log_failure(f'GeoLite2 database file not found at: {self.path}')
            return None

        # maxminddb.InvalidDatabaseError is a RuntimeError
        try:
            reader = await asyncio.to_thread(self._opener, str(self.path))
        except (OSError, RuntimeError, ValueError) as e:
            self._log_failure(f'Failed to open GeoLite2 database: {e}')
            return None

        self._failure_logged = False
        self._trace('Database opened successfully')
        return reader

    def _log_failure(self, message: str) -> None:
        if self._failure_logged:
            logger.debug(message)
        else:
            logger.error(message)
            self._failure_logged = True

    async def lookup(self, ip: str) -> Location | None:
        reader = await self.get_reader()
        if reader is None:
            return None

        parsed = IPUtils.parse_address(ip)
        address = str(parsed) if parsed is not None else IPUtils.strip_port(ip)
        try:
            record = reader.city(address)
        except (geoip2.errors.AddressNotFoundError, ValueError):
            record = None

        self._trace(
            'Database lookup', ip=address, result='found' if record else 'not found'
        )
        if record is None:
            return None

        country = record.country.iso_code or record.registered_country.iso_code
        region = record.subdivisions[0].iso_code if record.subdivisions else None
        city = record.city.names.get('en')

        self._trace('Database result', country=country, region=region, city=city)
        return Location.build(country, region, city)

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None


class LocationResolver:
    """Resolve country, region and city for a client address.

    Tiers, in order: local addresses resolve to nothing, CDN geolocation
    headers answer when the address came from the same connection, and the
    GeoLite2 database answers everything else.
    """

    def __init__(
        self,
        config: GeoConfiguration,
        database: GeoDatabase,
        is_local: Callable[[str], Awaitable[bool]] = IPUtils.is_local_address,
        providers: tuple[ProviderHeaders, ...] = PROVIDER_HEADERS,
    ) -> None:
        self.config = config
        self.database = database
        self.providers = providers
        self._is_local = is_local
        self._trace = DebugTrace('GEO', config.debug)

    async def get_location(
        self,
        ip: str | None,
        headers: Mapping[str, str] | None,
        has_payload_ip: bool = False,
    ) -> Location | None:
        if not ip or await self._is_local(ip):
            self._trace('Skipping localhost IP', ip=ip)
            GEO_LOOKUPS_TOTAL.labels('local').inc()
            return None

        self._trace('Looking up location', ip=ip)

        # edge headers describe the connection, not a caller-supplied address
        if not has_payload_ip and not self.config.skip_location_headers:
            location = self.from_provider_headers(as_headers(headers))
            if location is not None:
                GEO_LOOKUPS_TOTAL.labels('provider').inc()
                return location

        with tracer.start_as_current_span('geo.database_lookup'):
            location = await self.database.lookup(ip)

        if location is None:
            self._trace('No location data found', ip=ip)

        GEO_LOOKUPS_TOTAL.labels('database' if location is not None else 'miss').inc()
        return location

    def from_provider_headers(self, headers: Mapping[str, str]) -> Location | None:
        for provider in self.providers:
            country = headers.get(provider.country)
            if not country:
                continue

            country = StringUtils.latin1_to_utf8(country)
            region = StringUtils.latin1_to_utf8(headers.get(provider.region))
            city = StringUtils.latin1_to_utf8(headers.get(provider.city))

            self._trace(
                'Found location from headers',
                header=provider.country,
                country=country,
                region=region,
                city=city,
            )
            return Location.build(country, region, city)

        return None
