"""Shared fixtures: isolated configuration and a fake GeoLite2 reader."""

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import geoip2.errors
import pytest
from loguru import logger

from client_identity.core.configs import GeoConfiguration
from client_identity.domain.client import GeoDatabase

GEO_ENV_VARS = (
    'CLIENT_IP_HEADER',
    'DEBUG_GEO',
    'SKIP_LOCATION_HEADERS',
    'GEOLITE_DB_PATH',
    'IGNORE_IP',
    'ENVIRONMENT',
)


def city_record(
    country: str | None = 'US',
    subdivision: str | None = '06',
    city: str | None = 'Los Angeles',
    registered_country: str | None = None,
) -> Any:
    """Object shaped like ``geoip2.models.City`` for the fields we read."""
    return SimpleNamespace(
        country=SimpleNamespace(iso_code=country),
        registered_country=SimpleNamespace(iso_code=registered_country),
        subdivisions=(
            (SimpleNamespace(iso_code=subdivision),) if subdivision else ()
        ),
        city=SimpleNamespace(names={'en': city} if city else {}),
    )


class FakeReader:
    def __init__(self, records: dict[str, Any]) -> None:
        self.records = records
        self.queries: list[str] = []
        self.closed = False

    def city(self, ip_address: str) -> Any:
        self.queries.append(ip_address)
        if ip_address not in self.records:
            msg = f'The address {ip_address} is not in the database.'
            raise geoip2.errors.AddressNotFoundError(msg)
        return self.records[ip_address]

    def close(self) -> None:
        self.closed = True


class FakeOpener:
    """Stands in for ``geoip2.database.Reader`` and counts open attempts."""

    def __init__(self, reader: FakeReader, failures: int = 0) -> None:
        self.reader = reader
        self.failures = failures
        self.calls: list[str] = []

    def __call__(self, path: str) -> FakeReader:
        self.calls.append(path)
        if self.failures:
            self.failures -= 1
            msg = 'Error looking for metadata marker'
            raise RuntimeError(msg)
        return self.reader


async def never_local(_ip: str) -> bool:
    return False


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in GEO_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def geo_config() -> GeoConfiguration:
    return GeoConfiguration()


@pytest.fixture
def database_file(tmp_path: Path) -> Path:
    path = tmp_path / 'GeoLite2-City.mmdb'
    path.write_bytes(b'')
    return path


@pytest.fixture
def reader() -> FakeReader:
    return FakeReader(
        {
            '203.0.113.5': city_record(),
            '198.51.100.7': city_record('DE', 'BE', 'Berlin'),
            '2001:db8::1': city_record('JP', '13', 'Tokyo'),
        }
    )


@pytest.fixture
def opener(reader: FakeReader) -> FakeOpener:
    return FakeOpener(reader)


@pytest.fixture
def database(database_file: Path, opener: FakeOpener) -> GeoDatabase:
    return GeoDatabase(database_file, opener=opener)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record['message']), level='DEBUG'
    )
    yield messages
    logger.remove(handler_id)
