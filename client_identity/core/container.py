from fastapi import FastAPI
from kink import di

from client_identity.core.application import get_application
from client_identity.core.config import Configuration, get_config
from client_identity.core.configs import GeoConfiguration
from client_identity.domain.client import (
    ClientInfoResolver,
    ClientIPExtractor,
    DeviceClassifier,
    GeoDatabase,
    IPBlocklist,
    LocationResolver,
    UserAgentParser,
)


def wire_dependencies() -> None:
    _wire_core_dependencies()
    _wire_infrastructure_dependencies()
    _wire_services()

    di[FastAPI] = get_application()  # type: ignore[call-arg]


# noinspection PyArgumentList
def _wire_core_dependencies() -> None:
    """Wire core application dependencies."""
    di[Configuration] = get_config()
    di[GeoConfiguration] = di[Configuration].geo


def _wire_infrastructure_dependencies() -> None:
    geo = di[GeoConfiguration]
    di[GeoDatabase] = GeoDatabase(geo.resolved_database_path, debug=geo.debug)


def _wire_services() -> None:
    di[UserAgentParser] = UserAgentParser()
    di[ClientIPExtractor] = ClientIPExtractor(di[GeoConfiguration])
    di[IPBlocklist] = IPBlocklist(di[GeoConfiguration])
    di[DeviceClassifier] = DeviceClassifier(di[UserAgentParser])
    di[LocationResolver] = LocationResolver(di[GeoConfiguration], di[GeoDatabase])
    di[ClientInfoResolver] = ClientInfoResolver(
        di[GeoConfiguration],
        di[ClientIPExtractor],
        di[LocationResolver],
        di[UserAgentParser],
        di[DeviceClassifier],
    )
