from .api import APIConfiguration
from .geo import GeoConfiguration
from .log import LogConfiguration
from .observability import ObservabilityConfiguration

__all__ = [
    'APIConfiguration',
    'GeoConfiguration',
    'LogConfiguration',
    'ObservabilityConfiguration',
]
