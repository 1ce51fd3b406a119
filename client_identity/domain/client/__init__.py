from .blocklist import IPBlocklist
from .extractor import ClientIPExtractor
from .geo import GeoDatabase, LocationResolver
from .models import ClientInfo, ClientPayload, Location
from .service import ClientInfoResolver
from .user_agent import DeviceClassifier, UserAgentParser

__all__ = [
    'ClientIPExtractor',
    'ClientInfo',
    'ClientInfoResolver',
    'ClientPayload',
    'DeviceClassifier',
    'GeoDatabase',
    'IPBlocklist',
    'Location',
    'LocationResolver',
    'UserAgentParser',
]
