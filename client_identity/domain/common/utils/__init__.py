from .int import IntUtils
from .ip import IPAddress, IPNetwork, IPUtils, PrivateAddressPolicy
from .sanitization import DataSanitizer
from .string import StringUtils

__all__ = [
    'DataSanitizer',
    'IPAddress',
    'IPNetwork',
    'IPUtils',
    'IntUtils',
    'PrivateAddressPolicy',
    'StringUtils',
]
