from .bootstrap import configure_observability
from .metrics import (
    CLIENT_IP_EXTRACTIONS_TOTAL,
    GEO_LOOKUPS_TOTAL,
    IP_BLOCKLIST_CHECKS_TOTAL,
)

__all__ = [
    'CLIENT_IP_EXTRACTIONS_TOTAL',
    'GEO_LOOKUPS_TOTAL',
    'IP_BLOCKLIST_CHECKS_TOTAL',
    'configure_observability',
]
