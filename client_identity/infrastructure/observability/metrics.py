from prometheus_client import Counter

CLIENT_IP_EXTRACTIONS_TOTAL = Counter(
    'client_ip_extractions_total',
    'Client IP extractions by the header that supplied the address',
    ['source'],
)

GEO_LOOKUPS_TOTAL = Counter(
    'geo_lookups_total',
    'Location resolutions by the tier that answered',
    ['tier'],
)

IP_BLOCKLIST_CHECKS_TOTAL = Counter(
    'ip_blocklist_checks_total',
    'Blocklist checks by outcome',
    ['result'],
)
