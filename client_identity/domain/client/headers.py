"""Request headers consulted for the client address and location."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from starlette.datastructures import Headers

_FORWARDED_FOR_RE = re.compile(r'for="?(\[?[0-9a-fA-F:.]+\]?)')


class Extraction(Enum):
    VERBATIM = 'verbatim'
    FIRST_OF_LIST = 'first_of_list'
    FORWARDED_FOR = 'forwarded_for'

    def extract(self, value: str) -> str:
        if self is Extraction.FIRST_OF_LIST:
            return value.split(',')[0].strip()

        if self is Extraction.FORWARDED_FOR:
            match = _FORWARDED_FOR_RE.search(value)
            return match.group(1) if match else value

        return value

    @classmethod
    def for_header(cls, name: str) -> 'Extraction':
        return _EXTRACTIONS.get(name.lower(), cls.VERBATIM)


_EXTRACTIONS = {
    'x-forwarded-for': Extraction.FIRST_OF_LIST,
    'forwarded': Extraction.FORWARDED_FOR,
}


@dataclass(frozen=True)
class HeaderSource:
    name: str
    extraction: Extraction = Extraction.VERBATIM

    @classmethod
    def named(cls, name: str) -> 'HeaderSource':
        return cls(name.lower(), Extraction.for_header(name))

    def read(self, headers: Mapping[str, str]) -> str | None:
        """Raw header value, or ``None`` when absent or empty."""
        return headers.get(self.name) or None


# Most trusted first. x-forwarded-for is checked before x-real-ip, which
# often carries the address of an internal hop.
IP_ADDRESS_HEADERS: tuple[HeaderSource, ...] = tuple(
    HeaderSource.named(name)
    for name in (
        'true-client-ip',  # Akamai / Cloudflare Enterprise
        'cf-connecting-ip',  # Cloudflare
        'fastly-client-ip',  # Fastly
        'x-nf-client-connection-ip',  # Netlify
        'do-connecting-ip',  # DigitalOcean
        'x-forwarded-for',
        'x-appengine-user-ip',  # Google App Engine
        'x-real-ip',  # nginx
        'forwarded',
        'x-client-ip',
        'x-cluster-client-ip',
        'x-forwarded',
        'x-original-forwarded-for',
    )
)


@dataclass(frozen=True)
class ProviderHeaders:
    provider: str
    country: str
    region: str
    city: str


PROVIDER_HEADERS: tuple[ProviderHeaders, ...] = (
    ProviderHeaders('cloudflare', 'cf-ipcountry', 'cf-region-code', 'cf-ipcity'),
    ProviderHeaders(
        'vercel',
        'x-vercel-ip-country',
        'x-vercel-ip-country-region',
        'x-vercel-ip-city',
    ),
    ProviderHeaders(
        'cloudfront',
        'cloudfront-viewer-country',
        'cloudfront-viewer-country-region',
        'cloudfront-viewer-city',
    ),
)


def _encode_value(value: str) -> bytes:
    try:
        return value.encode('latin-1')
    except UnicodeEncodeError:
        return value.encode('utf-8')


def as_headers(headers: Mapping[str, str] | None) -> Headers:
    """Case-insensitive view over *headers*, decoded the way ASGI servers do."""
    if isinstance(headers, Headers):
        return headers

    return Headers(
        raw=[
            (str(key).lower().encode('latin-1'), _encode_value(str(value)))
            for key, value in (headers or {}).items()
        ]
    )
