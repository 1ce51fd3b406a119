"""Tests for picking the client IP out of proxy and CDN headers."""

import pytest

from client_identity.core.configs import GeoConfiguration
from client_identity.domain.client import ClientIPExtractor
from client_identity.domain.client.headers import IP_ADDRESS_HEADERS

PUBLIC_IP = '203.0.113.5'


def _header_value(name: str, ip: str) -> str:
    if name == 'forwarded':
        return f'for={ip};proto=https;by=198.51.100.1'
    if name == 'x-forwarded-for':
        return f'{ip}, 10.0.0.1'
    return ip


@pytest.fixture
def extractor(geo_config: GeoConfiguration) -> ClientIPExtractor:
    return ClientIPExtractor(geo_config)


def test_no_headers_yields_none(extractor: ClientIPExtractor) -> None:
    assert extractor.extract_client_ip({}) is None
    assert extractor.extract_client_ip(None) is None


def test_private_addresses_in_every_header_yield_none(
    extractor: ClientIPExtractor,
) -> None:
    private = ['10.0.0.1', '172.20.1.1', '192.168.0.10', '127.0.0.1', '169.254.0.5']
    headers = {
        source.name: _header_value(source.name, private[i % len(private)])
        for i, source in enumerate(IP_ADDRESS_HEADERS)
    }

    assert extractor.extract_client_ip(headers) is None


@pytest.mark.parametrize('name', [source.name for source in IP_ADDRESS_HEADERS])
def test_single_public_header_wins_wherever_it_sits(
    extractor: ClientIPExtractor, name: str
) -> None:
    headers = {
        source.name: _header_value(source.name, '10.0.0.7')
        for source in IP_ADDRESS_HEADERS
    }
    headers[name] = _header_value(name, PUBLIC_IP)

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


def test_earlier_header_takes_precedence(extractor: ClientIPExtractor) -> None:
    headers = {
        'x-real-ip': '198.51.100.7',
        'cf-connecting-ip': PUBLIC_IP,
    }

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


def test_forwarded_for_is_checked_before_real_ip(extractor: ClientIPExtractor) -> None:
    headers = {
        'x-real-ip': '198.51.100.7',
        'x-forwarded-for': PUBLIC_IP,
    }

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


def test_private_forwarded_for_falls_back_to_later_header(
    extractor: ClientIPExtractor,
) -> None:
    headers = {
        'x-forwarded-for': '10.0.0.1',
        'x-real-ip': '198.51.100.7',
    }

    assert extractor.extract_client_ip(headers) == '198.51.100.7'


def test_only_first_forwarded_for_element_is_considered(
    extractor: ClientIPExtractor,
) -> None:
    assert extractor.extract_client_ip({'x-forwarded-for': f'10.0.0.1, {PUBLIC_IP}'}) is None
    assert (
        extractor.extract_client_ip({'x-forwarded-for': f'{PUBLIC_IP}, 10.0.0.1'})
        == PUBLIC_IP
    )


def test_forwarded_header_extracts_for_token(extractor: ClientIPExtractor) -> None:
    headers = {'forwarded': 'proto=https;for=192.0.2.60;by=203.0.113.43'}

    assert extractor.extract_client_ip(headers) == '192.0.2.60'


def test_forwarded_header_with_bracketed_ipv6(extractor: ClientIPExtractor) -> None:
    headers = {'forwarded': 'for="[2001:db8:cafe::17]:4711"'}

    assert extractor.extract_client_ip(headers) == '[2001:db8:cafe::17]'


def test_header_names_are_case_insensitive(extractor: ClientIPExtractor) -> None:
    assert extractor.extract_client_ip({'X-Forwarded-For': PUBLIC_IP}) == PUBLIC_IP


def test_unparseable_values_are_skipped(extractor: ClientIPExtractor) -> None:
    headers = {
        'true-client-ip': 'unknown',
        'forwarded': 'for=_hidden',
        'x-client-ip': PUBLIC_IP,
    }

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


def test_ipv4_mapped_private_address_is_skipped(extractor: ClientIPExtractor) -> None:
    headers = {'cf-connecting-ip': '::ffff:192.168.1.20', 'x-real-ip': PUBLIC_IP}

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


def test_empty_forwarded_for_is_skipped(extractor: ClientIPExtractor) -> None:
    headers = {'x-forwarded-for': ' , 198.51.100.7', 'x-real-ip': PUBLIC_IP}

    assert extractor.extract_client_ip(headers) == PUBLIC_IP


class TestOverrideHeader:
    def test_override_is_trusted_without_filtering(self) -> None:
        extractor = ClientIPExtractor(GeoConfiguration(client_ip_header='X-Client-Addr'))
        headers = {'x-client-addr': '10.1.2.3', 'cf-connecting-ip': PUBLIC_IP}

        assert extractor.extract_client_ip(headers) == '10.1.2.3'

    def test_override_forwarded_for_takes_first_element(self) -> None:
        extractor = ClientIPExtractor(GeoConfiguration(client_ip_header='x-forwarded-for'))
        headers = {'x-forwarded-for': '10.0.0.1, 203.0.113.5'}

        assert extractor.extract_client_ip(headers) == '10.0.0.1'

    def test_override_forwarded_extracts_for_token(self) -> None:
        extractor = ClientIPExtractor(GeoConfiguration(client_ip_header='forwarded'))
        headers = {'forwarded': 'for=192.168.0.2;proto=http'}

        assert extractor.extract_client_ip(headers) == '192.168.0.2'

    def test_missing_override_falls_back_to_precedence_list(self) -> None:
        extractor = ClientIPExtractor(GeoConfiguration(client_ip_header='x-client-addr'))

        assert extractor.extract_client_ip({'x-real-ip': PUBLIC_IP}) == PUBLIC_IP


def test_debug_tracing_does_not_change_the_result(log_messages: list[str]) -> None:
    headers = {
        'x-forwarded-for': '10.0.0.1',
        'authorization': 'Bearer secret',
        'x-real-ip': PUBLIC_IP,
    }

    quiet = ClientIPExtractor(GeoConfiguration(debug=False)).extract_client_ip(headers)
    assert log_messages == []

    traced = ClientIPExtractor(GeoConfiguration(debug=True)).extract_client_ip(headers)

    assert quiet == traced == PUBLIC_IP
    assert 'Skipping private IP' in log_messages
    assert 'Using header' in log_messages
