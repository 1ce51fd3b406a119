"""Tests for address normalization and the private address policy."""

from ipaddress import ip_address

import pytest

from client_identity.domain.common.utils import IPUtils, PrivateAddressPolicy


@pytest.mark.parametrize(
    ('address', 'expected'),
    [
        ('[2001:db8::1]:8080', '[2001:db8::1]'),
        ('[2001:db8::1]', '[2001:db8::1]'),
        ('[2001:db8::1', '[2001:db8::1'),
        ('192.0.2.1:443', '192.0.2.1'),
        ('192.0.2.1', '192.0.2.1'),
        ('example.com:8080', 'example.com'),
        ('2001:db8::1', '2001:db8::1'),
        ('', ''),
    ],
)
def test_strip_port(address: str, expected: str) -> None:
    assert IPUtils.strip_port(address) == expected


def test_parse_address_accepts_ports_and_brackets() -> None:
    assert IPUtils.parse_address('[2001:db8::1]:8080') == ip_address('2001:db8::1')
    assert IPUtils.parse_address(' 192.0.2.1:443 ') == ip_address('192.0.2.1')
    assert IPUtils.parse_address('::ffff:192.0.2.1') == ip_address('::ffff:192.0.2.1')


@pytest.mark.parametrize('value', ['unknown', '_hidden', '999.1.1.1', 'for=x'])
def test_parse_address_rejects_garbage(value: str) -> None:
    assert IPUtils.parse_address(value) is None


def test_parse_network_is_lenient_about_host_bits() -> None:
    network = IPUtils.parse_network('203.0.113.9/24')

    assert network is not None
    assert str(network) == '203.0.113.0/24'
    assert IPUtils.parse_network('203.0.113.0/33') is None


def test_in_network_never_crosses_families() -> None:
    network = IPUtils.parse_network('::/0')

    assert network is not None
    assert not IPUtils.in_network(ip_address('203.0.113.1'), network)
    assert IPUtils.in_network(ip_address('2001:db8::1'), network)


class TestPrivateAddressPolicy:
    @pytest.mark.parametrize(
        'address',
        [
            '10.0.0.1',
            '172.16.0.1',
            '172.31.255.254',
            '192.168.1.1',
            '127.0.0.1',
            '169.254.10.20',
            '::1',
            'fe80::1',
            'fd12:3456::1',
            '::ffff:10.1.2.3',
        ],
    )
    def test_private_addresses(self, address: str) -> None:
        assert PrivateAddressPolicy().is_private(ip_address(address))

    @pytest.mark.parametrize(
        'address',
        ['203.0.113.5', '198.51.100.7', '172.32.0.1', '8.8.8.8', '2001:db8::1'],
    )
    def test_public_addresses(self, address: str) -> None:
        assert not PrivateAddressPolicy().is_private(ip_address(address))

    def test_extend_adds_networks(self) -> None:
        policy = PrivateAddressPolicy().extend('100.64.0.0/10')

        assert policy.is_private(ip_address('100.64.1.1'))
        assert policy.is_private(ip_address('10.0.0.1'))
        assert not PrivateAddressPolicy().is_private(ip_address('100.64.1.1'))


class TestIsLocalAddress:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'address', ['127.0.0.1', '::1', '[::1]:3000', '0.0.0.0', 'localhost']
    )
    async def test_loopback_is_local(self, address: str) -> None:
        assert await IPUtils.is_local_address(address)

    @pytest.mark.asyncio
    async def test_empty_is_not_local(self) -> None:
        assert not await IPUtils.is_local_address('')

    @pytest.mark.asyncio
    async def test_interface_addresses_are_local(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            IPUtils,
            '_interface_addresses',
            staticmethod(lambda: {ip_address('192.0.2.10')}),
        )

        assert await IPUtils.is_local_address('192.0.2.10')
        assert not await IPUtils.is_local_address('203.0.113.5')

    @pytest.mark.asyncio
    async def test_unknown_hostname_is_not_local(self) -> None:
        assert not await IPUtils.is_local_address('example.com')
